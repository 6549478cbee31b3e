""" The core class bits of TileShelf.

Exceptions shared by the other modules live here, along with a couple of
small helpers for loading pluggable classes and for making request-derived
strings safe to show to people.

KnownUnknown is the base for problems an operator can do something about:
a missing tileset, a remote path where a local one is required, a store that
went away while the server was running. OutOfBounds and StoreUnavailable are
the two flavors raised while serving a single request.
"""

from sys import modules
from html import escape

class KnownUnknown(Exception):
    """ There are known unknowns. That is to say, there are things that we now know we don't know.

        This exception gets thrown in a couple places where common mistakes are made.
    """
    pass

class OutOfBounds(KnownUnknown):
    """ A tile address that does not exist in the tile pyramid.

        Raised by Geography.storageAddress() for negative or oversized
        coordinates; the router answers these with an empty tile.
    """
    pass

class StoreUnavailable(KnownUnknown):
    """ The tile store could not be read while serving a request.

        Carries the original sqlite error as its only argument.
    """
    pass

def loadClassPath(classpath):
    """ Load external class based on a path.

        Example classpath: "Module.Submodule:Classname".
    """
    if ':' not in classpath:
        raise KnownUnknown('Class path must look like "Module.Submodule:Classname", not "%s"' % classpath)

    modname, objname = classpath.split(':', 1)

    try:
        __import__(modname)
        module = modules[modname]
        _class = getattr(module, objname)

    except (ImportError, AttributeError) as e:
        raise KnownUnknown('Tried to import %s, but: %s' % (classpath, e))

    return _class

def htmlSafe(value):
    """ Escape a request-derived string for embedding in an HTML body.
    """
    return escape(value, quote=True)

def logSafe(value):
    """ Escape a request-derived string for a single log line.

        Control characters and newlines become visible backslash escapes.
    """
    return value.encode('unicode_escape').decode('ascii')
