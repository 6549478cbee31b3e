""" Static files served next to the tiles.

A map client testing a tileset usually wants a style document, sprites, glyph
ranges and an index page from the same origin as the tiles. TileShelf serves
these from one of two kinds of asset collection, chosen in configuration:

Directory serves any regular file under a single root directory:

    "static": {"path": "static"}

AllowList serves only the files named at startup, read relative to the
configuration directory:

    "static": {"files": ["style.json", "sprites.png", "sprites.json"]}

Both refuse paths that try to climb out of where they're allowed to look.

Content types come from a short fixed table keyed on the final extension.
Anything without a known extension is sent as text/html, which is odd for
binary files but is what existing test setups expect.
"""

import re
from collections import namedtuple
from os.path import isfile, realpath, sep

from werkzeug.security import safe_join

CONTENT_TYPES = {
    'json': 'application/json',
    'png': 'image/png',
    'pbf': 'application/octet-stream',
    'css': 'text/css',
    'js': 'application/javascript'
    }

DEFAULT_CONTENT_TYPE = 'text/html'

_extension_pat = re.compile(r'\.(\w+)$')

StaticAsset = namedtuple('StaticAsset', ('path', 'mimetype'))

def getTypeByExtension(path):
    """ Get mime-type for a path by its final extension, case-sensitive.
    """
    match = _extension_pat.search(path)

    if match is None:
        return DEFAULT_CONTENT_TYPE

    return CONTENT_TYPES.get(match.group(1), DEFAULT_CONTENT_TYPE)

def _within(path, root):
    """ Return true if path is root or somewhere underneath it, links resolved.
    """
    path, root = realpath(path), realpath(root)
    return path == root or path.startswith(root.rstrip(sep) + sep)

class Directory:
    """ Static assets found under one local directory.
    """
    def __init__(self, root):
        self.root = root

    def filename(self, path):
        """ Return a local filename for a request path, or None if it's not allowed.
        """
        if '\x00' in path:
            return None

        filename = safe_join(self.root, path)

        if filename is None or not _within(filename, self.root):
            return None

        return filename

    def exists(self, path):
        filename = self.filename(path)
        return filename is not None and isfile(filename)

    def read(self, path):
        """ Return file contents, raise OSError if it can't be read.
        """
        filename = self.filename(path)

        if filename is None:
            raise FileNotFoundError(path)

        with open(filename, 'rb') as file:
            return file.read()

    def resolve(self, path):
        """ Return file contents or None.
        """
        if not self.exists(path):
            return None

        try:
            return self.read(path)
        except OSError:
            return None

    def __repr__(self):
        return 'Directory(%r)' % self.root

class AllowList (Directory):
    """ Static assets limited to a fixed list of names.

        Names are request paths without the leading slash, e.g. "style.json"
        or "fonts/Metropolis Regular/0-255.pbf". Each is read relative to
        the directory given to the constructor.
    """
    def __init__(self, files, dirpath='.'):
        Directory.__init__(self, dirpath)
        self.files = frozenset(files)

    def filename(self, path):
        if path not in self.files:
            return None

        return Directory.filename(self, path)

    def __repr__(self):
        return 'AllowList(%r, %r)' % (sorted(self.files), self.root)

class Nothing:
    """ No static assets at all.
    """
    def exists(self, path):
        return False

    def read(self, path):
        raise FileNotFoundError(path)

    def resolve(self, path):
        return None

    def __repr__(self):
        return 'Nothing()'
