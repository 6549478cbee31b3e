""" The configuration bits of TileShelf.

TileShelf configuration is stored in a JSON file. Only "tileset" is required;
relative paths are resolved against the location of the configuration file:

    {
      "tileset": "oxfordshire.mbtiles",
      "maximum cache age": 604800,
      "static": {"path": "static"},
      "stylesheets": {"name": "yaml"},
      "logging": "info"
    }

- "tileset" is the local path to an MBTiles file. It is opened once, and
  the server refuses to start if it's missing or unreadable.
- "maximum cache age" is an optional number of seconds sent to clients in a
  Cache-Control header for tiles, metadata and static files. Defaults to one
  week. Zero sends "max-age=0"; null leaves the header out altogether.
- "static" optionally describes static assets, see TileShelf.Assets. Either
  {"path": "some/directory"} or {"files": ["style.json", ...]}.
- "stylesheets" optionally turns on a stylesheet transform, see
  TileShelf.Stylesheets.
- "logging": one of "debug", "info", "warning", "error" or "critical", as
  described in Python's logging module: http://docs.python.org/howto/logging.html
"""

import logging
from os.path import join as pathjoin
from json import dumps as json_dumps
from urllib.parse import urljoin, urlparse

from . import Assets
from . import Core
from . import MBTiles
from . import Stylesheets

DEFAULT_MAX_CACHE_AGE = 604800

class Configuration:
    """ A complete site configuration.

        Attributes:

          store:
            MBTiles.TileStore instance, the one tileset for this process.

          dirpath:
            Local filesystem path for this configuration,
            useful for expanding relative paths.

          assets:
            Static asset collection from TileShelf.Assets.

          max_cache_age:
            Seconds for the Cache-Control header, or None to omit it.

          stylesheet:
            Optional stylesheet transform, see TileShelf.Stylesheets.
    """
    def __init__(self, store, dirpath, assets=None, max_cache_age=DEFAULT_MAX_CACHE_AGE, stylesheet=None):
        self.store = store
        self.dirpath = dirpath
        self.assets = assets or Assets.Nothing()
        self.max_cache_age = max_cache_age
        self.stylesheet = stylesheet

def buildConfiguration(config_dict, dirpath='.'):
    """ Build a configuration dictionary into a Configuration object.

        The second argument is an optional dirpath that specifies where in the
        local filesystem the parsed dictionary originated, to make it possible
        to resolve relative paths.
    """
    if 'logging' in config_dict:
        level = config_dict['logging'].upper()

        if hasattr(logging, level):
            logging.basicConfig(level=getattr(logging, level))

    if 'tileset' not in config_dict:
        raise Core.KnownUnknown('Missing required tileset in configuration: %s' % json_dumps(config_dict))

    tileset = enforcedLocalPath(config_dict['tileset'], dirpath, 'Tileset')
    store = MBTiles.TileStore(tileset)

    assets = _parseConfigStatic(config_dict.get('static', {}), dirpath)
    max_cache_age = _parseMaxCacheAge(config_dict.get('maximum cache age', DEFAULT_MAX_CACHE_AGE))
    stylesheet = Stylesheets.loadTransform(config_dict.get('stylesheets'))

    logging.info('TileShelf.Config.buildConfiguration() serving %s with %r', tileset, assets)

    return Configuration(store, dirpath, assets, max_cache_age, stylesheet)

def enforcedLocalPath(relpath, dirpath, context='Path'):
    """ Return a forced local path, relative to a directory.

        Throw an error if the combination of path and directory seems to
        specify a remote path, e.g. "/path" and "http://example.com".
        The tileset and static files must be local to the server.
    """
    parsed_dir = urlparse(dirpath)
    parsed_rel = urlparse(relpath)

    if parsed_rel.scheme not in ('file', ''):
        raise Core.KnownUnknown('%s path must be a local file path, absolute or "file://", not "%s".' % (context, relpath))

    if parsed_dir.scheme not in ('file', ''):
        raise Core.KnownUnknown('%s path must be local, but configuration came from %s' % (context, dirpath))

    if parsed_rel.scheme == 'file':
        return parsed_rel.path

    if parsed_dir.scheme == 'file':
        return urljoin(parsed_dir.path, parsed_rel.path)

    return pathjoin(dirpath, relpath)

def _parseConfigStatic(static_dict, dirpath):
    """ Used by buildConfiguration() to parse just the static parts of a config.
    """
    if not static_dict:
        return Assets.Nothing()

    if 'path' in static_dict:
        root = enforcedLocalPath(static_dict['path'], dirpath, 'Static')
        return Assets.Directory(root)

    if 'files' in static_dict:
        root = enforcedLocalPath('.', dirpath, 'Static')
        return Assets.AllowList([name.lstrip('/') for name in static_dict['files']], root)

    raise Core.KnownUnknown('Static assets need a "path" or a list of "files": %s' % json_dumps(static_dict))

def _parseMaxCacheAge(value):
    """ Used by buildConfiguration() to check the maximum cache age.
    """
    if value is None:
        return None

    try:
        seconds = int(value)
    except (TypeError, ValueError):
        raise Core.KnownUnknown('Maximum cache age must be a number of seconds, not %s' % json_dumps(value))

    if seconds < 0:
        raise Core.KnownUnknown('Maximum cache age must not be negative: %d' % seconds)

    return seconds
