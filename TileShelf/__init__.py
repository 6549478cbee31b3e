""" A little shelf for your vector tiles.

TileShelf is a small WSGI server that publishes the tiles of one MBTiles file,
its metadata, and a handful of static assets such as styles, sprites and
fonts. It is meant for testing the output of a vector tile pipeline with a
renderer such as Mapbox GL or MapLibre, on your own machine.

    http://localhost:8080/14/8124/5421.pbf     gzipped vector tile
    http://localhost:8080/metadata             tileset metadata as JSON
    http://localhost:8080/style.json           static file

It never writes to the tileset, never changes tile contents, and serves
exactly one tileset per process.
"""

import logging
from http import client as httplib
from os.path import dirname, join as pathjoin, realpath
from urllib.parse import urlparse
from json import load as json_load
from wsgiref.headers import Headers

__version__ = open(pathjoin(dirname(__file__), 'VERSION')).read().strip()

from . import Core
from . import Config
from .Router import Router

def parseConfig(configHandle):
    """ Parse a configuration file and return a Configuration object.

        Configuration could be a Python dictionary or a local file formatted
        as JSON, with at least a "tileset" key:

          {
            "tileset": "path/to/tiles.mbtiles",
            "static": {"path": "static"}
          }

        The full path to the file is significant, used to
        resolve any relative paths found in the configuration.

        See the Config module for the other settings.
    """
    if isinstance(configHandle, dict):
        return Config.buildConfiguration(configHandle, '.')

    scheme, host, path, p, q, f = urlparse(configHandle)

    if scheme not in ('', 'file'):
        raise Core.KnownUnknown('Configuration must be a local file, not "%s"' % configHandle)

    path = realpath(path)

    with open(path) as file:
        config_dict = json_load(file)

    return Config.buildConfiguration(config_dict, dirname(path).rstrip('/') + '/')

def requestHandler(config, path_info, query_string=None, router=None):
    """ Generate a status code, headers and response body for a given request.

        Requires a Configuration object and a URL-decoded PATH_INFO
        (e.g. "/14/8124/5421.pbf"). Query string is optional, currently
        used for JSON callbacks on the metadata. An existing Router for
        the same configuration may be passed in to save building one.

        Problems reading the tileset become a 500 response rather than an
        exception, so one bad request can't take the server down.
    """
    router = router or Router(config)
    path = (path_info or '').lstrip('/')

    try:
        status_code, headers, content = router.route(path, query_string)

    except Core.KnownUnknown as e:
        logging.error('TileShelf.requestHandler() failed on %s: %s', Core.logSafe(path), Core.logSafe(str(e)))

        headers = Headers([('Content-Type', 'text/plain')])
        status_code, content = 500, b'Tileset unavailable\n'

    return status_code, headers, content

class WSGITileServer:
    """ Create a WSGI application that can handle requests from any server that talks WSGI.

        The WSGI application is an instance of this class. Example:

          app = WSGITileServer('/path/to/tileshelf.cfg')
          werkzeug.serving.run_simple('localhost', 8080, app)
    """

    def __init__(self, config):
        """ Initialize a callable WSGI instance.

            Config parameter can be a file path string for a JSON
            configuration file, a configuration dictionary, or a
            Configuration object with a 'store' property.
        """
        if isinstance(config, (str, dict)):
            config = parseConfig(config)

        else:
            assert hasattr(config, 'store'), 'Configuration object must have a store.'

        self.config = config
        self.router = Router(config)

    def __call__(self, environ, start_response):
        """
        """
        method = environ.get('REQUEST_METHOD', 'GET').upper()

        if method not in ('GET', 'HEAD'):
            headers = Headers([('Allow', 'GET, HEAD'), ('Content-Type', 'text/plain')])
            return self._response(start_response, 405, b'Method not allowed\n', headers)

        # WSGI hands over PATH_INFO as latin-1, undo that for UTF-8 paths
        path_info = environ.get('PATH_INFO', '')
        path_info = path_info.encode('latin-1', 'replace').decode('utf-8', 'replace')
        query_string = environ.get('QUERY_STRING', None)

        status_code, headers, content = requestHandler(self.config, path_info, query_string, self.router)

        if method == 'HEAD':
            headers.setdefault('Content-Length', str(len(content)))
            content = b''

        return self._response(start_response, status_code, content, headers)

    def _response(self, start_response, code, content=b'', headers=None):
        """
        """
        headers = headers or Headers([])

        if content:
            headers.setdefault('Content-Length', str(len(content)))

        start_response('%d %s' % (code, httplib.responses[code]), headers.items())
        return [content]
