""" Turn a request path into a response.

Paths are classified by an ordered list of rules, and the first rule that
matches decides the response:

1. tile: "z/x/y.pbf", e.g. "14/8124/5421.pbf", "14/8124/5421.output.pbf",
   "14/8124/5421/tile.pbf" or "tiles/14/8124/5421.pbf". Components are ASCII
   digits; the first z/x/y run of whole path segments is the address.
   Tiles are looked up in the MBTiles store; missing tiles get an empty
   placeholder tile with a 200 status, because renderers want a well-formed
   tile for empty parts of the world rather than an HTTP error.
2. metadata: exactly "metadata", answered with the tileset metadata table
   as a JSON object. The "json" row is expanded into a nested value.
3. static: any file in the configured static assets, e.g. "style.json".
   An empty path means "index.html".
4. stylesheet: a JSON style compiled by the optional stylesheet transform.
5. font: anything else with "font" in it and a tile extension, answered
   with a placeholder glyph range so that labels fail quietly.

Everything else is a 404.

Each rule is a (name, matcher, handler) triple. A matcher takes the path and
returns something truthy on a match, which is handed to the handler along
with the path and query string. Handlers return a (status code, headers,
body bytes) tuple.
"""

import re
import logging
from time import time
from urllib.parse import parse_qs
from json import dumps as json_dumps, loads as json_loads, JSONDecodeError
from wsgiref.headers import Headers

from .Core import OutOfBounds, htmlSafe, logSafe
from .Geography import TileAddress, storageAddress
from .Assets import StaticAsset, getTypeByExtension
from .Placeholders import EMPTY_TILE, EMPTY_FONT

TILE_EXTENSIONS = ('pbf', 'mvt')

# z/x/y as whole path segments, optionally behind a prefix like "tiles/",
# then anything that doesn't continue the row number before the extension.
_tile_pat = re.compile(r'(?:^|/)(?P<z>[0-9]+)/(?P<x>[0-9]+)/(?P<y>[0-9]+)(?:[^0-9A-Za-z_?][^?]*)?\.(?P<e>%s)$' % '|'.join(TILE_EXTENSIONS))
_font_pat = re.compile(r'font.+\.(%s)$' % '|'.join(TILE_EXTENSIONS))
_callback_pat = re.compile(r'^[\w.$]+$')

# more digits than any address in the pyramid could need
_digits_limit = 12

def _parseDigits(digits):
    """ Parse a run of digits, clamping very long ones to a value past any real tile.
    """
    digits = digits.lstrip('0') or '0'

    if len(digits) > _digits_limit:
        return 10 ** _digits_limit

    return int(digits)

def matchTile(path):
    """ Return a Geography.TileAddress for a tile path, or None.
    """
    match = _tile_pat.search(path)

    if match is None:
        return None

    zoom, column, row = [_parseDigits(match.group(p)) for p in 'zxy']
    return TileAddress(zoom, column, row)

def matchMetadata(path):
    return path == 'metadata'

def matchFont(path):
    return _font_pat.search(path) is not None

class Router:
    """ Route request paths for one Config.Configuration.
    """
    def __init__(self, config):
        self.config = config

        self.rules = [
            ('tile', matchTile, self.serveTile),
            ('metadata', matchMetadata, self.serveMetadata),
            ('static', self.matchStatic, self.serveStatic),
            ('stylesheet', self.matchStylesheet, self.serveStylesheet),
            ('font', matchFont, self.serveFont),
            ]

    def classify(self, path):
        """ Return name, match and handler of the first matching rule, or three Nones.
        """
        for (name, matcher, handler) in self.rules:
            match = matcher(path)

            if match:
                return name, match, handler

        return None, None, None

    def route(self, path, query_string=None):
        """ Get status code, headers, and body for a URL-decoded path without its leading slash.
        """
        if path == '':
            path = 'index.html'

        name, match, handler = self.classify(path)

        if handler is None:
            return self.notFound(path)

        return handler(path, match, query_string)

    def cacheHeaders(self, headers):
        """ Add a Cache-Control header, if one is configured.
        """
        if self.config.max_cache_age is not None:
            headers['Cache-Control'] = 'max-age=%d' % self.config.max_cache_age

        return headers

    def matchStatic(self, path):
        if self.config.assets.exists(path):
            return StaticAsset(path, getTypeByExtension(path))

        return None

    def matchStylesheet(self, path):
        if self.config.stylesheet is None:
            return None

        return self.config.stylesheet.transform(path, self.config.assets)

    def serveTile(self, path, coord, query_string=None):
        """ Serve a gzipped vector tile from the store, or an empty one.
        """
        start_time = time()

        try:
            body = self.config.store.lookup(storageAddress(coord))
        except OutOfBounds as e:
            logging.debug('TileShelf.Router.serveTile() %s', e)
            body = None

        if body is None:
            body, tile_from = EMPTY_TILE, 'placeholder'
        else:
            tile_from = 'tileset'

        headers = Headers([
            ('Content-Type', 'application/x-protobuf'),
            ('Content-Encoding', 'gzip'),
            ('Content-Length', str(len(body)))
            ])

        self.cacheHeaders(headers)
        headers['Access-Control-Allow-Origin'] = '*'

        logging.info('TileShelf.Router.serveTile() %d/%d/%d via %s in %.3f', coord.zoom, coord.column, coord.row, tile_from, time() - start_time)

        return 200, headers, body

    def serveMetadata(self, path, match, query_string=None):
        """ Serve the metadata table as a JSON object, optionally wrapped in a JSONP callback.
        """
        metadata = {}

        for (name, value) in self.config.store.metadata():
            if name == 'json':
                try:
                    value = json_loads(value)
                except JSONDecodeError as e:
                    logging.warning('TileShelf.Router.serveMetadata() left unparseable "json" value as a string: %s', e)

            metadata[name] = value

        content = json_dumps(metadata)
        headers = self.cacheHeaders(Headers([('Content-Type', 'application/json')]))

        callback = parse_qs(query_string or '').get('callback', [None])[0]

        if callback and _callback_pat.match(callback):
            headers['Content-Type'] = 'application/javascript; charset=utf-8'
            content = '%s(%s)' % (callback, content)

        elif callback:
            logging.warning('TileShelf.Router.serveMetadata() ignored callback %s', logSafe(callback))

        logging.info('TileShelf.Router.serveMetadata() %d rows', len(metadata))

        return 200, headers, content.encode('utf8')

    def serveStatic(self, path, asset, query_string=None):
        """ Serve a static file, or a 404 if it can't be read after all.
        """
        try:
            body = self.config.assets.read(asset.path)
        except OSError as e:
            logging.warning('TileShelf.Router.serveStatic() could not read %s: %s', logSafe(asset.path), logSafe(str(e)))
            return self.notFound(path)

        headers = self.cacheHeaders(Headers([('Content-Type', asset.mimetype)]))

        logging.info('TileShelf.Router.serveStatic() %s as %s', logSafe(asset.path), asset.mimetype)

        return 200, headers, body

    def serveStylesheet(self, path, compiled, query_string=None):
        """ Serve the output of the stylesheet transform.
        """
        mimetype, body = compiled
        headers = self.cacheHeaders(Headers([('Content-Type', mimetype)]))

        logging.info('TileShelf.Router.serveStylesheet() %s as %s', logSafe(path), mimetype)

        return 200, headers, body

    def serveFont(self, path, match, query_string=None):
        """ Serve a placeholder glyph range for a missing font, never cached.
        """
        headers = Headers([
            ('Content-Type', 'application/x-protobuf'),
            ('Content-Length', str(len(EMPTY_FONT))),
            ('Access-Control-Allow-Origin', '*')
            ])

        logging.info('TileShelf.Router.serveFont() placeholder for %s', logSafe(path))

        return 200, headers, EMPTY_FONT

    def notFound(self, path):
        logging.info("TileShelf.Router.notFound() couldn't find %s", logSafe(path))

        headers = Headers([('Content-Type', 'text/html')])
        body = 'Resource at %s not found' % htmlSafe(path)

        return 404, headers, body.encode('utf8')
