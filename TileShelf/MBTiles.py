""" Read-only access to a single MBTiles tileset.

MBTiles is a SQLite database with two tables that matter here:

    tiles (zoom_level INTEGER, tile_column INTEGER, tile_row INTEGER, tile_data BLOB)
    metadata (name TEXT, value TEXT)

Rows in the tiles table use the TMS scheme; see TileShelf.Geography for the
flip from the XYZ coordinates used in request URLs. The metadata table is a
key/value store with a handful of well-known keys (name, format, bounds,
minzoom, maxzoom...). Vector tilesets add a "json" key holding a JSON
document that describes their layers.

TileStore is what the server uses. It opens the file read-only, and keeps a
separate connection per thread and per process: SQLite handles must never
cross a fork(), so a worker that notices its process id has changed opens a
fresh connection of its own.

A connection that is already open keeps reading a tileset even after the
file is deleted or replaced on disk, at least on POSIX systems. The change
only shows up once a new connection is made, in a new thread or process or
after reconnect(); from then on lookups raise Core.StoreUnavailable.

The module-level functions create_tileset() and put_tile() write to a
tileset. They exist for preparing fixtures and are never called while
serving.
"""

import logging
from os import getpid
from os.path import exists, abspath
from sqlite3 import connect, Error as SQLiteError
from threading import local
from urllib.request import pathname2url

from .Core import KnownUnknown, StoreUnavailable
from .Geography import storageAddress

def create_tileset(filename, name, type, version, description, format, bounds=None, json=None):
    """ Create a tileset 1.1 with the given filename and metadata.

        From the documentation:

        The metadata table is used as a key/value store for settings.
        Five keys are required:

        name:
          The plain-english name of the tileset.

        type:
          overlay or baselayer

        version:
          The version of the tileset, as a plain number.

        description:
          A description of the layer as plain text.

        format:
          The file format of the tile data: pbf or png

        Two optional rows are understood here.

        bounds:
          The maximum extent of the rendered map area, left, bottom,
          right, top in WGS84. Example of the full earth: -180.0,-85,180,85.

        json:
          A JSON string describing the vector layers of a pbf tileset.
    """
    if format not in ('pbf', 'png'):
        raise KnownUnknown('Format must be one of "pbf" or "png", not "%s"' % format)

    db = connect(filename)

    db.execute('CREATE TABLE metadata (name TEXT, value TEXT, PRIMARY KEY (name))')
    db.execute('CREATE TABLE tiles (zoom_level INTEGER, tile_column INTEGER, tile_row INTEGER, tile_data BLOB)')
    db.execute('CREATE UNIQUE INDEX coord ON tiles (zoom_level, tile_column, tile_row)')

    db.execute('INSERT INTO metadata VALUES (?, ?)', ('name', name))
    db.execute('INSERT INTO metadata VALUES (?, ?)', ('type', type))
    db.execute('INSERT INTO metadata VALUES (?, ?)', ('version', version))
    db.execute('INSERT INTO metadata VALUES (?, ?)', ('description', description))
    db.execute('INSERT INTO metadata VALUES (?, ?)', ('format', format))

    if bounds is not None:
        db.execute('INSERT INTO metadata VALUES (?, ?)', ('bounds', bounds))

    if json is not None:
        db.execute('INSERT INTO metadata VALUES (?, ?)', ('json', json))

    db.commit()
    db.close()

def tileset_exists(filename):
    """ Return true if the tileset exists and appears to have the right tables.
    """
    if not exists(filename):
        return False

    try:
        db = _connect_readonly(filename)
    except SQLiteError:
        return False

    try:
        db.execute('SELECT name, value FROM metadata LIMIT 1')
        db.execute('SELECT zoom_level, tile_column, tile_row, tile_data FROM tiles LIMIT 1')
    except SQLiteError:
        return False
    finally:
        db.close()

    return True

def put_tile(filename, coord, content):
    """ Write one tile at a public XYZ coordinate, replacing any existing tile.
    """
    zoom, column, row = storageAddress(coord)

    db = connect(filename)
    q = 'REPLACE INTO tiles (zoom_level, tile_column, tile_row, tile_data) VALUES (?, ?, ?, ?)'
    db.execute(q, (zoom, column, row, memoryview(content)))
    db.commit()
    db.close()

def _connect_readonly(filename):
    """ Open a read-only SQLite connection, refusing to create a missing file.
    """
    href = 'file:%s?mode=ro' % pathname2url(abspath(filename))
    return connect(href, uri=True)

class TileStore:
    """ Read-only tile and metadata lookups against one MBTiles file.

        Attributes:

          filename:
            Local path to the tileset.
    """
    def __init__(self, filename):
        """ Check that the tileset is usable and get ready to read from it.

            Raise Core.KnownUnknown if it's missing or doesn't look like
            MBTiles, so that a server never starts without its store.
        """
        if not tileset_exists(filename):
            raise KnownUnknown('"%s" is not a readable MBTiles tileset.' % filename)

        self.filename = filename
        self._local = local()

    def connection(self):
        """ Return a SQLite connection owned by this thread and process.
        """
        pid = getpid()

        if getattr(self._local, 'pid', None) != pid:
            if hasattr(self._local, 'pid'):
                logging.debug('TileShelf.MBTiles.TileStore.connection() reconnecting in process %d', pid)

            self._local.db = _connect_readonly(self.filename)
            self._local.pid = pid

        return self._local.db

    def reconnect(self):
        """ Forget connections made so far; the next lookup opens a new one.

            Useful as a post-fork hook for servers that fork workers.
        """
        self._local = local()

    def lookup(self, address):
        """ Return tile bytes for a Geography.StorageAddress, or None.
        """
        q = 'SELECT tile_data FROM tiles WHERE zoom_level=? AND tile_column=? AND tile_row=?'

        try:
            row = self.connection().execute(q, (address.zoom, address.column, address.row)).fetchone()
        except SQLiteError as e:
            raise StoreUnavailable(e)

        if row is None or row[0] is None:
            return None

        content = row[0]

        if isinstance(content, str):
            # text affinity, written by a careless tool
            content = content.encode('utf8')

        return bytes(content)

    def metadata(self):
        """ Return a list of (name, value) pairs from the metadata table.
        """
        try:
            rows = self.connection().execute('SELECT name, value FROM metadata').fetchall()
        except SQLiteError as e:
            raise StoreUnavailable(e)

        return [(str(name), '' if value is None else str(value)) for (name, value) in rows]
