""" The geography bits of TileShelf.

Requests name tiles in the XYZ scheme used by web maps, with row zero at
the top (north) of the world. MBTiles files store them in the TMS scheme,
with row zero at the bottom (south). Translating between the two is a
vertical flip inside the zoom level:

    storage row = 2 ** zoom - row - 1

The flip is its own inverse, so the same function serves both directions.
TileAddress and StorageAddress have the same fields; only the meaning of
"row" differs.

Zoom levels above MAX_ZOOM are refused rather than shifted.
"""

from collections import namedtuple

from .Core import OutOfBounds

MAX_ZOOM = 30

TileAddress = namedtuple('TileAddress', ('zoom', 'column', 'row'))
StorageAddress = namedtuple('StorageAddress', ('zoom', 'column', 'row'))

def flipRow(row, zoom):
    """ Flip a tile row between XYZ and TMS numbering at a given zoom.
    """
    return (1 << zoom) - row - 1

def storageAddress(coord):
    """ Convert a public TileAddress into a StorageAddress.

        Raise Core.OutOfBounds if the zoom is negative or greater than
        MAX_ZOOM, or if the row or column is outside [0, 2**zoom).
    """
    zoom, column, row = int(coord.zoom), int(coord.column), int(coord.row)

    if zoom < 0 or zoom > MAX_ZOOM:
        raise OutOfBounds('Zoom %d is outside 0-%d' % (zoom, MAX_ZOOM))

    size = 1 << zoom

    if not (0 <= column < size) or not (0 <= row < size):
        raise OutOfBounds('Tile %d/%d/%d is outside the tile pyramid' % (zoom, column, row))

    return StorageAddress(zoom, column, flipRow(row, zoom))
