from tempfile import mkdtemp
from shutil import rmtree
import os

from werkzeug.test import Client

from TileShelf import WSGITileServer
from TileShelf.Config import buildConfiguration
from TileShelf.Geography import TileAddress
from TileShelf.MBTiles import create_tileset, put_tile

# Not a real vector tile, but the server never looks inside.
SAMPLE_TILE = b'\x1f\x8b\x08\x00\x00\x00\x00\x00\x00\x03sample tile data'

def create_temp_dir():
    '''
    Helper method to create a temporary directory. Caller is
    responsible for deleting it with remove_temp_dir() once done
    '''
    return mkdtemp(prefix='tileshelf-tests-')

def remove_temp_dir(dirpath):
    rmtree(dirpath, ignore_errors=True)

def create_sample_tileset(dirpath, tiles=None, json=None, filename='sample.mbtiles'):
    '''
    Helper method to write an MBTiles file with some tiles in it.
    Tiles is a dictionary of (zoom, column, row) XYZ tuples to bytes.
    '''
    absolute_file_name = os.path.join(dirpath, filename)
    create_tileset(absolute_file_name, 'Sample', 'baselayer', '1', 'Sample tiles', 'pbf', json=json)

    for ((zoom, column, row), content) in (tiles or {}).items():
        put_tile(absolute_file_name, TileAddress(zoom, column, row), content)

    return absolute_file_name

def create_static_files(dirpath, files):
    '''
    Helper method to write a dictionary of relative names to bytes
    under a directory, creating subdirectories as needed.
    '''
    for (name, content) in files.items():
        absolute_file_name = os.path.join(dirpath, name)

        if not os.path.isdir(os.path.dirname(absolute_file_name)):
            os.makedirs(os.path.dirname(absolute_file_name))

        with open(absolute_file_name, 'wb') as file:
            file.write(content)

def create_client(config_dict, dirpath):
    '''
    Helper method to build a WSGI tile server for a configuration
    dictionary and wrap it in a Werkzeug test client.
    '''
    app = WSGITileServer(buildConfiguration(config_dict, dirpath))
    return app, Client(app)
