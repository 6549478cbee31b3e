from unittest import TestCase
import json
import os

from TileShelf import Assets, Core, WSGITileServer, parseConfig
from TileShelf.Config import buildConfiguration, enforcedLocalPath
from TileShelf.MBTiles import TileStore

from . import utils

class ConfigTests(TestCase):

    def setUp(self):
        self.dirpath = utils.create_temp_dir()
        self.tileset = utils.create_sample_tileset(self.dirpath)

    def tearDown(self):
        utils.remove_temp_dir(self.dirpath)

    def write_config(self, config_dict):
        filename = os.path.join(self.dirpath, 'tileshelf.cfg')

        with open(filename, 'w') as file:
            json.dump(config_dict, file)

        return filename

    def test_config(self):
        '''Read configuration and verify successful read'''
        config = parseConfig(self.write_config({
            "tileset": "sample.mbtiles",
            "maximum cache age": 60,
            "static": {"path": "static"}
            }))

        self.assertTrue(isinstance(config.store, TileStore))
        self.assertEqual(os.path.realpath(config.store.filename), os.path.realpath(self.tileset))
        self.assertEqual(config.max_cache_age, 60)
        self.assertTrue(isinstance(config.assets, Assets.Directory))
        self.assertEqual(os.path.realpath(config.assets.root), os.path.realpath(os.path.join(self.dirpath, 'static')))
        self.assertEqual(config.stylesheet, None)

    def test_config_dictionary(self):
        config = parseConfig({"tileset": self.tileset})

        self.assertEqual(config.max_cache_age, 604800)
        self.assertTrue(isinstance(config.assets, Assets.Nothing))

    def test_config_allow_list(self):
        config = buildConfiguration({"tileset": "sample.mbtiles", "static": {"files": ["style.json", "/sprites.png"]}}, self.dirpath)

        self.assertTrue(isinstance(config.assets, Assets.AllowList))
        self.assertEqual(config.assets.files, frozenset(['style.json', 'sprites.png']))

    def test_missing_tileset_is_fatal(self):
        '''The server must not start without its store'''
        self.assertRaises(Core.KnownUnknown, parseConfig, self.write_config({"tileset": "missing.mbtiles"}))
        self.assertRaises(Core.KnownUnknown, WSGITileServer, {"tileset": os.path.join(self.dirpath, "missing.mbtiles")})
        self.assertRaises(Core.KnownUnknown, buildConfiguration, {}, self.dirpath)

    def test_remote_paths_refused(self):
        self.assertRaises(Core.KnownUnknown, buildConfiguration, {"tileset": "http://example.com/tiles.mbtiles"}, self.dirpath)
        self.assertRaises(Core.KnownUnknown, parseConfig, "http://example.com/tileshelf.cfg")

    def test_bad_static(self):
        self.assertRaises(Core.KnownUnknown, buildConfiguration, {"tileset": "sample.mbtiles", "static": {"where": "?"}}, self.dirpath)

    def test_bad_cache_age(self):
        self.assertRaises(Core.KnownUnknown, buildConfiguration, {"tileset": "sample.mbtiles", "maximum cache age": "a week"}, self.dirpath)
        self.assertRaises(Core.KnownUnknown, buildConfiguration, {"tileset": "sample.mbtiles", "maximum cache age": -1}, self.dirpath)

    def test_enforced_local_path(self):
        self.assertEqual(enforcedLocalPath('tiles.mbtiles', '/srv/maps'), '/srv/maps/tiles.mbtiles')
        self.assertEqual(enforcedLocalPath('/data/tiles.mbtiles', '/srv/maps'), '/data/tiles.mbtiles')
        self.assertEqual(enforcedLocalPath('file:///data/tiles.mbtiles', '/srv/maps'), '/data/tiles.mbtiles')
        self.assertEqual(enforcedLocalPath('tiles.mbtiles', 'file:///srv/maps/'), '/srv/maps/tiles.mbtiles')
        self.assertRaises(Core.KnownUnknown, enforcedLocalPath, 'tiles.mbtiles', 'http://example.com/')

    def test_server_from_config_file(self):
        app = WSGITileServer(self.write_config({"tileset": "sample.mbtiles"}))
        self.assertEqual(os.path.realpath(app.config.store.filename), os.path.realpath(self.tileset))
