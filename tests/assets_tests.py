from unittest import TestCase, skipIf
import os

from TileShelf.Assets import AllowList, Directory, Nothing, getTypeByExtension

from . import utils

class ContentTypeTests(TestCase):

    def test_known_extensions(self):
        self.assertEqual(getTypeByExtension('style.json'), 'application/json')
        self.assertEqual(getTypeByExtension('sprites@2x.png'), 'image/png')
        self.assertEqual(getTypeByExtension('fonts/Open Sans/0-255.pbf'), 'application/octet-stream')
        self.assertEqual(getTypeByExtension('map.css'), 'text/css')
        self.assertEqual(getTypeByExtension('map.js'), 'application/javascript')

    def test_fallback_to_html(self):
        '''Missing or unknown extensions are sent as text/html'''
        self.assertEqual(getTypeByExtension('README'), 'text/html')
        self.assertEqual(getTypeByExtension('index.html'), 'text/html')
        self.assertEqual(getTypeByExtension('archive.tar.gz'), 'text/html')
        self.assertEqual(getTypeByExtension('photo.jpg'), 'text/html')

    def test_case_sensitive(self):
        self.assertEqual(getTypeByExtension('STYLE.JSON'), 'text/html')
        self.assertEqual(getTypeByExtension('Sprites.PNG'), 'text/html')

    def test_final_extension_wins(self):
        self.assertEqual(getTypeByExtension('style.css.json'), 'application/json')
        self.assertEqual(getTypeByExtension('style.json.bak'), 'text/html')

class DirectoryTests(TestCase):

    def setUp(self):
        self.dirpath = utils.create_temp_dir()
        self.root = os.path.join(self.dirpath, 'static')

        utils.create_static_files(self.root, {
            'style.json': b'{"version": 8}',
            'README': b'hello',
            'fonts/Open Sans/0-255.pbf': b'glyphs'
            })

        utils.create_static_files(self.dirpath, {'secret.txt': b'keep out'})

    def tearDown(self):
        utils.remove_temp_dir(self.dirpath)

    def test_resolve(self):
        assets = Directory(self.root)

        self.assertTrue(assets.exists('style.json'))
        self.assertEqual(assets.resolve('style.json'), b'{"version": 8}')
        self.assertEqual(assets.resolve('fonts/Open Sans/0-255.pbf'), b'glyphs')
        self.assertEqual(assets.read('README'), b'hello')

    def test_missing(self):
        assets = Directory(self.root)

        self.assertFalse(assets.exists('sprites.png'))
        self.assertEqual(assets.resolve('sprites.png'), None)
        self.assertRaises(OSError, assets.read, 'sprites.png')

    def test_directories_are_not_files(self):
        assets = Directory(self.root)

        self.assertFalse(assets.exists('fonts'))
        self.assertFalse(assets.exists(''))

    def test_no_climbing_out(self):
        '''Paths outside the root are never found'''
        assets = Directory(self.root)

        self.assertFalse(assets.exists('../secret.txt'))
        self.assertFalse(assets.exists('fonts/../../secret.txt'))
        self.assertFalse(assets.exists(os.path.join(self.dirpath, 'secret.txt')))
        self.assertEqual(assets.resolve('../secret.txt'), None)
        self.assertRaises(OSError, assets.read, '../secret.txt')

    def test_null_bytes(self):
        assets = Directory(self.root)

        self.assertEqual(assets.filename('style.json\x00'), None)
        self.assertFalse(assets.exists('sty\x00le.json'))
        self.assertEqual(assets.resolve('\x00'), None)
        self.assertRaises(OSError, assets.read, 'style\x00.json')

    @skipIf(not hasattr(os, 'symlink'), "Symbolic links only")
    def test_no_following_links_out(self):
        os.symlink(os.path.join(self.dirpath, 'secret.txt'), os.path.join(self.root, 'linked.txt'))

        self.assertFalse(Directory(self.root).exists('linked.txt'))

class AllowListTests(TestCase):

    def setUp(self):
        self.dirpath = utils.create_temp_dir()

        utils.create_static_files(self.dirpath, {
            'style.json': b'{"version": 8}',
            'sprites.png': b'\x89PNG',
            'unlisted.json': b'{}'
            })

    def tearDown(self):
        utils.remove_temp_dir(self.dirpath)

    def test_only_listed_files(self):
        assets = AllowList(['style.json', 'sprites.png', 'gone.json'], self.dirpath)

        self.assertTrue(assets.exists('style.json'))
        self.assertEqual(assets.resolve('sprites.png'), b'\x89PNG')
        self.assertFalse(assets.exists('unlisted.json'))
        self.assertEqual(assets.resolve('unlisted.json'), None)

    def test_listed_but_missing(self):
        assets = AllowList(['gone.json'], self.dirpath)

        self.assertFalse(assets.exists('gone.json'))
        self.assertEqual(assets.resolve('gone.json'), None)

    def test_listed_climbing_is_still_refused(self):
        assets = AllowList(['../outside.json'], os.path.join(self.dirpath, 'sub'))
        self.assertFalse(assets.exists('../outside.json'))

class NothingTests(TestCase):

    def test_nothing(self):
        assets = Nothing()

        self.assertFalse(assets.exists('style.json'))
        self.assertEqual(assets.resolve('style.json'), None)
        self.assertRaises(OSError, assets.read, 'style.json')
