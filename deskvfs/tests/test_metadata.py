"""
Metadata and size tests.
"""

import unittest

from deskvfs.filesystem.metadata import content_size, format_size

from .support import HOME, TRASH, make_engine


DOCS = HOME + 'docs/'


class TestSizes(unittest.TestCase):
    """Test recursive size computation."""

    def test_file_size_in_bytes(self):
        self.assertEqual(content_size('hi'), 2)
        self.assertEqual(content_size('héllo'), 6)

    def test_folder_size_aggregates(self):
        vfs, _ = make_engine()
        vfs.mkdir(DOCS, 'sub')
        vfs.touch(DOCS + 'sub/', 'x.txt')
        vfs.write(DOCS + 'sub/x.txt', 'héllo')
        vfs.touch(DOCS, 'y.txt')
        vfs.write(DOCS + 'y.txt', 'abc')

        self.assertEqual(vfs.get_size(DOCS + 'sub/x.txt'), 6)
        self.assertEqual(vfs.get_size(DOCS + 'sub/'), 6)
        self.assertEqual(vfs.get_size(DOCS), 9)
        self.assertEqual(vfs.get_size(HOME), 11)

    def test_size_follows_mutations(self):
        vfs, _ = make_engine()
        self.assertEqual(vfs.get_size(DOCS), 0)
        vfs.move(HOME + 'a.txt', DOCS + 'a.txt')
        self.assertEqual(vfs.get_size(DOCS), 2)
        vfs.rm(DOCS, 'a.txt')
        self.assertEqual(vfs.get_size(DOCS), 0)
        self.assertEqual(vfs.get_size(TRASH), 2)

    def test_missing_path(self):
        vfs, _ = make_engine()
        self.assertEqual(vfs.get_size(HOME + 'ghost'), 0)

    def test_format_size(self):
        self.assertEqual(format_size(0), '0 B')
        self.assertEqual(format_size(1023), '1023 B')
        self.assertEqual(format_size(1536), '1.5 KB')
        self.assertEqual(format_size(1048576), '1.0 MB')
        self.assertEqual(format_size(3 * 1024 ** 3), '3.0 GB')


class TestMetadata(unittest.TestCase):
    """Test metadata defaults and updates."""

    def test_defaults(self):
        vfs, _ = make_engine()
        file_meta = vfs.get_metadata(HOME + 'a.txt')
        folder_meta = vfs.get_metadata(DOCS)

        self.assertEqual(file_meta.owner, 'u')
        self.assertEqual(file_meta.permissions, 'rw-r--r--')
        self.assertEqual(folder_meta.permissions, 'rwxr-xr-x')
        self.assertIsNotNone(file_meta.mtime)
        self.assertIsNone(vfs.get_metadata(HOME + 'ghost'))

    def test_metadata_is_a_copy(self):
        vfs, _ = make_engine()
        vfs.get_metadata(HOME + 'a.txt').owner = 'mallory'
        self.assertEqual(vfs.get_metadata(HOME + 'a.txt').owner, 'u')

    def test_set_metadata(self):
        vfs, recorder = make_engine()
        self.assertTrue(vfs.set_metadata(HOME + 'a.txt', owner='root', permissions='rw-------'))
        metadata = vfs.get_metadata(HOME + 'a.txt')
        self.assertEqual(metadata.owner, 'root')
        self.assertEqual(metadata.permissions, 'rw-------')
        self.assertEqual(recorder.paths, [HOME])

    def test_set_metadata_rejections(self):
        vfs, recorder = make_engine()
        self.assertFalse(vfs.set_metadata(HOME + 'a.txt', permissions='rwxrwxrwxx'))
        self.assertFalse(vfs.set_metadata(HOME + 'a.txt', permissions='abcdefghi'))
        self.assertFalse(vfs.set_metadata(HOME + 'ghost', owner='root'))
        self.assertEqual(vfs.get_metadata(HOME + 'a.txt').permissions, 'rw-r--r--')
        self.assertEqual(recorder.events, [])

    def test_set_folder_metadata_announces_parent(self):
        vfs, recorder = make_engine()
        self.assertTrue(vfs.set_metadata(DOCS, permissions='rwx------'))
        self.assertEqual(recorder.paths, [HOME])

    def test_set_home_metadata_announces_home(self):
        vfs, recorder = make_engine()
        self.assertTrue(vfs.set_metadata(HOME, owner='root'))
        self.assertEqual(vfs.get_metadata(HOME).owner, 'root')
        self.assertEqual(recorder.paths, [HOME])


class TestStat(unittest.TestCase):
    """Test stat records."""

    def test_file(self):
        vfs, _ = make_engine()
        info = vfs.stat(HOME + 'a.txt')
        self.assertEqual(info['name'], 'a.txt')
        self.assertEqual(info['type'], 'file')
        self.assertEqual(info['size'], 2)
        self.assertEqual(info['size_display'], '2 B')
        self.assertEqual(info['mode'], '-rw-r--r--')
        self.assertNotIn('entries', info)

    def test_folder(self):
        vfs, _ = make_engine()
        vfs.touch(DOCS, 'x.txt')
        info = vfs.stat(DOCS)
        self.assertEqual(info['mode'], 'drwxr-xr-x')
        self.assertEqual(info['entries'], 1)

    def test_trashed(self):
        vfs, _ = make_engine()
        vfs.rm(HOME, 'a.txt')
        self.assertEqual(vfs.stat(TRASH + 'a.txt')['trashed_from'], HOME)
        self.assertIsNone(vfs.stat(HOME + 'a.txt'))


if __name__ == '__main__':
    unittest.main()
