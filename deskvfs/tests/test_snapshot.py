"""
Settings snapshot tests.
"""

import json
import tempfile
import unittest
from pathlib import Path

from deskvfs.core.bootstrap import create_engine
from deskvfs.exceptions import SeedFormatError
from deskvfs.filesystem.snapshot import load_settings_snapshot, save_settings_snapshot

from .support import HOME, make_engine


SETTINGS = '/home/victxrlarixs/settings/'


class TestSettingsSnapshot(unittest.TestCase):
    """Test save/load of the settings folder."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / 'snapshots' / 'settings.json'

    def tearDown(self):
        self._tmp.cleanup()

    def test_round_trip(self):
        vfs = create_engine(register_sources=False)
        vfs.write(SETTINGS + 'themes.json', '{"active": "solaris"}')
        vfs.mkdir(SETTINGS, 'profiles')
        vfs.touch(SETTINGS + 'profiles/', 'work.json')
        vfs.write(SETTINGS + 'profiles/work.json', '{}')

        self.assertEqual(save_settings_snapshot(vfs, self.path), 4)

        fresh = create_engine(register_sources=False)
        self.assertEqual(load_settings_snapshot(fresh, self.path), 4)
        self.assertEqual(fresh.get_node(SETTINGS + 'themes.json').content, '{"active": "solaris"}')
        self.assertEqual(fresh.get_node(SETTINGS + 'profiles/work.json').content, '{}')
        self.assertEqual(fresh.check_consistency(), [])

    def test_document_format(self):
        vfs = create_engine(register_sources=False)
        save_settings_snapshot(vfs, self.path)
        document = json.loads(self.path.read_text(encoding='utf-8'))

        self.assertEqual(document['version'], 1)
        self.assertEqual(document['root'], SETTINGS)
        self.assertEqual(document['tree']['session.json']['content'], '{}')

    def test_load_creates_missing_settings_folder(self):
        vfs = create_engine(register_sources=False)
        save_settings_snapshot(vfs, self.path)

        seed = {'/home/victxrlarixs/': {'type': 'folder', 'children': {}}}
        bare = create_engine(seed=seed, register_sources=False)
        self.assertEqual(load_settings_snapshot(bare, self.path), 3)
        self.assertEqual(bare.get_node(SETTINGS + 'session.json').content, '{}')

    def test_save_without_settings_folder(self):
        vfs, _ = make_engine()
        self.assertIsNone(vfs.get_node(HOME + 'settings/'))
        self.assertEqual(save_settings_snapshot(vfs, self.path), 0)
        self.assertFalse(self.path.exists())

    def test_invalid_documents(self):
        vfs = create_engine(register_sources=False)
        self.path.parent.mkdir(parents=True)

        for text in ('{broken', '{"version": 2, "tree": {}}', '{"version": 1, "tree": []}',
                     '{"version": 1, "tree": {"x": {"type": "link"}}}'):
            with self.subTest(text=text):
                self.path.write_text(text, encoding='utf-8')
                with self.assertRaises(SeedFormatError):
                    load_settings_snapshot(vfs, self.path)

    def test_missing_file(self):
        vfs = create_engine(register_sources=False)
        with self.assertRaises(SeedFormatError):
            load_settings_snapshot(vfs, self.path)


if __name__ == '__main__':
    unittest.main()
