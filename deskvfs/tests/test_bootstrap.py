"""
Start-up wiring and entry point tests.
"""

import asyncio
import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from deskvfs.core.bootstrap import BootStage, Bootstrap, boot, create_engine, register_default_sources
from deskvfs.core.config_loader import Config, HydrationConfig
from deskvfs.core.subsystem import SubsystemState
from deskvfs.exceptions import ConfigValidationError
from deskvfs.filesystem.seed import DEFAULT_SEED, README_TEXT
from deskvfs.logger import Logger
from deskvfs.main import main


HOME = '/home/victxrlarixs/'


class BootTestCase(unittest.TestCase):

    def setUp(self):
        Logger.reset()
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / 'deskvfs.json'
        self.config_path.write_text(
            json.dumps({'logging': {'console_output': False}}),
            encoding='utf-8'
        )

    def tearDown(self):
        Logger.reset()
        self._tmp.cleanup()


class TestCreateEngine(unittest.TestCase):
    """Test create_engine and the default sources."""

    def test_default_tree(self):
        vfs = create_engine()
        self.assertEqual(vfs.state, SubsystemState.INITIALIZED)
        self.assertEqual(vfs.home, HOME)
        for relative in ('Desktop/readme.md', 'man-pages/linux-bible.md', 'settings/themes.json', '.Trash/'):
            with self.subTest(path=relative):
                self.assertIsNotNone(vfs.get_node(HOME + relative))
        self.assertIn(HOME, DEFAULT_SEED)

    def test_sources_registered(self):
        vfs = create_engine()
        self.assertEqual(len(vfs.hydrator.pending), 6)

        written = asyncio.run(vfs.hydrator.hydrate_all())
        self.assertEqual(written, 6)
        self.assertEqual(vfs.get_node(HOME + 'Desktop/readme.md').content, README_TEXT)
        self.assertIn('SEQUENCE 1', vfs.get_node(HOME + 'man-pages/linux-bible.md').content)
        themes = json.loads(vfs.get_node(HOME + 'settings/themes.json').content)
        self.assertIn('default', themes)

    def test_hydration_disabled(self):
        vfs = create_engine(Config(hydration=HydrationConfig(enabled=False)))
        self.assertEqual(vfs.hydrator.pending, [])

    def test_resource_dir(self):
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, 'pure-bash-bible.md').write_text('# pure bash bible\n', encoding='utf-8')
            config = Config(hydration=HydrationConfig(resource_dir=tmp))
            vfs = create_engine(config, register_sources=False)

            self.assertEqual(register_default_sources(vfs.hydrator, config), 6)
            written = asyncio.run(vfs.hydrator.hydrate_all())

        self.assertEqual(written, 5)
        self.assertEqual(vfs.get_node(HOME + 'man-pages/pure-bash-bible.md').content, '# pure bash bible\n')
        self.assertEqual(vfs.get_node(HOME + 'man-pages/pure-sh-bible.md').content, '')


class TestBootstrap(BootTestCase):
    """Test the full start-up sequence."""

    def test_boot(self):
        bootstrap = Bootstrap(str(self.config_path))
        result = bootstrap.boot()

        self.assertTrue(result.success)
        self.assertEqual(result.stage, BootStage.COMPLETE)
        self.assertEqual(bootstrap.engine.state, SubsystemState.INITIALIZED)
        self.assertEqual(len(bootstrap.engine.hydrator.pending), 6)

        bootstrap.shutdown()
        self.assertEqual(bootstrap.engine.state, SubsystemState.STOPPED)

    def test_boot_with_seed_file(self):
        seed_path = Path(self._tmp.name) / 'seed.json'
        seed_path.write_text(json.dumps({HOME: {'type': 'folder', 'children': {
            'only.txt': {'type': 'file', 'content': 'x'},
        }}}), encoding='utf-8')

        vfs = boot(str(self.config_path), str(seed_path))
        self.assertEqual(sorted(vfs.get_children(HOME)), ['.Trash', 'only.txt'])

    def test_boot_failure(self):
        bootstrap = Bootstrap(str(Path(self._tmp.name) / 'missing.json'))
        result = bootstrap.boot()

        self.assertFalse(result.success)
        self.assertEqual(result.stage, BootStage.CONFIG_LOAD)
        self.assertIsInstance(result.error, ConfigValidationError)
        self.assertIsNone(bootstrap.engine)

    def test_boot_raises(self):
        with self.assertRaises(ConfigValidationError):
            boot(str(self.config_path), log_level='LOUD')


class TestMain(BootTestCase):
    """Test the command-line entry point."""

    def test_headless(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            status = main(['--config', str(self.config_path), '--headless'])

        self.assertEqual(status, 0, out.getvalue())
        self.assertIn('Smoke run complete: 0 failed', out.getvalue())
        self.assertIn('hello from the smoke run', out.getvalue())

    def test_boot_failure_exit_code(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            status = main(['--config', str(Path(self._tmp.name) / 'missing.json'), '--headless'])
        self.assertEqual(status, 1)
        self.assertIn('Boot failed at stage CONFIG_LOAD', out.getvalue())


if __name__ == '__main__':
    unittest.main()
