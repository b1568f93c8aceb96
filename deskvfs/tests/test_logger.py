"""
Logging tests.
"""

import logging
import tempfile
import unittest
from pathlib import Path

from deskvfs.logger import LogFormatter, Logger, LogLevel, get_logger


class TestLogger(unittest.TestCase):
    """Test the logging system."""

    def setUp(self):
        Logger.reset()
        Logger.initialize(level=LogLevel.DEBUG, console_output=False)

    def tearDown(self):
        Logger.reset()

    def test_logger_singleton(self):
        """Same subsystem = same instance."""
        self.assertIs(Logger('test-a'), Logger('test-a'))
        self.assertIs(get_logger('test-a'), Logger('test-a'))
        self.assertIsNot(Logger('test-a'), Logger('test-b'))
        self.assertEqual(get_logger('test-b').subsystem, 'test-b')

    def test_buffer_keeps_context(self):
        log = get_logger('test-buffer')
        log.info("Index built", context={'entries': 3})
        log.debug("detail")

        logs = Logger.get_engine_logs(subsystem='test-buffer')
        self.assertEqual([entry['message'] for entry in logs], ["Index built", "detail"])
        self.assertEqual(logs[0]['context'], {'entries': 3})
        self.assertEqual(logs[0]['level'], 'INFO')

        info_only = Logger.get_engine_logs(level='INFO', subsystem='test-buffer')
        self.assertEqual(len(info_only), 1)

    def test_engine_activity_is_logged(self):
        """Rejected mutations leave a DEBUG record behind."""
        from .support import HOME, make_engine

        vfs, _ = make_engine()
        vfs.touch(HOME, 'a.txt')
        records = Logger.get_engine_logs(subsystem='mutations')
        self.assertTrue(any('touch rejected' in entry['message'] for entry in records))

    def test_initialize_once(self):
        Logger.initialize(level=LogLevel.ERROR)
        get_logger('test-once').info("still captured")
        self.assertEqual(len(Logger.get_engine_logs(subsystem='test-once')), 1)

    def test_file_output(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / 'logs' / 'deskvfs.log'
            Logger.reset()
            Logger.initialize(level=LogLevel.INFO, log_file=str(log_file), console_output=False)

            get_logger('test-file').warning("disk message", context={'k': 'v'})
            Logger.reset()

            text = log_file.read_text(encoding='utf-8')
        self.assertIn('[test-file] disk message {k=v}', text)

    def test_reset_clears_buffer(self):
        get_logger('test-reset').info("before")
        Logger.reset()
        self.assertEqual(Logger.get_engine_logs(), [])


class TestLogHelpers(unittest.TestCase):
    """Test levels and formatting."""

    def test_level_from_name(self):
        self.assertEqual(LogLevel.from_name('debug'), LogLevel.DEBUG)
        self.assertEqual(LogLevel.from_name('WARNING'), LogLevel.WARNING)
        with self.assertRaises(ValueError):
            LogLevel.from_name('loud')

    def test_formatter(self):
        record = logging.LogRecord('deskvfs.vfs', logging.INFO, __file__, 1, 'hello', None, None)
        record.subsystem = 'vfs'
        record.context = {'entries': 42}

        text = LogFormatter(use_colors=False).format(record)
        self.assertIn('INFO', text)
        self.assertTrue(text.endswith('[vfs] hello {entries=42}'))


if __name__ == '__main__':
    unittest.main()
