"""
Tests for logging setup.
"""

import io
import logging
import os
import sys
import tempfile
import unittest

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils.logging_config import ColourFormatter, PlainFormatter, get_logger, setup_logging


class TestLoggingConfig(unittest.TestCase):
    """Test cases for setup_logging and get_logger."""

    def tearDown(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        root.setLevel(logging.WARNING)

    def test_plain_output_for_non_tty(self):
        """Test that redirected output has no colour codes."""
        stream = io.StringIO()
        setup_logging("INFO", stream=stream)

        get_logger("diffusion.test").info("polling")

        output = stream.getvalue()
        self.assertIn("INFO", output)
        self.assertIn("diffusion.test polling", output)
        self.assertNotIn("\x1b[", output)
        self.assertIsInstance(logging.getLogger().handlers[0].formatter, PlainFormatter)

    def test_level_filtering(self):
        """Test that messages below the level are dropped."""
        stream = io.StringIO()
        setup_logging("warning", stream=stream)

        logger = get_logger("diffusion.test")
        logger.info("hidden")
        logger.warning("shown")

        self.assertNotIn("hidden", stream.getvalue())
        self.assertIn("shown", stream.getvalue())

    def test_file_logging(self):
        """Test that file logging creates the directory and writes."""
        with tempfile.TemporaryDirectory() as tmp:
            log_path = os.path.join(tmp, "logs", "diffusion.log")
            setup_logging("DEBUG", log_to_file=True, log_file_path=log_path, stream=io.StringIO())

            get_logger("diffusion.test").debug("to file")
            for handler in logging.getLogger().handlers:
                handler.flush()

            with open(log_path) as f:
                self.assertIn("to file", f.read())
            self.tearDown()

    def test_colour_formatter(self):
        """Test coloured formatting of a record."""
        record = logging.LogRecord("diffusion", logging.ERROR, __file__, 1, "boom", None, None)
        self.assertIn("\x1b[31m", ColourFormatter().format(record))


if __name__ == '__main__':
    unittest.main()
