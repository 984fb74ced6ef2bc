import logging
import os
import sys
from logging import Formatter, StreamHandler, getLogger
from logging.handlers import RotatingFileHandler
from logging import DEBUG, INFO, WARNING, ERROR, CRITICAL

class ColourFormatter(Formatter):
    """Custom formatter with colored output for different log levels."""

    LEVEL_COLOURS = [
        (DEBUG, "\x1b[40;1m"),
        (INFO, "\x1b[34;1m"),
        (WARNING, "\x1b[33;1m"),
        (ERROR, "\x1b[31m"),
        (CRITICAL, "\x1b[41m"),
    ]

    FORMATS = {
        level: Formatter(
            f"\x1b[30;1m%(asctime)s\x1b[0m {colour}%(levelname)-8s\x1b[0m "
            f"\x1b[35m%(name)s\x1b[0m %(message)s",
            "%H:%M:%S",
        )
        for level, colour in LEVEL_COLOURS
    }

    def format(self, record):
        formatter = self.FORMATS.get(record.levelno, self.FORMATS[DEBUG])
        return formatter.format(record)

class PlainFormatter(Formatter):
    """Formatter without colors, for pipes and redirected stderr."""

    def __init__(self):
        super().__init__(
            "%(asctime)s %(levelname)-8s %(name)s %(message)s",
            "%Y-%m-%d %H:%M:%S"
        )

class FileFormatter(Formatter):
    """Simple formatter for file output without colors."""

    def __init__(self):
        super().__init__(
            "%(asctime)s %(levelname)-8s %(name)s %(message)s (%(filename)s:%(lineno)d)",
            "%Y-%m-%d %H:%M:%S"
        )

def setup_logging(level="WARNING", log_to_file=False, log_file_path="logs/diffusion_to.log", max_file_size=5*1024*1024, backup_count=3, stream=None):
    """
    Set up logging for the command line tool, with optional file logging.

    Console output always goes to stderr (or ``stream``) so that stdout only
    carries the image reference.

    Args:
        level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file (bool): Whether to log to a file in addition to the console
        log_file_path (str): Path to the log file (if log_to_file is True)
        max_file_size (int): Maximum size of log file before rotation (default 5MB)
        backup_count (int): Number of backup files to keep
        stream: Console stream, defaults to sys.stderr

    Returns:
        logging.Logger: Configured root logger
    """
    stream = stream or sys.stderr
    handlers = []

    console_handler = StreamHandler(stream)
    if hasattr(stream, "isatty") and stream.isatty() and not os.environ.get("NO_COLOR"):
        console_handler.setFormatter(ColourFormatter())
    else:
        console_handler.setFormatter(PlainFormatter())
    handlers.append(console_handler)

    if log_to_file:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # Use rotating file handler to prevent log files from growing too large
        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=max_file_size,
            backupCount=backup_count
        )
        file_handler.setFormatter(FileFormatter())
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    # httpx logs every request at INFO, which would duplicate our own messages
    getLogger("httpx").setLevel(max(logging.WARNING, logging.getLogger().level))

    return logging.getLogger()

def get_logger(name=None):
    """
    Get a logger for a module.

    Args:
        name (str): Logger name (typically __name__ from the calling module)

    Returns:
        logging.Logger: Logger instance; handlers come from the root logger
    """
    return getLogger(name)
