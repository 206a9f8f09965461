"""
Logging configuration.

The terminal belongs to the TUI while the app runs, so diagnostics are
written to a log file instead of stderr.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_path, level="INFO"):
    """Send all log records to *log_path*

    Args:
        log_path: File that receives the log records (parent dirs are created)
        level: Level name such as "INFO" or "DEBUG"

    Returns:
        logging.Handler: The installed file handler
    """
    os.makedirs(os.path.dirname(os.path.abspath(log_path)), exist_ok=True)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
