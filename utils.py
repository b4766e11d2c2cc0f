# utils.py
"""
Utility functions for the bit.ly client.
Provides logging configuration shared by the CLI and the stub API.
"""

import logging
import sys

import config

# HTTP libraries that log full request URLs, apiKey included
URL_LOGGING_LIBRARIES = ("httpx", "httpcore", "urllib3")


def setup_logging(level: int | str = logging.INFO, log_file: str = config.LOG_FILE) -> None:
    """
    Configure logging for console and file output.

    The HTTP libraries are held at WARNING whatever the level, so signed
    request URLs never reach the console or the log file.

    Args:
        level: Logging level (default: INFO).
        log_file: Path of the log file handler (default: config.LOG_FILE).
    """
    for name in URL_LOGGING_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    root = logging.getLogger()

    if root.handlers:
        return

    root.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)
