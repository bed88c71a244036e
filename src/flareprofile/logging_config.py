"""
Logging Configuration
Routes the 'flareprofile' log records of a command-line run to stderr and,
optionally, to a log file. Key point tables go to stdout and stay free of
log lines.
"""
import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Attach stderr (and optional file) handlers to the 'flareprofile' logger.

    Called once by `flareprofile.main.main` with the `--log-level` and
    `--log-file` options. Fits and key point sampling only log through module
    loggers, so importing the package leaves logging unconfigured.

    Args:
        level: Logging level (e.g. logging.DEBUG to trace shape parameter solves)
        log_file: Optional path of a log file, overwritten on every run.
    """
    logger = logging.getLogger("flareprofile")
    logger.setLevel(level)

    # main() may run more than once in one process (tests, notebooks)
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
