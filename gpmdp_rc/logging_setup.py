"""Logging setup for the gpmdp-rc command."""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(log_level: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Set up the package logger.

    Console output goes to stderr so it never mixes with command output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for a rotating log file, or None for console only

    Returns:
        Configured logger
    """
    logger = logging.getLogger("gpmdp_rc")
    logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))

    # Repeated invocations in one process (tests) must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(FORMAT))
    logger.addHandler(console_handler)

    if log_dir is not None:
        # Daily rotation, keep 7 days
        file_handler = TimedRotatingFileHandler(
            log_dir / "gpmdp_rc.log",
            when="midnight",
            interval=1,
            backupCount=7,
        )
        file_handler.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(file_handler)

    return logger
