"""
Logging configuration using loguru.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
VERBOSE_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(output_dir: Path, verbose: bool = False) -> logger:
    """
    Route provisioning logs to the console and to files in ``output_dir``.

    Every command line devprep spawns is logged at INFO, so ``devprep.log``
    doubles as a transcript that can be replayed by hand after a failure.

    Args:
        output_dir: Directory for log files
        verbose: Show DEBUG output (captured stderr of successful commands,
            query commands) on the console

    Returns:
        Configured logger instance
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=VERBOSE_CONSOLE_FORMAT if verbose else CONSOLE_FORMAT,
    )

    log_file = output_dir / "devprep.log"
    logger.add(
        log_file,
        rotation="10 MB",
        retention="30 days",
        level="DEBUG",
        format=FILE_FORMAT,
    )

    # Failures only, kept longer
    error_log = output_dir / "devprep_errors.log"
    logger.add(
        error_log,
        rotation="10 MB",
        retention="90 days",
        level="ERROR",
        format=FILE_FORMAT,
    )

    logger.debug(f"Log files: {log_file}, {error_log}")

    return logger
