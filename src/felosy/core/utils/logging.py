"""
Logging configuration using loguru.

Provides a simple setup function that configures loguru with sensible defaults.
Consumers can call setup_logging() at app startup, or just use loguru directly.
The felosy library itself never installs sinks on import.
"""

import os
import sys

from loguru import logger

DEFAULT_FORMAT = "<level>[{level.name}]</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    fmt: str = DEFAULT_FORMAT,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Configure loguru with console and optional file output.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None, only logs to stderr.
        fmt: Loguru format string.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=fmt)

    if log_file:
        logger.add(
            log_file,
            level=level.upper(),
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
        )


def setup_logging_from_config(config) -> None:
    """Configure logging from the ``logging`` section of a :class:`~felosy.core.config.Config`.

    A bare ``logging.file`` name is placed under ``paths.log_dir``.
    """
    log_file = config.get("logging.file")
    if log_file:
        log_file = os.path.expanduser(str(log_file))
        log_dir = config.get("paths.log_dir")
        if log_dir and not os.path.isabs(log_file):
            log_file = os.path.join(os.path.expanduser(str(log_dir)), log_file)
    setup_logging(
        level=str(config.get("logging.level", "WARNING")),
        log_file=log_file,
    )
