"""Loguru sinks for the race logger.

Context bound with ``logger.bind(...)`` (broadcast channel, action, race id)
is appended to every line so field-device traffic can be traced per race.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> <dim>{extra}</dim>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def setup_logger(
    level: str = "INFO",
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "14 days",
) -> None:
    """Replace loguru's default sink with the race logger sinks.

    Args:
        level: Minimum level for every sink
        log_file: Optional path of a rotating, zipped log file
        rotation: When the log file rolls over (size or interval)
        retention: How long rolled files are kept
    """
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            enqueue=True,
        )

    logger.bind(log_file=str(log_file) if log_file else None).info(f"Logging configured at {level}")


def setup_logger_from_settings(settings=None) -> None:
    """Configure logging from LOG_LEVEL and LOG_FILE."""
    if settings is None:
        from race_logger.config.settings import settings
    setup_logger(level=settings.log_level, log_file=settings.log_file)
