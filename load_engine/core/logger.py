"""Loguru sinks for hosts embedding the training load engine.

Engine modules only emit through ``loguru.logger`` with ``[TAG]`` prefixes
(``[THRESHOLDS]``, ``[LOAD]``, ``[METRICS]``, ``[TRENDS]``). Installing sinks
is left to the host, which calls ``setup_logger`` once at startup.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str | None = None,
    log_file: str | Path | None = None,
    *,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> list[int]:
    """Replace every loguru sink with a console sink and an optional file sink.

    Args:
        level: Minimum level; defaults to ``settings.log_level``
        log_file: Optional path for a rotating, zip-compressed file sink
        rotation: Rotation trigger for the file sink (e.g. "10 MB", "1 day")
        retention: How long rotated files are kept (e.g. "7 days")

    Returns:
        Handler ids of the installed sinks, console first.
    """
    if level is None:
        from load_engine.config.settings import settings

        level = settings.log_level

    logger.remove()
    handler_ids = [logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(
                log_path,
                format=FILE_FORMAT,
                level=level,
                rotation=rotation,
                retention=retention,
                compression="zip",
                backtrace=True,
                diagnose=False,
            )
        )

    logger.info(f"[LOGGER] Logger initialized with level={level} file={log_file or '-'}")
    return handler_ids
