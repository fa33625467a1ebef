"""Logging configuration using Loguru."""

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from breadcrumbs_notebook.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(config: "LoggingConfig | None" = None) -> list[int]:
    """
    Replace all Loguru sinks with the notebook's console (and optional file) sinks.

    Args:
        config: Logging settings (defaults to LoggingConfig())

    Returns:
        Ids of the added sinks
    """
    if config is None:
        from breadcrumbs_notebook.config import LoggingConfig

        config = LoggingConfig()
    logger.remove()

    sink_ids = [
        logger.add(
            sys.stderr,
            level=config.level,
            format=CONSOLE_FORMAT,
            colorize=True,
            serialize=False,
        )
    ]

    if config.log_to_file:
        log_path = Path(config.log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # JSON lines when serialize is on
        sink_ids.append(
            logger.add(
                log_path / "breadcrumbs_{time:YYYY-MM-DD}.log",
                level=config.level,
                format=FILE_FORMAT,
                rotation=config.file_rotation,
                retention=config.file_retention,
                compression=config.compression,
                serialize=config.serialize,
                enqueue=True,
            )
        )
    return sink_ids


def get_logger(name: str):
    """Get a logger bound to a module name."""
    return logger.bind(module=name)
