"""
Centralized logger configuration for the model combiner.

Provides:
- InterceptHandler: bridges stdlib logging to loguru
- configure_logging(settings): sets up sinks and returns a bound app logger
- get_child_logger(name): logger bound with a module name

Stdout carries the combined model, so every sink here writes to stderr
or to a file.
"""
from __future__ import annotations

import sys
import logging
from typing import TYPE_CHECKING, Optional

from loguru import logger

from .settings import DEFAULT_LOG_LEVEL, LOG_LEVELS, Settings

if TYPE_CHECKING:
    from loguru import Logger

APP_NAME = "combine_models"


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        # forward to loguru, preserve exception info if present
        logger.opt(exception=record.exc_info).log(level, record.getMessage())


def configure_logging(settings: Optional[Settings] = None, app_name: str = APP_NAME) -> "Logger":
    """
    Configure loguru sinks and stdlib logging interception.
    Returns a logger bound with `app=app_name`.
    """
    settings = settings or Settings.from_env()
    log_level = settings.log_level.upper()
    rejected = settings.rejected_log_level
    if log_level not in LOG_LEVELS:
        rejected, log_level = log_level, DEFAULT_LOG_LEVEL

    logger.remove()
    logger.configure(extra={"app": app_name})
    logger.add(sys.stderr, level=log_level, format="<green>{time}</green> <level>{level}</level> {message}")
    if rejected:
        logger.warning("Unknown log level {!r}, using {}", rejected, log_level)

    # Optional file sink, only when a path is configured
    if settings.log_file:
        logger.add(
            settings.log_file,
            level=log_level,
            backtrace=True,
            diagnose=False,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            format="{time} | {level} | {extra[app]} | {message}",
        )
        logger.debug(
            "File logging enabled: {} (rotation={} retention={})",
            settings.log_file,
            settings.log_rotation,
            settings.log_retention,
        )

    # Bridge stdlib logging through loguru
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(getattr(logging, log_level, logging.WARNING))

    return logger.bind(app=app_name)


def get_child_logger(name: str, app_name: str = APP_NAME) -> "Logger":
    """Convenience: return a logger bound with app and module name."""
    return logger.bind(app=app_name, module=name)


__all__ = [
    "APP_NAME",
    "InterceptHandler",
    "configure_logging",
    "get_child_logger",
]
