"""Logging configuration for xgboost_predictor."""

import logging
import os
import sys
from logging.config import dictConfig
from typing import Optional

_FORMAT = "%(levelname)s %(asctime)s [%(filename)s:%(lineno)d] %(message)s"
_DATE_FORMAT = "%m-%d %H:%M:%S"

_ROOT_LOGGER = "xgboost_predictor"


def _get_default_logging_level() -> Optional[str]:
    """Get logging level from environment variable, None when unset"""
    level = os.getenv("XGBOOST_PREDICTOR_LOGGING_LEVEL")
    if not level:
        return None
    return level.upper()


def _should_use_color() -> bool:
    """Determine if colored output should be used"""
    if os.getenv("NO_COLOR"):
        return False

    color_setting = os.getenv("XGBOOST_PREDICTOR_LOGGING_COLOR", "auto")
    if color_setting == "0" or color_setting.lower() == "false":
        return False
    if color_setting == "1" or color_setting.lower() == "true":
        return True

    # Auto-detect based on terminal
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


class ColoredFormatter(logging.Formatter):
    """Colored log formatter"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[1;31m',
    }
    RESET = '\033[0m'

    def format(self, record):
        record = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        return super().format(record)


def build_logging_config() -> dict:
    """Return the dictConfig mapping for the package logger.

    Records propagate to the application's handlers. A stderr handler and
    a level are attached only when XGBOOST_PREDICTOR_LOGGING_LEVEL is set,
    otherwise the package logger only carries a NullHandler.
    """
    level = _get_default_logging_level()
    if level is None:
        handlers = {
            "null": {
                "class": "logging.NullHandler",
            },
        }
        package_logger = {
            "handlers": ["null"],
            "level": "NOTSET",
            "propagate": True,
        }
    else:
        handlers = {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "colored" if _should_use_color() else "default",
                "level": level,
                "stream": "ext://sys.stderr",
            },
        }
        package_logger = {
            "handlers": ["default"],
            "level": level,
            "propagate": True,
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": _FORMAT,
                "datefmt": _DATE_FORMAT,
            },
            "colored": {
                "()": ColoredFormatter,
                "format": _FORMAT,
                "datefmt": _DATE_FORMAT,
            },
        },
        "handlers": handlers,
        "loggers": {
            _ROOT_LOGGER: package_logger,
        },
    }


def configure_logging() -> None:
    """(Re)configure the package logger from the environment"""
    dictConfig(build_logging_config())


def init_logger(name: str) -> logging.Logger:
    """Initialize and return a logger with the given name

    Args:
        name: Name of the logger (typically __name__)

    Returns:
        Logger instance below the package logger
    """
    return logging.getLogger(name)


def set_logging_level(level) -> None:
    """Set the logging level for all xgboost_predictor loggers

    Args:
        level: Logging level as a name ("DEBUG", "info", ...) or an int
    """
    if hasattr(level, 'upper'):
        level = level.upper()
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def disable_logging() -> None:
    """Disable all xgboost_predictor logging"""
    logging.getLogger(_ROOT_LOGGER).disabled = True


def enable_logging() -> None:
    """Enable xgboost_predictor logging"""
    logging.getLogger(_ROOT_LOGGER).disabled = False


configure_logging()

logger = init_logger(__name__)
