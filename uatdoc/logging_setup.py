"""Central logging configuration for the generator.

Applies a root stdout handler so all module loggers emit without per-module
setup, and avoids duplicate handlers when called more than once (for example
from tests that invoke the CLI repeatedly).
"""
from __future__ import annotations
import copy
import logging
from logging.config import dictConfig

_DICT_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    },
    "root": {"level": "WARNING", "handlers": ["console"]},
    "loggers": {
        "uatdoc": {"level": "INFO", "propagate": True},
    },
}

def configure_logging(level: str = "INFO") -> None:
    """Configure generator-wide logging once.

    If the root logger already has handlers, only the `uatdoc` logger level
    is adjusted to prevent duplicate output.
    """
    root = logging.getLogger()
    if root.handlers:
        logging.getLogger("uatdoc").setLevel(level.upper())
        return
    config = copy.deepcopy(_DICT_CONFIG)
    config["loggers"]["uatdoc"]["level"] = level.upper()
    dictConfig(config)
