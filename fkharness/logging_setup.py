"""Central logging configuration for the harness.

Applies a root stdout handler so all module loggers emit INFO-level logs
without per-module setup. SQL statement logging is opt-in through the
`echo_sql` configuration flag and avoids duplicate handlers on re-entry.
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
            "level": "INFO",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "sqlalchemy.engine": {"level": "WARNING", "handlers": ["console"], "propagate": False},
    },
}


def configure_logging(echo_sql: bool = False) -> None:
    """Configure harness-wide logging once.

    If the root logger already has handlers, return to prevent duplicate output
    (pytest and behave install their own capture handlers).
    """
    root = logging.getLogger()
    if root.handlers:
        if echo_sql:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
        return
    config = copy.deepcopy(_DICT_CONFIG)
    if echo_sql:
        config["loggers"]["sqlalchemy.engine"]["level"] = "INFO"
    dictConfig(config)
