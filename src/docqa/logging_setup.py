from __future__ import annotations

import logging
import logging.config
import os


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Configure console logging for scripts and services embedding docqa.

    The level comes from `level`, else the LOG_LEVEL environment variable,
    else INFO.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "info")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "level": level,
                    "stream": "ext://sys.stderr",
                },
            },
            "root": {
                "handlers": ["console"],
                "level": level,
            },
        }
    )
    # scikit-learn / numpy stay quiet unless debugging
    logging.getLogger("sklearn").setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)
    return logging.getLogger("docqa")
