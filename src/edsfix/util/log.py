from __future__ import annotations

import logging
import logging.config

from rich.console import Console

# stdout is reserved for the JSON-RPC stream.
stderr_console = Console(stderr=True)


def logging_config(level: str = "INFO") -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "rich": {"format": "%(name)s: %(message)s", "datefmt": "[%X]"},
        },
        "handlers": {
            "console": {
                "level": level,
                "class": "rich.logging.RichHandler",
                "formatter": "rich",
                "console": stderr_console,
                "rich_tracebacks": True,
                "show_path": False,
            },
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": level,
                "propagate": True,
            },
        },
    }


def setup_logging(level: str = "INFO") -> None:
    level = (level or "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    logging.config.dictConfig(logging_config(level))
