"""
Logging configuration.

Environment Variables (through Settings):
    BEYOND_JANUARY_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    BEYOND_JANUARY_LOG_FORMAT: text, json (default: text)

Streamlit re-runs page scripts on every interaction, so setup is idempotent:
the handler is only installed once per process.
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

_HANDLER_NAME = "beyond_january"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """
    Configure the root logger with a single stdout handler.

    Calling it again replaces the formatter and level of the installed
    handler instead of adding a second one.
    """
    lvl = LEVELS.get(level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(lvl)

    handler = next((h for h in root.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        root.addHandler(handler)
    handler.setLevel(lvl)
    handler.setFormatter(build_formatter(log_format.lower()))

    # Silence noisy libraries
    logging.getLogger("watchdog").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
