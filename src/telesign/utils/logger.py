"""Centralized logging configuration."""

import logging
import sys
from collections.abc import Mapping
from datetime import datetime

from .config import Config

REDACTED = "<redacted>"
SENSITIVE_HEADERS = frozenset({"authorization", "proxy-authorization"})


class MicrosecondFormatter(logging.Formatter):
    """Formatter that includes microsecond precision in timestamps.

    Example output:
        2024-01-15 14:23:45.123456 - telesign - DEBUG - [rest.py:118:_send] - POST https://...
    """

    def formatTime(self, record, datefmt=None):
        ct = datetime.fromtimestamp(record.created)
        s = ct.strftime(datefmt or "%Y-%m-%d %H:%M:%S")
        return f"{s}.{int(record.created % 1 * 1_000_000):06d}"


def setup_logger(name: str = "telesign") -> logging.Logger:
    """Set up and return the library logger.

    Handlers are attached once, so importing the client from several modules
    does not duplicate output.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = MicrosecondFormatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d:%(funcName)s] - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO))

    return logger


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of headers safe to write to the log."""
    return {
        key: REDACTED if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


logger = setup_logger()
