from __future__ import annotations

import logging
import sys
from typing import IO, Optional

LOGGER_NAME = "mpesa_sdk"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "ERROR": logging.ERROR,
}


def parse_level(level: str) -> int:
    # WARN and anything unrecognised fall back to WARNING
    return _LEVELS.get((level or "").strip().upper(), logging.WARNING)


def get_logger(level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if level is not None:
        logger.setLevel(parse_level(level))
    return logger


def configure_logging(level: str = "DEBUG", stream: Optional[IO[str]] = None) -> logging.Logger:
    """Attach a plain text handler to the package logger (once)."""
    logger = get_logger(level)
    if not any(getattr(h, "_mpesa_sdk", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        handler._mpesa_sdk = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
