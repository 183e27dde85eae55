import io
import logging

import pytest

from mpesa_sdk.logger import LOGGER_NAME, configure_logging, get_logger, parse_level


@pytest.mark.parametrize(
    "name,expected",
    [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        ("ERROR", logging.ERROR),
        ("WARN", logging.WARNING),
        ("nonsense", logging.WARNING),
        ("", logging.WARNING),
    ],
)
def test_parse_level(name, expected):
    assert parse_level(name) == expected


def test_get_logger_sets_package_level():
    logger = get_logger("ERROR")
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.ERROR


def test_configure_logging_attaches_one_handler():
    stream = io.StringIO()
    logger = configure_logging("INFO", stream=stream)
    try:
        configure_logging("INFO", stream=stream)
        ours = [h for h in logger.handlers if getattr(h, "_mpesa_sdk", False)]
        assert len(ours) == 1

        logging.getLogger("mpesa_sdk.test").info("hello from the sdk")
        assert "hello from the sdk" in stream.getvalue()
    finally:
        for h in [h for h in logger.handlers if getattr(h, "_mpesa_sdk", False)]:
            logger.removeHandler(h)
