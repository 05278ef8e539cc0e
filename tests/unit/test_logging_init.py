from __future__ import annotations

import logging
from io import StringIO

from driver_import.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    set_debug,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == LOGGER_NAME == "driver_import"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    assert setup_logging() is setup_logging()
    assert len(get_logger().handlers) == 1


def test_labeled_prefixes():
    out = StringIO()
    logger = logging.getLogger("test_driver_import_labels")
    logger.setLevel(logging.INFO)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    handler = logging.StreamHandler(out)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(SUMMARY_LEVEL, "Test summary message")

    assert out.getvalue().strip().split("\n") == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_module_loggers_reach_package_handler(capsys):
    setup_logging()
    logging.getLogger("driver_import.services.grid").info("child message")
    log_summary("rows=1")
    out = capsys.readouterr().out
    assert "INFO child message" in out
    assert "SUMMARY rows=1" in out


def test_set_debug(capsys):
    setup_logging()
    set_debug(True)
    assert get_logger().level == logging.DEBUG
    assert "DEBUG debug mode enabled" in capsys.readouterr().out
    set_debug(False)
    assert get_logger().level == logging.INFO


def test_reset_logging():
    first = setup_logging()
    reset_logging()
    assert logging.getLogger(LOGGER_NAME).handlers == []
    assert setup_logging() is first  # 同名ロガーは再利用される
