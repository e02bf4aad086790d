import logging
import uuid

import pytest

from dca_system.utils.logger import set_level, setup_logger


@pytest.fixture
def logger_name():
    name = f"dca_test_{uuid.uuid4().hex[:8]}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_setup_logger_writes_daily_file(tmp_path, logger_name):
    logger = setup_logger(logger_name, level="DEBUG", log_dir=str(tmp_path / "logs"), console=False)
    logger.debug("hello")
    for handler in logger.handlers:
        handler.flush()

    files = list((tmp_path / "logs").glob(f"{logger_name}_*.log"))
    assert len(files) == 1
    text = files[0].read_text(encoding="utf-8")
    assert "[DEBUG]" in text and "hello" in text


def test_setup_logger_is_idempotent(logger_name):
    logger = setup_logger(logger_name, log_dir=None)
    again = setup_logger(logger_name, level="ERROR", log_dir=None)
    assert again is logger
    assert len(logger.handlers) == 1
    assert logger.level == logging.ERROR


def test_console_only(logger_name):
    logger = setup_logger(logger_name, log_dir=None, console=True)
    assert [type(h) for h in logger.handlers] == [logging.StreamHandler]


def test_unknown_level_falls_back_to_info(logger_name):
    logger = setup_logger(logger_name, level="LOUD", log_dir=None, console=False)
    assert logger.level == logging.INFO


def test_set_level(logger_name):
    logger = setup_logger(logger_name, log_dir=None, console=False)
    set_level(logger_name, "warning")
    assert logger.level == logging.WARNING
