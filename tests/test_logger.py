# File: tests/test_logger.py
import logging
from logging.handlers import RotatingFileHandler

import pytest

from url_inventory.logger import init_logging


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    init_logging(level="WARNING")


def test_init_logging_replaces_handlers():
    lg = init_logging(level="DEBUG")
    init_logging(level="INFO")

    assert lg is logging.getLogger("URLInventory")
    assert lg.level == logging.INFO
    assert len(lg.handlers) == 1
    assert lg.propagate is False


def test_init_logging_with_file(tmp_path):
    log_file = tmp_path / "inventory.log"
    lg = init_logging(level="INFO", log_file=log_file, log_format="%(levelname)s %(message)s")
    lg.info("crawl started")
    for handler in lg.handlers:
        handler.flush()

    assert any(isinstance(h, RotatingFileHandler) for h in lg.handlers)
    assert log_file.read_text(encoding="utf-8").strip() == "INFO crawl started"
