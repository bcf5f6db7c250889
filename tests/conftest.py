from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import pytest

TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="unax_helper_tests_"))
os.environ["UNAX_DATA_DIR"] = str(TEST_DATA_DIR)
os.environ["UNAX_PASSPHRASE"] = "test-passphrase-0123456789abcdef"
os.environ["UNAX_DISABLE_KEYRING"] = "1"
os.environ["UNAX_ENV"] = "test"


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.fixture()
def captured_logs():
    from unax_helper.core.logging import get_logger

    logger = get_logger()
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        yield handler.messages
    finally:
        logger.removeHandler(handler)
