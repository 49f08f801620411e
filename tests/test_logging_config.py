"""
Tests for logging setup.

Run: python3 -m pytest tests/test_logging_config.py -v
"""

import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from utils.logging_config import ColoredFormatter, parse_level, setup_logging


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParseLevel:
    def test_names(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level(" WARNING ") == logging.WARNING

    def test_unknown_uses_default(self):
        assert parse_level("chatty") == logging.INFO
        assert parse_level("", logging.ERROR) == logging.ERROR


class TestSetupLogging:
    """Tests for setup_logging()"""

    def test_file_handler(self, restore_root, tmp_path):
        """Test records are written to the rotating log file"""
        log_file = tmp_path / "logs" / "netdiag.log"
        setup_logging(level=logging.INFO, log_file=str(log_file), console=False, force=True)

        logging.getLogger("netdiag.test").info("run started")
        for handler in restore_root.handlers:
            handler.flush()

        assert "run started" in log_file.read_text(encoding="utf-8")

    def test_no_handlers_gets_null_handler(self, restore_root):
        setup_logging(console=False, log_file=None, force=True)
        assert any(isinstance(h, logging.NullHandler) for h in restore_root.handlers)

    def test_noisy_libraries_quieted(self, restore_root):
        setup_logging(level=logging.DEBUG, console=False, force=True)
        assert logging.getLogger("urllib3").level == logging.WARNING


class TestColoredFormatter:
    def test_does_not_modify_record(self):
        """Test colors are applied to a copy of the record"""
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)
        formatter = ColoredFormatter("%(levelname)s %(message)s")
        formatter.use_colors = True
        assert "\033[31m" in formatter.format(record)
        assert record.levelname == "ERROR"
