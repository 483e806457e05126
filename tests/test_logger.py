import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from bras_collector.logger import get_logger, init_logging, set_level


@pytest.fixture
def logger(tmp_path):
    lg = init_logging(tmp_path / "logs", max_mb=1, max_files=3)
    yield lg
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()
    lg.setLevel(logging.NOTSET)


def _file_handler(lg):
    return next(h for h in lg.handlers if isinstance(h, RotatingFileHandler))


def test_creates_directory_and_file(tmp_path, logger):
    lg = init_logging(tmp_path / "other", max_mb=1, max_files=3)
    assert (tmp_path / "other").is_dir()
    assert (tmp_path / "other" / "collector.log").is_file()
    assert Path(_file_handler(lg).baseFilename) == tmp_path / "other" / "collector.log"


def test_get_logger_returns_initialized_logger(logger):
    assert get_logger() is logger
    assert logger.name == "bras_collector"


def test_file_receives_debug_messages(logger):
    lg = get_logger()
    assert lg is logger
    logging.getLogger("bras_collector.some_module").debug("debug-marker-xyz")
    handler = _file_handler(lg)
    handler.flush()
    content = Path(handler.baseFilename).read_text(encoding="utf-8")
    assert "debug-marker-xyz" in content
    assert "Logger initialized" in content
    assert "[DEBUG]" in content


def test_rotation_settings(logger):
    rotating = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(rotating) == 1
    assert rotating[0].maxBytes == 1024 * 1024
    assert rotating[0].backupCount == 3


def test_reinit_does_not_duplicate_handlers(tmp_path, logger):
    again = init_logging(tmp_path / "logs2")
    assert again is logger
    assert len(again.handlers) == 2


def test_set_level_by_name_and_number(logger):
    set_level("warning")
    assert logger.level == logging.WARNING
    set_level(logging.ERROR)
    assert logger.level == logging.ERROR


def test_set_level_unknown_name(logger):
    with pytest.raises(ValueError):
        set_level("chatty")