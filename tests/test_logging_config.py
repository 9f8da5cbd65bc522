import logging
from logging.handlers import RotatingFileHandler

import pytest

from merchantmap import logging_config


@pytest.fixture()
def fresh_logger(request):
    name = f"merchantmap.tests.{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_logger_writes_to_rotating_file(monkeypatch, tmp_path, fresh_logger) -> None:
    monkeypatch.delenv("MERCHANTMAP_LOG_TO_FILE", raising=False)
    monkeypatch.setattr(logging_config, "LOG_FILE", str(tmp_path / "logs" / "crawl.log"))

    logger = logging_config.get_logger(fresh_logger)

    files = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(files) == 1
    assert files[0].baseFilename == str(tmp_path / "logs" / "crawl.log")
    assert logger.propagate is False


def test_log_to_file_switch_keeps_console_only(monkeypatch, tmp_path, fresh_logger) -> None:
    monkeypatch.setenv("MERCHANTMAP_LOG_TO_FILE", "off")
    monkeypatch.setattr(logging_config, "LOG_FILE", str(tmp_path / "logs" / "crawl.log"))

    logger = logging_config.get_logger(fresh_logger)

    assert [type(h) for h in logger.handlers] == [logging.StreamHandler]
    assert not (tmp_path / "logs").exists()


def test_get_logger_does_not_duplicate_handlers(monkeypatch, fresh_logger) -> None:
    monkeypatch.setenv("MERCHANTMAP_LOG_TO_FILE", "0")
    first = logging_config.get_logger(fresh_logger)
    second = logging_config.get_logger(fresh_logger)
    assert first is second
    assert len(second.handlers) == 1


def test_set_level_updates_handlers(monkeypatch, fresh_logger) -> None:
    monkeypatch.setenv("MERCHANTMAP_LOG_TO_FILE", "0")
    logger = logging_config.get_logger(fresh_logger)
    try:
        logging_config.set_level("debug")
        assert logger.level == logging.DEBUG
        assert logger.handlers[0].level == logging.DEBUG
    finally:
        logging_config.set_level(logging_config.DEFAULT_LEVEL)
