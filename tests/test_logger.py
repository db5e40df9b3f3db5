import logging
from pathlib import Path
from typing import Iterator

import pytest

from osiris_shell.logger import setup_logging


@pytest.fixture
def shell_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger("osiris_shell")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_setup_logging_writes_to_data_dir(
    shell_logger: logging.Logger, tmp_path: Path
) -> None:
    setup_logging()
    logging.getLogger("osiris_shell.console.engine").info("engine started")

    log_file = tmp_path / "data" / "osiris_shell" / "osiris.log"
    for handler in shell_logger.handlers:
        handler.flush()
    assert "osiris_shell.console.engine - INFO - engine started" in log_file.read_text()


def test_setup_logging_is_idempotent(shell_logger: logging.Logger) -> None:
    setup_logging()
    setup_logging()
    file_handlers = [
        h for h in shell_logger.handlers if isinstance(h, logging.FileHandler)
    ]
    assert len(file_handlers) == 1
    assert shell_logger.propagate is False


def test_log_level_from_environment(
    monkeypatch: pytest.MonkeyPatch, shell_logger: logging.Logger
) -> None:
    monkeypatch.setenv("OSIRIS_LOG_LEVEL", "debug")
    setup_logging()
    assert shell_logger.level == logging.DEBUG
