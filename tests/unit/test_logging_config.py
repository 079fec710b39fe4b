from __future__ import annotations

import logging
from pathlib import Path

import pytest

from shared import logging_config


def _flush_managed_handlers() -> None:
    for handler in logging.getLogger().handlers:
        if getattr(handler, logging_config._HANDLER_TAG, False):  # type: ignore[attr-defined]
            handler.flush()


@pytest.fixture(autouse=True)
def reset_logging():
    logging_config._reset_for_tests()
    try:
        yield
    finally:
        logging_config._reset_for_tests()


def test_logging_creates_file_in_configured_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("WORK_INSTALLER_LOG_DIR", str(tmp_path))

    log_path = logging_config.ensure_logging()
    logging.getLogger("services.install.service").debug("debug message")
    logging.getLogger("services.install.service").info("info message")
    _flush_managed_handlers()

    assert log_path == tmp_path / "install.log"
    contents = log_path.read_text(encoding="utf-8")
    assert "debug message" not in contents
    assert "info message" in contents


def test_log_file_env_takes_precedence(tmp_path, monkeypatch):
    monkeypatch.setenv("WORK_INSTALLER_LOG_DIR", str(tmp_path / "ignored"))
    monkeypatch.setenv("WORK_INSTALLER_LOG_FILE", str(tmp_path / "custom.log"))

    assert logging_config.ensure_logging() == tmp_path / "custom.log"


def test_logging_configuration_is_idempotent(tmp_path, monkeypatch):
    monkeypatch.setenv("WORK_INSTALLER_LOG_DIR", str(tmp_path))

    first_path = logging_config.ensure_logging()
    second_path = logging_config.ensure_logging()

    assert first_path == second_path
    managed_handlers = [
        handler
        for handler in logging.getLogger().handlers
        if getattr(handler, logging_config._HANDLER_TAG, False)  # type: ignore[attr-defined]
    ]

    # Only the file handler is installed during tests (stderr is not a tty).
    assert len(managed_handlers) == 1
    assert isinstance(managed_handlers[0], logging.FileHandler)
    assert Path(managed_handlers[0].baseFilename) == first_path


def test_verbose_level_records_debug(tmp_path, monkeypatch):
    monkeypatch.setenv("WORK_INSTALLER_LOG_DIR", str(tmp_path))

    log_path = logging_config.ensure_logging("verbose")
    logging.getLogger("tests.logging").debug("debug message")
    _flush_managed_handlers()

    assert "debug message" in log_path.read_text(encoding="utf-8")
    assert logging_config._FILE_HANDLER.level == logging.DEBUG  # type: ignore[union-attr]


def test_disabled_level_suppresses_output(tmp_path, monkeypatch):
    monkeypatch.setenv("WORK_INSTALLER_LOG_DIR", str(tmp_path))

    log_path = logging_config.ensure_logging()
    logging_config.set_log_verbosity(logging_config.LogVerbosity.DISABLED)
    logging.getLogger("tests.logging").error("error message")
    _flush_managed_handlers()

    assert "error message" not in log_path.read_text(encoding="utf-8")


def test_home_directory_is_redacted(tmp_path, monkeypatch):
    monkeypatch.setenv("WORK_INSTALLER_LOG_DIR", str(tmp_path))
    home = str(Path.home())
    if home in {"", "/"}:
        pytest.skip("home directory is the filesystem root")

    log_path = logging_config.ensure_logging()
    logging.getLogger("tests.logging").warning("Installed %s/.local/bin/work", home)
    _flush_managed_handlers()

    contents = log_path.read_text(encoding="utf-8")
    assert "<user_home>/.local/bin/work" in contents


def test_unknown_verbosity_is_rejected():
    with pytest.raises(ValueError, match="Unsupported"):
        logging_config.parse_verbosity("chatty")
