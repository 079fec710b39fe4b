"""Central logging configuration for the installer.

Installer runs append to a log file so failed downloads or checksum problems
can be diagnosed after the fact. Interactive runs also echo INFO and above to
stderr.

Two environment variables choose where the log file is written:

``WORK_INSTALLER_LOG_FILE``
    Absolute path to the log file that should be created.

``WORK_INSTALLER_LOG_DIR``
    Directory where the default log file name will be created.  Ignored when
    ``WORK_INSTALLER_LOG_FILE`` is present.

Home directory paths are replaced with ``<user_home>`` in every record.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Iterable

_LOG_FILE_ENV = "WORK_INSTALLER_LOG_FILE"
_LOG_DIR_ENV = "WORK_INSTALLER_LOG_DIR"
_DEFAULT_DIRNAME = ".work-installer"
_DEFAULT_LOGNAME = "install.log"
_CONFIGURED = False
_LOG_PATH: Path | None = None
_HANDLER_TAG = "_work_installer_logging_handler"
_FILE_HANDLER: logging.FileHandler | None = None
_STREAM_HANDLER: logging.StreamHandler | None = None

USER_HOME_PLACEHOLDER = "<user_home>"


class LogVerbosity(str, Enum):
    """Verbosity levels supported by the installer log output."""

    DISABLED = "disabled"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    VERBOSE = "verbose"


_VERBOSITY_LEVELS: dict[LogVerbosity, int] = {
    LogVerbosity.DISABLED: logging.CRITICAL + 1,
    LogVerbosity.ERROR: logging.ERROR,
    LogVerbosity.WARNING: logging.WARNING,
    LogVerbosity.INFO: logging.INFO,
    LogVerbosity.VERBOSE: logging.DEBUG,
}

_DEFAULT_VERBOSITY = LogVerbosity.INFO
_CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


def _home_directory_patterns() -> list[re.Pattern[str]]:
    candidates = {str(Path.home())}
    env_home = os.environ.get("HOME")
    if env_home:
        candidates.add(os.path.expanduser(env_home))
    normalised = {
        os.path.normpath(candidate)
        for candidate in candidates
        if candidate and candidate not in {os.sep, ""}
    }
    # Longest first so nested home paths are replaced whole.
    ordered = sorted(normalised, key=len, reverse=True)
    return [re.compile(re.escape(candidate)) for candidate in ordered]


_REDACTION_PATTERNS: tuple[re.Pattern[str], ...] = tuple(_home_directory_patterns())


def _sanitize_text(message: str) -> str:
    if not message:
        return message
    redacted = message
    for pattern in _REDACTION_PATTERNS:
        redacted = pattern.sub(USER_HOME_PLACEHOLDER, redacted)
    return redacted


class _RedactingFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return _sanitize_text(super().format(record))


def parse_verbosity(value: LogVerbosity | str) -> LogVerbosity:
    if isinstance(value, LogVerbosity):
        return value
    try:
        return LogVerbosity(value.strip().lower())
    except ValueError as exc:
        raise ValueError(f"Unsupported log verbosity: {value}") from exc


def ensure_logging(verbosity: LogVerbosity | str | None = None) -> Path:
    """Configure the root logger for installer runs.

    The first call installs a file handler and, when stderr is a terminal, a
    stream handler. Later calls only adjust verbosity and return the existing
    log file path.
    """

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER, _STREAM_HANDLER

    if _CONFIGURED and _LOG_PATH is not None:
        if verbosity is not None:
            set_log_verbosity(verbosity)
        return _LOG_PATH

    if verbosity is not None:
        _set_current_verbosity(parse_verbosity(verbosity))

    log_path = _resolve_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    formatter = _RedactingFormatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(_VERBOSITY_LEVELS[_CURRENT_VERBOSITY])
    file_handler.setFormatter(formatter)
    setattr(file_handler, _HANDLER_TAG, True)
    root.addHandler(file_handler)
    _FILE_HANDLER = file_handler

    if _should_log_to_stderr(root.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(max(logging.INFO, _VERBOSITY_LEVELS[_CURRENT_VERBOSITY]))
        stream_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        setattr(stream_handler, _HANDLER_TAG, True)
        root.addHandler(stream_handler)
        _STREAM_HANDLER = stream_handler

    _CONFIGURED = True
    _LOG_PATH = log_path

    logging.getLogger(__name__).debug(
        "Writing installer logs to %s (verbosity=%s)",
        log_path,
        _CURRENT_VERBOSITY.value,
    )
    return log_path


def set_log_verbosity(verbosity: LogVerbosity | str) -> None:
    """Adjust the minimum severity recorded by the managed handlers."""

    level = parse_verbosity(verbosity)
    ensure_logging()
    _set_current_verbosity(level)
    if _FILE_HANDLER is not None:
        _FILE_HANDLER.setLevel(_VERBOSITY_LEVELS[level])
    if _STREAM_HANDLER is not None:
        _STREAM_HANDLER.setLevel(max(logging.INFO, _VERBOSITY_LEVELS[level]))


def _set_current_verbosity(level: LogVerbosity) -> None:
    global _CURRENT_VERBOSITY
    _CURRENT_VERBOSITY = level


def _resolve_log_path() -> Path:
    env_file = os.environ.get(_LOG_FILE_ENV)
    if env_file:
        return Path(env_file).expanduser()

    env_dir = os.environ.get(_LOG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser() / _DEFAULT_LOGNAME

    return Path.home() / _DEFAULT_DIRNAME / "logs" / _DEFAULT_LOGNAME


def _should_log_to_stderr(handlers: Iterable[logging.Handler]) -> bool:
    stderr = getattr(sys, "stderr", None)
    if stderr is None:
        return False
    is_tty = getattr(stderr, "isatty", None)
    if not callable(is_tty):
        return False
    try:
        if not is_tty():
            return False
    except (OSError, ValueError):
        return False

    for handler in handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is stderr:
            return False
    return True


def _reset_for_tests() -> None:
    """Remove handlers installed by :func:`ensure_logging`."""

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER, _STREAM_HANDLER, _CURRENT_VERBOSITY

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    _CONFIGURED = False
    _LOG_PATH = None
    _FILE_HANDLER = None
    _STREAM_HANDLER = None
    _CURRENT_VERBOSITY = _DEFAULT_VERBOSITY
