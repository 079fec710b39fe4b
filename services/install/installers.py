"""Installer implementations that place the extracted binary on disk."""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Protocol

from services.install.constants import BINARY_NAME
from services.install.models import InstallError

_LOGGER = logging.getLogger(__name__)

_EXECUTABLE_MODE = (
    stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
)


class Installer(Protocol):
    """Protocol describing how an extracted binary reaches its destination."""

    @property
    def target_path(self) -> Path:
        """Location the binary is installed to."""

    def install(self, source: Path) -> bool:
        """Install ``source`` and return ``True`` when a prior file was replaced."""

    def uninstall(self) -> bool:
        """Remove the installed binary and return ``True`` when one existed."""


class BinaryInstaller:
    """Copy a binary into ``bin_dir`` with a temp-file-then-rename swap.

    The target path only ever holds either the previous file or the complete
    new one.
    """

    def __init__(self, bin_dir: Path, *, binary_name: str = BINARY_NAME) -> None:
        self._bin_dir = Path(bin_dir).expanduser()
        self._binary_name = binary_name

    @property
    def bin_dir(self) -> Path:
        return self._bin_dir

    @property
    def target_path(self) -> Path:
        return self._bin_dir / self._binary_name

    def install(self, source: Path) -> bool:
        target = self.target_path
        try:
            self._bin_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise InstallError(f"Cannot create binary directory {self._bin_dir}: {exc}") from exc

        replaced = target.exists()
        if target.is_dir():
            raise InstallError(f"Install target {target} is a directory")

        try:
            handle, staging_name = tempfile.mkstemp(
                prefix=f".{self._binary_name}.", suffix=".tmp", dir=self._bin_dir
            )
        except OSError as exc:
            raise InstallError(f"Cannot write to {self._bin_dir}: {exc}") from exc
        staging_path = Path(staging_name)
        try:
            with os.fdopen(handle, "wb") as output, source.open("rb") as payload:
                shutil.copyfileobj(payload, output)
            staging_path.chmod(_EXECUTABLE_MODE)
            os.replace(staging_path, target)
        except OSError as exc:
            staging_path.unlink(missing_ok=True)
            raise InstallError(f"Failed to install {self._binary_name} to {target}: {exc}") from exc

        _LOGGER.info(
            "%s %s",
            "Replaced" if replaced else "Installed",
            target,
        )
        return replaced

    def uninstall(self) -> bool:
        target = self.target_path
        if not target.exists() and not target.is_symlink():
            _LOGGER.info("Nothing to remove at %s", target)
            return False
        try:
            target.unlink()
        except OSError as exc:
            raise InstallError(f"Failed to remove {target}: {exc}") from exc
        _LOGGER.info("Removed %s", target)
        return True


__all__ = ["BinaryInstaller", "Installer"]
