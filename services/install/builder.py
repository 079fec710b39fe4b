"""Helpers for constructing the install service from configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from app.config import ReleaseDescriptor, get_release_descriptor, load_release_descriptor
from services.install.constants import BIN_DIR_ENV, DEFAULT_BIN_DIR, LOCAL_RELEASE_ENV
from services.install.installers import BinaryInstaller, Installer
from services.install.models import DownloadError
from services.install.platforms import resolve_host
from services.install.service import InstallService


_LOGGER = logging.getLogger(__name__)


def resolve_bin_dir(bin_dir: str | Path | None = None) -> Path:
    if bin_dir:
        return Path(bin_dir).expanduser()
    configured = os.environ.get(BIN_DIR_ENV)
    if configured:
        _LOGGER.debug("Using binary directory from %s: %s", BIN_DIR_ENV, configured)
        return Path(configured).expanduser()
    return Path(DEFAULT_BIN_DIR).expanduser()


def resolve_local_dir(local_dir: str | Path | None = None) -> Path | None:
    """Return the folder holding release archives, or ``None`` to download.

    An explicit ``local_dir`` must exist. A stale ``WORK_INSTALL_LOCAL_DIR``
    is only logged so the network source is used instead.
    """

    if local_dir:
        folder = Path(local_dir).expanduser()
        if not folder.is_dir():
            raise DownloadError(f"Local release directory does not exist: {folder}")
        _LOGGER.info("Using local release source at %s", folder)
        return folder

    configured = os.environ.get(LOCAL_RELEASE_ENV)
    if not configured:
        return None
    folder = Path(configured).expanduser()
    if folder.is_dir():
        _LOGGER.info("Using local release source from %s: %s", LOCAL_RELEASE_ENV, folder)
        return folder
    _LOGGER.warning("Configured local release directory does not exist: %s", folder)
    return None


def build_install_service(
    *,
    config_path: str | Path | None = None,
    descriptor: ReleaseDescriptor | None = None,
    installer: Installer | None = None,
    bin_dir: str | Path | None = None,
    system: str | None = None,
    arch: str | None = None,
    local_dir: str | Path | None = None,
) -> InstallService:
    """Construct an :class:`InstallService` for the current environment."""

    if descriptor is None:
        descriptor = (
            load_release_descriptor(config_path)
            if config_path is not None
            else get_release_descriptor()
        )
    if installer is None:
        installer = BinaryInstaller(resolve_bin_dir(bin_dir), binary_name=descriptor.binary_name)
    host = resolve_host(system, arch)
    return InstallService(
        descriptor,
        installer,
        host=host,
        local_dir=resolve_local_dir(local_dir),
    )


__all__ = ["build_install_service", "resolve_bin_dir", "resolve_local_dir"]
