"""Report the version of the installer itself.

``app/VERSION`` is the single source: ``pyproject.toml`` reads it as the
distribution's dynamic version, so an installed copy and a source checkout
agree.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata, resources

DISTRIBUTION_NAME = "work-installer"
VERSION_ENV = "WORK_INSTALLER_VERSION"
_FALLBACK_VERSION = "0.0.0-dev"


def _strip_v(raw_version: str) -> str:
    version = raw_version.strip()
    return version[1:] if version[:1] in {"v", "V"} else version


def _version_from_env() -> str | None:
    override = os.environ.get(VERSION_ENV, "").strip()
    return _strip_v(override) if override else None


def _version_from_distribution() -> str | None:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return None


def _version_from_file() -> str | None:
    try:
        text = resources.files("app").joinpath("VERSION").read_text(encoding="utf-8")
    except (OSError, ModuleNotFoundError):
        # Editable installs expose ``app`` as a namespace package.
        return None
    return text.strip() or None


@lru_cache(maxsize=1)
def get_installer_version() -> str:
    """Return the installer version.

    ``WORK_INSTALLER_VERSION`` wins, then the installed distribution metadata,
    then ``app/VERSION`` in a source checkout.
    """

    for resolver in (_version_from_env, _version_from_distribution, _version_from_file):
        version = resolver()
        if version:
            return version
    return _FALLBACK_VERSION


__all__ = ["DISTRIBUTION_NAME", "VERSION_ENV", "get_installer_version"]
