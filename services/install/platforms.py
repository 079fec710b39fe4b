"""Host detection and release artifact selection."""

from __future__ import annotations

import logging
import platform
from typing import TYPE_CHECKING

from services.install.constants import (
    ARCH_AMD64,
    ARCH_ARM64,
    SUPPORTED_PLATFORMS,
)
from services.install.models import (
    HostPlatform,
    ReleaseArtifact,
    UnsupportedPlatformError,
)

if TYPE_CHECKING:
    from app.config import ReleaseDescriptor


_LOGGER = logging.getLogger(__name__)

__all__ = [
    "detect_host",
    "normalise_arch",
    "normalise_system",
    "resolve_host",
    "select_artifact",
]

_ARCH_ALIASES = {
    "arm64": ARCH_ARM64,
    "aarch64": ARCH_ARM64,
    "arm64e": ARCH_ARM64,
    "armv8": ARCH_ARM64,
    "armv8l": ARCH_ARM64,
    "x86_64": ARCH_AMD64,
    "amd64": ARCH_AMD64,
    "x64": ARCH_AMD64,
    "i386": "386",
    "i686": "386",
}

_SYSTEM_ALIASES = {
    "darwin": "darwin",
    "macos": "darwin",
    "macosx": "darwin",
    "osx": "darwin",
    "linux": "linux",
    "windows": "windows",
    "win32": "windows",
}


def normalise_arch(machine: str) -> str:
    lowered = machine.strip().lower()
    return _ARCH_ALIASES.get(lowered, lowered)


def normalise_system(system: str) -> str:
    lowered = system.strip().lower()
    return _SYSTEM_ALIASES.get(lowered, lowered)


def detect_host() -> HostPlatform:
    """Return the platform of the running interpreter."""

    host = HostPlatform(
        system=normalise_system(platform.system()),
        arch=normalise_arch(platform.machine()),
    )
    _LOGGER.debug("Detected host platform %s/%s", host.system, host.arch)
    return host


def resolve_host(system: str | None = None, arch: str | None = None) -> HostPlatform:
    """Return the detected host with any explicit overrides applied."""

    detected = detect_host()
    resolved = HostPlatform(
        system=normalise_system(system) if system else detected.system,
        arch=normalise_arch(arch) if arch else detected.arch,
    )
    if resolved != detected:
        _LOGGER.info(
            "Using platform override %s/%s (detected %s/%s)",
            resolved.system,
            resolved.arch,
            detected.system,
            detected.arch,
        )
    return resolved


def select_artifact(descriptor: "ReleaseDescriptor", host: HostPlatform) -> ReleaseArtifact:
    """Pick the release archive for ``host``.

    ARM64 hosts receive the ``arm64`` archive; every other architecture falls
    back to ``amd64``. Only the platforms in ``SUPPORTED_PLATFORMS`` have
    published archives. The checksum is returned as configured; it is
    validated when the archive is installed.
    """

    if host.system not in SUPPORTED_PLATFORMS:
        raise UnsupportedPlatformError(
            f"No prebuilt {descriptor.name} release for platform '{host.system}' "
            f"(supported: {', '.join(SUPPORTED_PLATFORMS)})"
        )

    arch = ARCH_ARM64 if host.is_arm else ARCH_AMD64
    if arch != host.arch:
        _LOGGER.debug("Architecture %s uses the %s archive", host.arch, arch)

    checksum = descriptor.checksums.get(arch, "").strip().lower()

    fields = {
        "repository": descriptor.repository,
        "name": descriptor.name,
        "version": descriptor.version,
        "platform": host.system,
        "arch": arch,
    }
    artifact = ReleaseArtifact(
        version=descriptor.version,
        platform=host.system,
        arch=arch,
        url=descriptor.url_template.format(**fields),
        sha256=checksum,
        member_name=descriptor.member_template.format(**fields),
        binary_name=descriptor.binary_name,
    )
    _LOGGER.info(
        "Selected %s %s archive for %s/%s: %s",
        descriptor.name,
        artifact.version,
        artifact.platform,
        artifact.arch,
        artifact.url,
    )
    return artifact
