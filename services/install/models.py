"""Data models used by the install service."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from services.install.constants import ARCH_ARM64, BINARY_NAME


@dataclass(frozen=True)
class HostPlatform:
    """Normalised operating system and CPU architecture of a host."""

    system: str
    arch: str

    @property
    def is_arm(self) -> bool:
        return self.arch == ARCH_ARM64


@dataclass(frozen=True)
class ReleaseArtifact:
    """A downloadable release archive for one platform and architecture."""

    version: str
    platform: str
    arch: str
    url: str
    sha256: str
    member_name: str
    binary_name: str = BINARY_NAME

    @property
    def asset_name(self) -> str:
        return self.url.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class InstallResult:
    """Outcome of a successful installation."""

    artifact: ReleaseArtifact
    target_path: Path
    digest: str
    replaced_existing: bool = False


@dataclass(frozen=True)
class SmokeTestResult:
    """Captured output of the post-install ``work version`` invocation."""

    command: Tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def passed(self) -> bool:
        return self.returncode == 0


class InstallError(RuntimeError):
    """Raised when the binary cannot be downloaded, verified or installed."""


class DownloadError(InstallError):
    """Raised when the release archive cannot be fetched."""


class ChecksumMismatch(InstallError):
    """Raised when the archive digest differs from the expected value."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            f"Archive hash mismatch: expected {expected} but received {actual}"
        )
        self.expected = expected
        self.actual = actual


class ArchiveError(InstallError):
    """Raised when the release archive is unreadable or unsafe."""


class UnsupportedPlatformError(InstallError):
    """Raised when no release artifact exists for the host platform."""


class SmokeTestError(InstallError):
    """Raised when the installed binary fails its post-install check."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
