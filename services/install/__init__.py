"""Public API for the install service package."""

from __future__ import annotations

from services.install.builder import build_install_service, resolve_bin_dir, resolve_local_dir
from services.install.caveats import render_caveats
from services.install.constants import (
    ARCH_AMD64,
    ARCH_ARM64,
    BIN_DIR_ENV,
    BINARY_NAME,
    GITHUB_REPO,
    HOMEPAGE_URL,
    LOCAL_RELEASE_ENV,
    MAX_ARCHIVE_ENTRIES,
    MAX_ARCHIVE_FILE_SIZE,
    MAX_ARCHIVE_TOTAL_BYTES,
    SMOKE_TEST_ARGS,
)
from services.install.installers import BinaryInstaller, Installer
from services.install.models import (
    ArchiveError,
    ChecksumMismatch,
    DownloadError,
    HostPlatform,
    InstallError,
    InstallResult,
    ReleaseArtifact,
    SmokeTestError,
    SmokeTestResult,
    UnsupportedPlatformError,
)
from services.install.platforms import detect_host, resolve_host, select_artifact
from services.install.service import InstallService
from services.install.smoke import run_smoke_test

__all__ = [
    "ARCH_AMD64",
    "ARCH_ARM64",
    "BIN_DIR_ENV",
    "BINARY_NAME",
    "GITHUB_REPO",
    "HOMEPAGE_URL",
    "LOCAL_RELEASE_ENV",
    "MAX_ARCHIVE_ENTRIES",
    "MAX_ARCHIVE_FILE_SIZE",
    "MAX_ARCHIVE_TOTAL_BYTES",
    "SMOKE_TEST_ARGS",
    "ArchiveError",
    "BinaryInstaller",
    "ChecksumMismatch",
    "DownloadError",
    "HostPlatform",
    "InstallError",
    "InstallResult",
    "InstallService",
    "Installer",
    "ReleaseArtifact",
    "SmokeTestError",
    "SmokeTestResult",
    "UnsupportedPlatformError",
    "build_install_service",
    "detect_host",
    "render_caveats",
    "resolve_bin_dir",
    "resolve_host",
    "resolve_local_dir",
    "run_smoke_test",
    "select_artifact",
]
