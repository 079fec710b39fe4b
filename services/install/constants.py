"""Constants shared across the install service modules."""

from __future__ import annotations

GITHUB_REPO = "jfmyers9/work"
HOMEPAGE_URL = f"https://github.com/{GITHUB_REPO}"
BINARY_NAME = "work"

SUPPORTED_PLATFORMS = ("darwin",)
ARCH_ARM64 = "arm64"
ARCH_AMD64 = "amd64"
SUPPORTED_ARCHITECTURES = (ARCH_ARM64, ARCH_AMD64)

HASH_FILE_SUFFIX = ".sha256"

SMOKE_TEST_ARGS = ("version",)
SMOKE_TEST_TIMEOUT = 30.0
DOWNLOAD_TIMEOUT = 60.0

MAX_ARCHIVE_TOTAL_BYTES = 256 * 1024 * 1024  # 256 MiB
MAX_ARCHIVE_FILE_SIZE = 128 * 1024 * 1024  # 128 MiB per file
MAX_ARCHIVE_ENTRIES = 64

BIN_DIR_ENV = "WORK_INSTALL_BIN_DIR"
LOCAL_RELEASE_ENV = "WORK_INSTALL_LOCAL_DIR"
DEFAULT_BIN_DIR = "~/.local/bin"
