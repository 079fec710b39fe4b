"""Hashing helpers for release archive verification."""

from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path

from services.install.models import ChecksumMismatch, InstallError


_LOGGER = logging.getLogger(__name__)

_SHA256_PATTERN = re.compile(r"[0-9a-f]{64}")


def calculate_sha256(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as source:
        for chunk in iter(lambda: source.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def parse_hash_text(text: str) -> str:
    """Return the digest from ``sha256sum``-style text (``<digest>  <file>``)."""

    for token in text.split():
        if token:
            return normalise_digest(token)
    raise InstallError("Hash file did not contain a digest")


def normalise_digest(value: str) -> str:
    cleaned = value.strip().lower()
    if cleaned.startswith("sha256:"):
        cleaned = cleaned[len("sha256:"):]
    return cleaned


def is_sha256_digest(value: str) -> bool:
    return _SHA256_PATTERN.fullmatch(normalise_digest(value)) is not None


def verify_sha256(path: Path, expected: str) -> str:
    """Return the digest of ``path`` or raise :class:`ChecksumMismatch`.

    ``expected`` must itself be a SHA-256 hex digest; placeholders are
    rejected before the file is hashed.
    """

    wanted = normalise_digest(expected)
    if not is_sha256_digest(wanted):
        raise InstallError(f"Expected checksum {expected!r} is not a SHA-256 digest")
    actual = calculate_sha256(path)
    if actual != wanted:
        _LOGGER.error("Checksum mismatch for %s", path.name)
        raise ChecksumMismatch(wanted, actual)
    _LOGGER.debug("Checksum verified for %s (%s)", path.name, actual)
    return actual
