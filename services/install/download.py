"""Utilities for acquiring release archives."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from urllib.error import URLError
from urllib.request import Request, urlopen

from services.install.constants import DOWNLOAD_TIMEOUT, HASH_FILE_SUFFIX
from services.install.hashing import normalise_digest, parse_hash_text
from services.install.models import ChecksumMismatch, DownloadError, ReleaseArtifact


_LOGGER = logging.getLogger(__name__)

__all__ = ["obtain_archive"]

_USER_AGENT = "work-installer"


def obtain_archive(
    artifact: ReleaseArtifact,
    destination_dir: Path,
    *,
    local_dir: Path | None = None,
    timeout: float = DOWNLOAD_TIMEOUT,
) -> Path:
    """Return a path inside ``destination_dir`` holding the archive for ``artifact``."""

    target_path = destination_dir / artifact.asset_name

    if local_dir is not None:
        source_path = Path(local_dir) / artifact.asset_name
        _LOGGER.info(
            "Copying %s archive for version %s from local source %s",
            artifact.arch,
            artifact.version,
            source_path,
        )
        _check_companion_hash(source_path, artifact)
        try:
            shutil.copy2(source_path, target_path)
        except OSError as exc:
            raise DownloadError(f"Failed to copy release archive: {exc}") from exc
        return target_path

    _LOGGER.info(
        "Downloading %s archive for version %s from %s",
        artifact.arch,
        artifact.version,
        artifact.url,
    )
    request = Request(artifact.url, headers={"User-Agent": _USER_AGENT})
    try:
        with urlopen(request, timeout=timeout) as response, target_path.open("wb") as output:  # nosec - HTTPS
            shutil.copyfileobj(response, output)
    except (OSError, URLError) as exc:
        target_path.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download release archive: {exc}") from exc
    _LOGGER.debug(
        "Downloaded %s (%s bytes) to %s",
        artifact.asset_name,
        target_path.stat().st_size,
        target_path,
    )
    return target_path


def _check_companion_hash(source_path: Path, artifact: ReleaseArtifact) -> None:
    """Compare a ``<archive>.sha256`` file next to a local archive with the release digest."""

    hash_path = source_path.with_name(source_path.name + HASH_FILE_SUFFIX)
    if not hash_path.is_file():
        return
    try:
        published = parse_hash_text(hash_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DownloadError(f"Failed to read {hash_path.name}: {exc}") from exc
    expected = normalise_digest(artifact.sha256)
    if published != expected:
        _LOGGER.error("%s disagrees with the release checksum", hash_path.name)
        raise ChecksumMismatch(expected, published)
    _LOGGER.debug("%s matches the release checksum", hash_path.name)
