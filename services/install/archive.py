"""Archive handling helpers for the install service."""

from __future__ import annotations

import logging
import shutil
import tarfile
from pathlib import Path, PurePosixPath

from services.install import constants
from services.install.models import ArchiveError


_LOGGER = logging.getLogger(__name__)

__all__ = ["extract_archive", "extract_tar_safely", "locate_binary"]


def extract_archive(archive_path: Path, target_dir: Path) -> Path:
    """Unpack ``archive_path`` into ``target_dir`` and return ``target_dir``."""

    _LOGGER.info("Extracting release archive %s", archive_path.name)
    target_dir.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive_path, "r:*") as archive:
            extract_tar_safely(archive, target_dir)
    except (OSError, tarfile.TarError) as exc:
        raise ArchiveError(f"Failed to extract release archive: {exc}") from exc
    _LOGGER.debug("Archive extracted to %s", target_dir)
    return target_dir


def extract_tar_safely(archive: tarfile.TarFile, target_dir: Path) -> None:
    root = target_dir.resolve()
    total_bytes = 0
    processed_entries = 0
    for member in archive:
        name = member.name
        if not name or name in {".", "./"}:
            continue
        processed_entries += 1
        if processed_entries > constants.MAX_ARCHIVE_ENTRIES:
            _LOGGER.error(
                "Archive entry count %s exceeded limit %s",
                processed_entries,
                constants.MAX_ARCHIVE_ENTRIES,
            )
            raise ArchiveError("Release archive contained too many entries")
        path = PurePosixPath(name)
        if path.is_absolute():
            raise ArchiveError("Release archive contained an absolute path entry")
        destination = (root / Path(*path.parts)).resolve()
        try:
            destination.relative_to(root)
        except ValueError:
            raise ArchiveError("Release archive contained an unsafe relative path")
        if member.isdir():
            destination.mkdir(parents=True, exist_ok=True)
            continue
        if not member.isfile():
            _LOGGER.error("Archive member %s is not a regular file (type %r)", name, member.type)
            raise ArchiveError("Release archive contained a link or special file")
        if member.size > constants.MAX_ARCHIVE_FILE_SIZE:
            _LOGGER.error(
                "Archive member %s exceeded file size limit (%s > %s)",
                name,
                member.size,
                constants.MAX_ARCHIVE_FILE_SIZE,
            )
            raise ArchiveError("Release archive contained an oversized file")
        total_bytes += member.size
        if total_bytes > constants.MAX_ARCHIVE_TOTAL_BYTES:
            _LOGGER.error(
                "Archive expanded to %s bytes which exceeds limit %s",
                total_bytes,
                constants.MAX_ARCHIVE_TOTAL_BYTES,
            )
            raise ArchiveError("Release archive expanded beyond safe limits")
        source = archive.extractfile(member)
        if source is None:
            raise ArchiveError(f"Release archive member {name} could not be read")
        destination.parent.mkdir(parents=True, exist_ok=True)
        with source, destination.open("wb") as target:
            shutil.copyfileobj(source, target)
        _LOGGER.debug("Extracted archive member %s to %s", name, destination)

    _LOGGER.info(
        "Extracted %s entries totalling %s bytes", processed_entries, total_bytes
    )


def locate_binary(root: Path, member_name: str, binary_name: str) -> Path:
    """Return the extracted file that should be installed as ``binary_name``."""

    for candidate_name in (member_name, binary_name):
        matches = sorted(
            (path for path in root.rglob(candidate_name) if path.is_file()),
            key=lambda path: _depth(root, path),
        )
        if matches:
            _LOGGER.debug("Located archive binary %s", matches[0])
            return matches[0]

    prefixed = [
        path
        for path in root.rglob(f"{binary_name}*")
        if path.is_file() and not path.name.endswith(constants.HASH_FILE_SUFFIX)
    ]
    if not prefixed:
        raise ArchiveError(
            f"Release archive did not contain {member_name} or {binary_name}"
        )
    prefixed.sort(key=lambda path: (_depth(root, path), path.name.lower()))
    chosen = prefixed[0]
    _LOGGER.info("Auto-detected binary %s in archive", chosen.name)
    return chosen


def _depth(root: Path, path: Path) -> int:
    try:
        return len(path.relative_to(root).parts)
    except ValueError:
        return len(path.parts)
