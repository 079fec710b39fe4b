from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest

from services.install import ArchiveError
from services.install.archive import extract_archive, locate_binary
from tests.unit.install_service_test_utils import build_release_archive


def test_extract_and_locate_architecture_member(tmp_path: Path) -> None:
    archive = build_release_archive(tmp_path / "dist", arch="amd64")

    root = extract_archive(archive, tmp_path / "out")
    binary = locate_binary(root, "work-darwin-amd64", "work")

    assert binary == root / "work-darwin-amd64"
    assert binary.read_bytes().startswith(b"#!/bin/sh")


def test_locate_falls_back_to_plain_binary_name(tmp_path: Path) -> None:
    archive = build_release_archive(
        tmp_path / "dist", files={"README.md": b"docs", "bin/work": b"binary"}
    )

    root = extract_archive(archive, tmp_path / "out")

    assert locate_binary(root, "work-darwin-arm64", "work") == root / "bin" / "work"


def test_locate_prefers_shallowest_prefixed_file(tmp_path: Path) -> None:
    archive = build_release_archive(
        tmp_path / "dist",
        files={"nested/dir/work-extra": b"deep", "work-v0.1.0": b"top"},
    )

    root = extract_archive(archive, tmp_path / "out")

    assert locate_binary(root, "work-darwin-arm64", "work").read_bytes() == b"top"


def test_locate_raises_when_binary_missing(tmp_path: Path) -> None:
    archive = build_release_archive(tmp_path / "dist", files={"README.md": b"docs"})
    root = extract_archive(archive, tmp_path / "out")

    with pytest.raises(ArchiveError, match="did not contain"):
        locate_binary(root, "work-darwin-arm64", "work")


def test_path_traversal_member_is_rejected(tmp_path: Path) -> None:
    archive = build_release_archive(tmp_path / "dist", files={"../escape": b"evil"})

    with pytest.raises(ArchiveError, match="unsafe relative path"):
        extract_archive(archive, tmp_path / "out")
    assert not (tmp_path / "escape").exists()


def test_absolute_member_is_rejected(tmp_path: Path) -> None:
    archive = build_release_archive(tmp_path / "dist", files={"/tmp/work-darwin-arm64": b"evil"})

    with pytest.raises(ArchiveError, match="absolute path"):
        extract_archive(archive, tmp_path / "out")
    assert not (tmp_path / "out" / "work-darwin-arm64").exists()


def test_symlink_member_is_rejected(tmp_path: Path) -> None:
    archive_path = tmp_path / "links.tar.gz"
    with tarfile.open(archive_path, "w:gz") as archive:
        info = tarfile.TarInfo("work-darwin-arm64")
        info.type = tarfile.SYMTYPE
        info.linkname = "/bin/sh"
        archive.addfile(info)

    with pytest.raises(ArchiveError, match="link or special file"):
        extract_archive(archive_path, tmp_path / "out")


def test_too_many_entries_are_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("services.install.constants.MAX_ARCHIVE_ENTRIES", 2)
    archive = build_release_archive(
        tmp_path / "dist", files={f"file{index}": b"x" for index in range(3)}
    )

    with pytest.raises(ArchiveError, match="too many entries"):
        extract_archive(archive, tmp_path / "out")


def test_oversized_member_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("services.install.constants.MAX_ARCHIVE_FILE_SIZE", 4)
    archive = build_release_archive(tmp_path / "dist", files={"work": b"too large"})

    with pytest.raises(ArchiveError, match="oversized"):
        extract_archive(archive, tmp_path / "out")


def test_corrupt_archive_raises_archive_error(tmp_path: Path) -> None:
    archive = tmp_path / "broken.tar.gz"
    archive.write_bytes(b"not a tarball")

    with pytest.raises(ArchiveError, match="Failed to extract"):
        extract_archive(archive, tmp_path / "out")


def test_uncompressed_tar_is_supported(tmp_path: Path) -> None:
    archive_path = tmp_path / "plain.tar"
    with tarfile.open(archive_path, "w") as archive:
        info = tarfile.TarInfo("work-darwin-arm64")
        info.size = 3
        archive.addfile(info, io.BytesIO(b"bin"))

    root = extract_archive(archive_path, tmp_path / "out")

    assert (root / "work-darwin-arm64").read_bytes() == b"bin"
