"""Tests for the create_release_archive helper script."""

from __future__ import annotations

import tarfile
from pathlib import Path

from scripts import create_release_archive
from services.install import BinaryInstaller, HostPlatform, InstallService
from tests.unit.install_service_test_utils import make_descriptor


def test_archive_names_follow_release_layout() -> None:
    assert create_release_archive.archive_names("work", "v0.1.0", "darwin", "arm64") == (
        "work-v0.1.0-darwin-arm64.tar.gz",
        "work-darwin-arm64",
    )


def test_archive_names_strip_a_single_version_prefix() -> None:
    assert create_release_archive.archive_names("work", " V1.2.0 ", "darwin", "amd64")[0] == (
        "work-v1.2.0-darwin-amd64.tar.gz"
    )


def test_main_writes_archive_and_checksum(tmp_path: Path, capsys) -> None:
    binary = tmp_path / "work"
    binary.write_bytes(b"compiled")

    exit_code = create_release_archive.main(
        [str(binary), "--arch", "amd64", "--version", "0.2.0", "--output-dir", str(tmp_path / "dist")]
    )

    archive_path = tmp_path / "dist" / "work-v0.2.0-darwin-amd64.tar.gz"
    assert exit_code == 0
    with tarfile.open(archive_path) as archive:
        member = archive.getmember("work-darwin-amd64")
        assert member.mode == 0o755
    hash_text = (tmp_path / "dist" / "work-v0.2.0-darwin-amd64.tar.gz.sha256").read_text(encoding="utf-8")
    digest = hash_text.split()[0]
    assert capsys.readouterr().out.startswith(digest)


def test_created_archive_is_installable(tmp_path: Path) -> None:
    binary = tmp_path / "work"
    binary.write_bytes(b"compiled")
    archive_path, digest = create_release_archive.create_archive(
        binary, tmp_path / "dist", name="work", version="0.1.0", platform="darwin", arch="arm64"
    )

    service = InstallService(
        make_descriptor(arm64=digest),
        BinaryInstaller(tmp_path / "bin"),
        host=HostPlatform("darwin", "arm64"),
        local_dir=archive_path.parent,
    )
    service.install()

    assert (tmp_path / "bin" / "work").read_bytes() == b"compiled"
