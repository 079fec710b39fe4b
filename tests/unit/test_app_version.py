from __future__ import annotations

from importlib import metadata, resources

import pytest

from app import version as version_module
from app.version import get_installer_version


@pytest.fixture(autouse=True)
def _reset_cache(monkeypatch):
    monkeypatch.delenv("WORK_INSTALLER_VERSION", raising=False)
    get_installer_version.cache_clear()  # type: ignore[attr-defined]
    yield
    get_installer_version.cache_clear()  # type: ignore[attr-defined]


def _not_installed(name: str) -> str:
    raise metadata.PackageNotFoundError(name)


def test_get_installer_version_prefers_environment(monkeypatch) -> None:
    monkeypatch.setenv("WORK_INSTALLER_VERSION", "v1.2.3")

    assert get_installer_version() == "1.2.3"


def test_get_installer_version_reads_distribution_metadata(monkeypatch) -> None:
    requested: list[str] = []

    def fake_version(name: str) -> str:
        requested.append(name)
        return "4.5.6"

    monkeypatch.setattr(version_module.metadata, "version", fake_version)

    assert get_installer_version() == "4.5.6"
    assert requested == ["work-installer"]


def test_get_installer_version_falls_back_to_version_file(monkeypatch) -> None:
    monkeypatch.setattr(version_module.metadata, "version", _not_installed)

    expected = resources.files("app").joinpath("VERSION").read_text(encoding="utf-8").strip()
    assert expected
    assert get_installer_version() == expected


def test_unreadable_version_resource_uses_placeholder(monkeypatch) -> None:
    def namespace_files(package: str):
        raise NotADirectoryError(package)

    monkeypatch.setattr(version_module.metadata, "version", _not_installed)
    monkeypatch.setattr(version_module.resources, "files", namespace_files)

    assert get_installer_version() == "0.0.0-dev"
