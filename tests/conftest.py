from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()


@pytest.fixture(autouse=True)
def _isolated_install_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep installs and log files away from the real home directory."""

    from app.config import reset_release_descriptor_cache

    sandbox = tmp_path_factory.mktemp("install-env")
    monkeypatch.setenv("WORK_INSTALL_BIN_DIR", str(sandbox / "bin"))
    monkeypatch.setenv("WORK_INSTALLER_LOG_DIR", str(sandbox / "logs"))
    monkeypatch.delenv("WORK_INSTALL_LOCAL_DIR", raising=False)
    monkeypatch.delenv("WORK_INSTALLER_LOG_FILE", raising=False)
    reset_release_descriptor_cache()

    yield

    reset_release_descriptor_cache()
