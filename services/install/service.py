"""Service responsible for installing and verifying the ``work`` binary."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from services.install.archive import extract_archive, locate_binary
from services.install.download import obtain_archive
from services.install.hashing import is_sha256_digest, verify_sha256
from services.install.installers import Installer
from services.install.models import (
    HostPlatform,
    InstallError,
    InstallResult,
    ReleaseArtifact,
    SmokeTestError,
    SmokeTestResult,
)
from services.install.platforms import detect_host, select_artifact
from services.install.smoke import parse_version_output, run_smoke_test
from services.install.versioning import (
    STATUS_BROKEN,
    STATUS_NOT_INSTALLED,
    STATUS_UNKNOWN,
    classify_installed_version,
)

if TYPE_CHECKING:
    from app.config import ReleaseDescriptor


_LOGGER = logging.getLogger(__name__)


class InstallService:
    """Coordinate artifact selection, download, verification and placement."""

    def __init__(
        self,
        descriptor: "ReleaseDescriptor",
        installer: Installer,
        *,
        host: HostPlatform | None = None,
        local_dir: Path | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._installer = installer
        self._host = host
        self._local_dir = local_dir

    @property
    def descriptor(self) -> "ReleaseDescriptor":
        return self._descriptor

    @property
    def target_path(self) -> Path:
        return self._installer.target_path

    @property
    def host(self) -> HostPlatform:
        if self._host is None:
            self._host = detect_host()
        return self._host

    def select_artifact(self) -> ReleaseArtifact:
        return select_artifact(self._descriptor, self.host)

    def install(self) -> InstallResult:
        """Download, verify and place the binary for the host architecture.

        Nothing is written to the target path unless the archive checksum
        matches and the binary was extracted successfully.
        """

        artifact = self.select_artifact()
        if not is_sha256_digest(artifact.sha256):
            raise InstallError(
                f"Release {artifact.version} has no valid SHA-256 for {artifact.platform}/{artifact.arch}; "
                "refusing to install an unverified archive"
            )
        _LOGGER.info(
            "Preparing installation of %s %s", self._descriptor.name, artifact.version
        )
        with tempfile.TemporaryDirectory(prefix="work-install-") as scratch:
            scratch_dir = Path(scratch)
            download_dir = scratch_dir / "download"
            download_dir.mkdir()
            archive_path = obtain_archive(
                artifact, download_dir, local_dir=self._local_dir
            )
            digest = verify_sha256(archive_path, artifact.sha256)
            _LOGGER.info("Verified archive for version %s", artifact.version)

            unpacked = extract_archive(archive_path, scratch_dir / "unpacked")
            binary = locate_binary(unpacked, artifact.member_name, artifact.binary_name)
            replaced = self._installer.install(binary)

        result = InstallResult(
            artifact=artifact,
            target_path=self._installer.target_path,
            digest=digest,
            replaced_existing=replaced,
        )
        _LOGGER.info(
            "Installed %s %s to %s", self._descriptor.name, artifact.version, result.target_path
        )
        return result

    def smoke_test(self) -> SmokeTestResult:
        return run_smoke_test(self._installer.target_path)

    def uninstall(self) -> bool:
        return self._installer.uninstall()

    def installed_version(self) -> str | None:
        """Return the version reported by the installed binary.

        ``None`` means nothing is installed or the output was not recognised.
        :class:`SmokeTestError` propagates when the binary exists but fails.
        """

        target = self._installer.target_path
        if not target.exists():
            return None
        result = run_smoke_test(target)
        version = parse_version_output(result.stdout)
        if version is None:
            _LOGGER.debug("Unrecognised version output: %r", result.stdout)
        return version

    def status(self) -> tuple[str | None, str]:
        """Return the installed version and its status against the release."""

        target = self._installer.target_path
        if not target.exists():
            return None, STATUS_NOT_INSTALLED
        try:
            installed = self.installed_version()
        except SmokeTestError as exc:
            _LOGGER.warning("Installed binary at %s is not working: %s", target, exc)
            return None, STATUS_BROKEN
        if installed is None:
            return None, STATUS_UNKNOWN
        return installed, classify_installed_version(installed, self._descriptor.version)


__all__ = ["InstallService"]
