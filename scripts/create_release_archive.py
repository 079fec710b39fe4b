"""Package a built ``work`` binary into the archive layout the installer expects."""

from __future__ import annotations

import argparse
import hashlib
import sys
import tarfile
from pathlib import Path


def ensure_project_root_on_sys_path() -> Path:
    """Ensure the project root is importable when the script runs standalone."""

    project_root = Path(__file__).resolve().parent.parent
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)
    return project_root


ensure_project_root_on_sys_path()

from app.config import get_release_descriptor
from services.install.constants import SUPPORTED_ARCHITECTURES, SUPPORTED_PLATFORMS
from services.install.versioning import normalise_version


def archive_names(name: str, version: str, platform: str, arch: str) -> tuple[str, str]:
    """Return ``(archive file name, binary member name)`` for a release."""

    version = normalise_version(version)
    return (
        f"{name}-v{version}-{platform}-{arch}.tar.gz",
        f"{name}-{platform}-{arch}",
    )


def create_archive(
    binary: Path,
    output_dir: Path,
    *,
    name: str,
    version: str,
    platform: str,
    arch: str,
) -> tuple[Path, str]:
    """Write the archive and its ``.sha256`` companion; return path and digest."""

    archive_name, member_name = archive_names(name, version, platform, arch)
    output_dir.mkdir(parents=True, exist_ok=True)
    archive_path = output_dir / archive_name

    with tarfile.open(archive_path, "w:gz") as archive:
        info = archive.gettarinfo(str(binary), arcname=member_name)
        info.mode = 0o755
        info.uid = info.gid = 0
        info.uname = info.gname = ""
        with binary.open("rb") as payload:
            archive.addfile(info, payload)

    digest = hashlib.sha256(archive_path.read_bytes()).hexdigest()
    hash_path = archive_path.with_name(f"{archive_path.name}.sha256")
    hash_path.write_text(f"{digest}  {archive_path.name}\n", encoding="utf-8")
    return archive_path, digest


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("binary", type=Path, help="Path to the compiled binary.")
    parser.add_argument("--arch", required=True, choices=SUPPORTED_ARCHITECTURES, help="Target CPU architecture.")
    parser.add_argument(
        "--platform",
        default=SUPPORTED_PLATFORMS[0],
        help=f"Target operating system (default: {SUPPORTED_PLATFORMS[0]}).",
    )
    parser.add_argument(
        "--version",
        default=None,
        help="Release version (default: the version in the bundled release descriptor).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("dist"),
        help="Directory receiving the archive and checksum file.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if not args.binary.is_file():
        raise SystemExit(f"Binary not found: {args.binary}")

    descriptor = get_release_descriptor()
    version = args.version or descriptor.version
    archive_path, digest = create_archive(
        args.binary,
        args.output_dir,
        name=descriptor.name,
        version=version,
        platform=args.platform,
        arch=args.arch,
    )
    print(f"{digest}  {archive_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
