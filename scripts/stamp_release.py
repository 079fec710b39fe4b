"""Stamp the bundled release descriptor with a version and archive checksums."""

from __future__ import annotations

import argparse
import dataclasses
import json
import re
import sys
from pathlib import Path


def ensure_project_root_on_sys_path() -> Path:
    """Ensure the project root is importable when the script runs standalone."""

    project_root = Path(__file__).resolve().parent.parent
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)
    return project_root


ensure_project_root_on_sys_path()

from app.config import default_descriptor_path, load_release_descriptor

_SHA256_PATTERN = re.compile(r"[0-9a-f]{64}")


def normalize_ref_name(ref_name: str) -> str:
    """Normalize a Git ref name to a bare semantic version string."""

    stripped = ref_name.strip()
    if stripped.startswith("v"):
        return stripped[1:]
    return stripped


def parse_checksum(entry: str) -> tuple[str, str]:
    """Parse an ``arch=digest`` pair."""

    arch, separator, digest = entry.partition("=")
    arch = arch.strip().lower()
    digest = digest.strip().lower()
    if not separator or not arch:
        raise ValueError(f"Expected ARCH=SHA256, got {entry!r}")
    if not _SHA256_PATTERN.fullmatch(digest):
        raise ValueError(f"Not a SHA-256 hex digest for {arch}: {digest!r}")
    return arch, digest


def stamp_release(ref_name: str, checksums: dict[str, str], descriptor_file: Path) -> dict:
    """Rewrite *descriptor_file* with the new version and checksums."""

    descriptor = load_release_descriptor(descriptor_file)
    merged = dict(descriptor.checksums)
    merged.update(checksums)
    stamped = dataclasses.replace(
        descriptor, version=normalize_ref_name(ref_name), checksums=merged
    )
    data = stamped.to_dict()
    descriptor_file.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return data


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("ref_name", help="Git ref name to stamp (e.g. 'v0.2.0').")
    parser.add_argument(
        "--sha256",
        action="append",
        default=[],
        metavar="ARCH=DIGEST",
        help="Archive checksum for an architecture; repeat for each archive.",
    )
    parser.add_argument(
        "--descriptor",
        type=Path,
        default=None,
        help="Path to the release descriptor that should be stamped (default: bundled descriptor).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        checksums = dict(parse_checksum(entry) for entry in args.sha256)
        stamp_release(args.ref_name, checksums, args.descriptor or default_descriptor_path())
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
