"""Command-line interface for installing the ``work`` issue tracker binary."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable

from app.config import ConfigError
from app.version import get_installer_version
from services.install import (
    InstallError,
    InstallService,
    build_install_service,
    render_caveats,
)
from services.install.versioning import STATUS_BROKEN, STATUS_NOT_INSTALLED
from shared.logging_config import LogVerbosity, ensure_logging


_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def _add_bin_dir_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--bin-dir",
        type=Path,
        default=None,
        help="Directory the binary is installed into (default: $WORK_INSTALL_BIN_DIR or ~/.local/bin).",
    )


def _add_platform_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--arch", default=None, help="Override the detected CPU architecture (arm64, amd64).")
    parser.add_argument("--os", dest="system", default=None, help="Override the detected operating system.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="work-installer",
        description="Install the prebuilt work issue tracker CLI from its GitHub releases.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  work-installer install                     # Install into ~/.local/bin
  work-installer install --bin-dir /usr/local/bin
  work-installer info --format json          # Show the archive that would be used
  work-installer test                        # Run `work version` against the install
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_installer_version()}")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a release descriptor JSON file (default: bundled descriptor).",
    )
    parser.add_argument(
        "--log-level",
        choices=[verbosity.value for verbosity in LogVerbosity],
        default=LogVerbosity.INFO.value,
        help="Verbosity of the installer log (default: info).",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    install_parser = subparsers.add_parser("install", help="Download, verify and install the binary")
    _add_bin_dir_option(install_parser)
    _add_platform_options(install_parser)
    install_parser.add_argument(
        "--local-dir",
        type=Path,
        default=None,
        help="Read release archives from this folder instead of downloading them.",
    )
    install_parser.add_argument("--skip-test", action="store_true", help="Do not run `work version` afterwards.")
    install_parser.add_argument("--no-caveats", action="store_true", help="Do not print the getting-started notes.")

    uninstall_parser = subparsers.add_parser("uninstall", help="Remove the installed binary")
    _add_bin_dir_option(uninstall_parser)

    test_parser = subparsers.add_parser("test", help="Run the post-install smoke test")
    _add_bin_dir_option(test_parser)

    subparsers.add_parser("caveats", help="Print the getting-started notes")

    info_parser = subparsers.add_parser("info", help="Show the release archive selected for this host")
    _add_platform_options(info_parser)
    info_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format (default: table)")

    status_parser = subparsers.add_parser("status", help="Compare the installed binary with the release version")
    _add_bin_dir_option(status_parser)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _service_from_args(args: argparse.Namespace) -> InstallService:
    return build_install_service(
        config_path=args.config,
        bin_dir=getattr(args, "bin_dir", None),
        system=getattr(args, "system", None),
        arch=getattr(args, "arch", None),
        local_dir=getattr(args, "local_dir", None),
    )


def handle_install(args: argparse.Namespace) -> int:
    service = _service_from_args(args)
    result = service.install()
    action = "Replaced" if result.replaced_existing else "Installed"
    print(f"{action} {service.descriptor.name} {result.artifact.version} at {result.target_path}")
    if not args.no_caveats:
        print()
        print(render_caveats(service.descriptor.binary_name, service.descriptor.homepage_url), end="")
    if not args.skip_test:
        service.smoke_test()
        print()
        print(f"Smoke test passed: {result.target_path.name} version")
    return EXIT_OK


def handle_uninstall(args: argparse.Namespace) -> int:
    service = _service_from_args(args)
    if service.uninstall():
        print(f"Removed {service.target_path}")
    else:
        print(f"Nothing installed at {service.target_path}")
    return EXIT_OK


def handle_test(args: argparse.Namespace) -> int:
    service = _service_from_args(args)
    result = service.smoke_test()
    if result.stdout.strip():
        print(result.stdout.strip())
    print(f"Smoke test passed: {service.target_path}")
    return EXIT_OK


def handle_caveats(args: argparse.Namespace) -> int:
    service = _service_from_args(args)
    print(render_caveats(service.descriptor.binary_name, service.descriptor.homepage_url), end="")
    return EXIT_OK


def handle_info(args: argparse.Namespace) -> int:
    service = _service_from_args(args)
    artifact = service.select_artifact()
    rows = {
        "name": service.descriptor.name,
        "version": artifact.version,
        "platform": artifact.platform,
        "arch": artifact.arch,
        "url": artifact.url,
        "sha256": artifact.sha256,
        "member": artifact.member_name,
        "binary": artifact.binary_name,
    }
    if args.format == "json":
        print(json.dumps(rows, indent=2))
        return EXIT_OK
    width = max(len(key) for key in rows)
    for key, value in rows.items():
        print(f"{key.ljust(width)}  {value}")
    return EXIT_OK


def handle_status(args: argparse.Namespace) -> int:
    service = _service_from_args(args)
    installed, status = service.status()
    released = service.descriptor.version
    if status == STATUS_NOT_INSTALLED:
        print(f"{service.descriptor.name} is not installed at {service.target_path} (release {released})")
    elif status == STATUS_BROKEN:
        print(f"{service.descriptor.name} at {service.target_path} failed `{service.descriptor.binary_name} version`: broken (release {released})")
        return EXIT_FAILURE
    elif installed is None:
        print(f"{service.descriptor.name} at {service.target_path}: {status} version (release {released})")
    else:
        print(f"{service.descriptor.name} {installed} at {service.target_path}: {status} (release {released})")
    return EXIT_OK


_HANDLERS: dict[str, Callable[[argparse.Namespace], int]] = {
    "install": handle_install,
    "uninstall": handle_uninstall,
    "test": handle_test,
    "caveats": handle_caveats,
    "info": handle_info,
    "status": handle_status,
}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    ensure_logging(args.log_level)
    _LOGGER.debug("work-installer %s running %s", get_installer_version(), args.command)

    handler = _HANDLERS[args.command]
    try:
        return handler(args)
    except (InstallError, ConfigError) as exc:
        _LOGGER.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
