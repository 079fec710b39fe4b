"""Release descriptor configuration loaded from JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "release.json"
_DESCRIPTOR_CACHE: ReleaseDescriptor | None = None

_DEFAULT_NAME = "work"
_DEFAULT_REPOSITORY = "jfmyers9/work"
_DEFAULT_URL_TEMPLATE = (
    "https://github.com/{repository}/releases/download/v{version}/"
    "{name}-v{version}-{platform}-{arch}.tar.gz"
)
_DEFAULT_MEMBER_TEMPLATE = "{name}-{platform}-{arch}"


class ConfigError(ValueError):
    """Raised when a release descriptor cannot be loaded."""


@dataclass(frozen=True)
class ReleaseDescriptor:
    """Everything needed to locate and verify one release of the binary."""

    name: str
    version: str
    repository: str = _DEFAULT_REPOSITORY
    description: str = ""
    homepage: str = ""
    license: str = ""
    binary_name: str = _DEFAULT_NAME
    url_template: str = _DEFAULT_URL_TEMPLATE
    member_template: str = _DEFAULT_MEMBER_TEMPLATE
    checksums: Mapping[str, str] = field(default_factory=dict)

    @property
    def homepage_url(self) -> str:
        return self.homepage or f"https://github.com/{self.repository}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "homepage": self.homepage,
            "version": self.version,
            "license": self.license,
            "repository": self.repository,
            "binary_name": self.binary_name,
            "url_template": self.url_template,
            "member_template": self.member_template,
            "sha256": dict(self.checksums),
        }


def get_release_descriptor() -> ReleaseDescriptor:
    """Return the cached descriptor bundled with the package."""

    global _DESCRIPTOR_CACHE
    if _DESCRIPTOR_CACHE is None:
        _DESCRIPTOR_CACHE = load_release_descriptor()
    return _DESCRIPTOR_CACHE


def reset_release_descriptor_cache() -> None:
    """Reset the cached descriptor for subsequent reloads."""

    global _DESCRIPTOR_CACHE
    _DESCRIPTOR_CACHE = None


def load_release_descriptor(path: str | Path | None = None) -> ReleaseDescriptor:
    """Load the descriptor from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    return parse_release_descriptor(data)


def default_descriptor_path() -> Path:
    return Path(str(resources.files(__package__).joinpath(_CONFIG_RESOURCE)))


def parse_release_descriptor(data: Mapping[str, Any]) -> ReleaseDescriptor:
    version = _coerce_text(data.get("version"))
    if version is None:
        raise ConfigError("Release descriptor is missing a version")
    if version[:1] in {"v", "V"}:
        version = version[1:]

    checksums_section = data.get("sha256")
    if checksums_section is None:
        checksums_section = {}
    if not isinstance(checksums_section, Mapping):
        raise ConfigError("Release descriptor 'sha256' must map architectures to digests")
    checksums = {
        str(arch).strip().lower(): str(digest).strip().lower()
        for arch, digest in checksums_section.items()
        if str(arch).strip()
    }

    name = _coerce_text(data.get("name")) or _DEFAULT_NAME
    return ReleaseDescriptor(
        name=name,
        version=version,
        repository=_coerce_text(data.get("repository")) or _DEFAULT_REPOSITORY,
        description=_coerce_text(data.get("description")) or "",
        homepage=_coerce_text(data.get("homepage")) or "",
        license=_coerce_text(data.get("license")) or "",
        binary_name=_coerce_text(data.get("binary_name")) or name,
        url_template=_coerce_text(data.get("url_template")) or _DEFAULT_URL_TEMPLATE,
        member_template=_coerce_text(data.get("member_template")) or _DEFAULT_MEMBER_TEMPLATE,
        checksums=checksums,
    )


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read release descriptor {path}: {exc}") from exc
    return _parse_json(raw, source=str(path))


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError) as exc:
        raise ConfigError(f"Bundled release descriptor is unavailable: {exc}") from exc
    return _parse_json(raw, source=_CONFIG_RESOURCE)


def _parse_json(raw: str, *, source: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Release descriptor {source} is not valid JSON: {exc}") from exc
    if not isinstance(parsed, Mapping):
        raise ConfigError(f"Release descriptor {source} must be a JSON object")
    return parsed


def _coerce_text(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None
