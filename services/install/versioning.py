"""Helpers for comparing installed and released versions."""

from __future__ import annotations

from packaging.version import InvalidVersion, Version


__all__ = [
    "STATUS_BROKEN",
    "STATUS_NEWER",
    "STATUS_NOT_INSTALLED",
    "STATUS_OUTDATED",
    "STATUS_UNKNOWN",
    "STATUS_UP_TO_DATE",
    "classify_installed_version",
    "compare_versions",
    "normalise_version",
]

STATUS_UP_TO_DATE = "up to date"
STATUS_OUTDATED = "outdated"
STATUS_NEWER = "newer"
STATUS_NOT_INSTALLED = "not installed"
STATUS_BROKEN = "broken"
STATUS_UNKNOWN = "unknown"


def normalise_version(raw: str) -> str:
    version = raw.strip()
    if version[:1] in {"v", "V"}:
        version = version[1:]
    return version


def compare_versions(current_version: str, candidate: str) -> int:
    """Compare ``candidate`` against ``current_version``.

    Returns ``1`` when ``candidate`` is newer, ``-1`` when it is older and ``0``
    when the versions are equivalent. Strings that are not PEP 440 versions
    (``dev`` builds, git describe output) are compared token by token.
    """

    current_version = normalise_version(current_version)
    candidate = normalise_version(candidate)
    if candidate == current_version:
        return 0

    try:
        candidate_version = Version(candidate)
        current_version_parsed = Version(current_version)
    except InvalidVersion:
        return _compare_tokens(current_version, candidate)

    if candidate_version == current_version_parsed:
        return 0
    if candidate_version > current_version_parsed:
        return 1
    return -1


def classify_installed_version(installed: str | None, released: str) -> str:
    """Describe ``installed`` relative to the ``released`` version.

    Installed builds that do not report a PEP 440 version (``dev`` builds)
    cannot be ordered against a release and are reported as unknown.
    """

    if installed is None:
        return STATUS_NOT_INSTALLED
    try:
        Version(normalise_version(installed))
    except InvalidVersion:
        return STATUS_UNKNOWN
    comparison = compare_versions(installed, released)
    if comparison > 0:
        return STATUS_OUTDATED
    if comparison < 0:
        return STATUS_NEWER
    return STATUS_UP_TO_DATE


def _compare_tokens(current_version: str, candidate: str) -> int:
    def tokenize(version: str) -> list[tuple[int, object]]:
        tokens: list[tuple[int, object]] = []
        for raw in version.replace("-", ".").replace("+", ".").split("."):
            if not raw:
                continue
            if raw.isdigit():
                tokens.append((0, int(raw)))
            else:
                tokens.append((1, raw.lower()))
        return tokens

    current_tokens = tokenize(current_version)
    candidate_tokens = tokenize(candidate)
    length = max(len(current_tokens), len(candidate_tokens))
    for index in range(length):
        current_token = current_tokens[index] if index < len(current_tokens) else (0, 0)
        candidate_token = candidate_tokens[index] if index < len(candidate_tokens) else (0, 0)
        if candidate_token != current_token:
            return 1 if candidate_token > current_token else -1
    return 0
