from __future__ import annotations

import pytest

from services.install.versioning import (
    STATUS_NEWER,
    STATUS_NOT_INSTALLED,
    STATUS_OUTDATED,
    STATUS_UNKNOWN,
    STATUS_UP_TO_DATE,
    classify_installed_version,
    compare_versions,
)


@pytest.mark.parametrize(
    ("current", "candidate", "expected"),
    [
        ("0.1.0", "0.1.0", 0),
        ("0.1.0", "v0.1.0", 0),
        ("0.1.0", "0.2.0", 1),
        ("0.10.0", "0.9.0", -1),
        ("0.1.0rc1", "0.1.0", 1),
        ("dev", "0.1.0", -1),
    ],
)
def test_compare_versions(current: str, candidate: str, expected: int) -> None:
    assert compare_versions(current, candidate) == expected


def test_classify_installed_version() -> None:
    assert classify_installed_version(None, "0.1.0") == STATUS_NOT_INSTALLED
    assert classify_installed_version("0.1.0", "0.1.0") == STATUS_UP_TO_DATE
    assert classify_installed_version("0.1.0", "0.2.0") == STATUS_OUTDATED
    assert classify_installed_version("0.3.0", "0.2.0") == STATUS_NEWER


@pytest.mark.parametrize("installed", ["dev", "dev-abc1234", "unknown"])
def test_unversioned_builds_are_unknown(installed: str) -> None:
    assert classify_installed_version(installed, "0.2.0") == STATUS_UNKNOWN
