"""Post-install smoke test for the ``work`` binary."""

from __future__ import annotations

import logging
import os
import re
import subprocess
from pathlib import Path
from typing import Sequence

from services.install.constants import SMOKE_TEST_ARGS, SMOKE_TEST_TIMEOUT
from services.install.models import SmokeTestError, SmokeTestResult

_LOGGER = logging.getLogger(__name__)

__all__ = ["parse_version_output", "run_smoke_test"]

# work 0.1.0 (commit abc1234, built 2024-01-01T00:00:00Z)
_VERSION_OUTPUT_PATTERN = re.compile(r"^\s*\S+\s+v?(?P<version>\S+)")


def run_smoke_test(
    binary: Path,
    args: Sequence[str] = SMOKE_TEST_ARGS,
    *,
    timeout: float = SMOKE_TEST_TIMEOUT,
) -> SmokeTestResult:
    """Run ``binary`` with ``args`` and require a zero exit status.

    Only the exit status decides the outcome; output is kept for reporting.
    """

    if not binary.is_file():
        raise SmokeTestError(f"Installed binary not found at {binary}")
    if not os.access(binary, os.X_OK):
        raise SmokeTestError(f"Installed binary at {binary} is not executable")

    command = (str(binary), *args)
    _LOGGER.info("Running smoke test: %s", " ".join(command))
    try:
        completed = subprocess.run(
            list(command),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise SmokeTestError(
            f"Smoke test timed out after {timeout:g}s: {' '.join(command)}"
        ) from exc
    except OSError as exc:
        raise SmokeTestError(f"Failed to launch {binary}: {exc}") from exc

    result = SmokeTestResult(
        command=command,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    if result.stdout.strip():
        _LOGGER.debug("Smoke test stdout: %s", result.stdout.strip())
    if result.stderr.strip():
        _LOGGER.debug("Smoke test stderr: %s", result.stderr.strip())

    if not result.passed:
        _LOGGER.error("Smoke test exited with status %s", result.returncode)
        raise SmokeTestError(
            f"'{' '.join(command)}' exited with status {result.returncode}",
            returncode=result.returncode,
        )
    _LOGGER.info("Smoke test passed")
    return result


def parse_version_output(output: str) -> str | None:
    """Extract the version from ``work version`` output, if recognisable."""

    for line in output.splitlines():
        match = _VERSION_OUTPUT_PATTERN.match(line)
        if match:
            return match.group("version")
    return None
