"""Host checks that must pass before anything is mutated."""

import os
from pathlib import Path
from typing import Callable, List

from dotenv import dotenv_values

from erpdeploy.constants import SUPPORTED_OS_ID, SUPPORTED_OS_MAJOR
from erpdeploy.exceptions import PreflightError
from erpdeploy.models.results import CheckResult


def require_root(geteuid: Callable[[], int] = os.geteuid) -> None:
    """Effective uid must be the superuser."""
    if geteuid() != 0:
        raise PreflightError(
            "Run this as root (use sudo).", context=f"Effective uid: {geteuid()}"
        )


def read_os_release(path: Path) -> dict:
    """Parse an os-release file (shell-style KEY=value lines)."""
    if not path.exists():
        raise PreflightError(f"{path} not found; unsupported system.")
    return {k: v or "" for k, v in dotenv_values(path).items()}


def check_os(os_release_path: Path) -> str:
    """
    Verify the host is a supported Ubuntu release.

    Returns:
        The detected VERSION_ID
    """
    release = read_os_release(Path(os_release_path))
    os_id = release.get("ID", "")
    version = release.get("VERSION_ID", "")

    if os_id != SUPPORTED_OS_ID:
        raise PreflightError(
            f"This installer targets Ubuntu only (detected {os_id or 'unknown'})."
        )
    if not version.startswith(f"{SUPPORTED_OS_MAJOR}."):
        raise PreflightError(
            f"Ubuntu {version or 'unknown'} detected. Please use Ubuntu {SUPPORTED_OS_MAJOR}.x."
        )
    return version


def collect_preflight(
    os_release_path: Path, geteuid: Callable[[], int] = os.geteuid
) -> List[CheckResult]:
    """Run every check without raising, for reporting."""
    results = []

    try:
        require_root(geteuid)
        results.append(CheckResult("Root privilege", True, "uid 0"))
    except PreflightError as e:
        results.append(CheckResult("Root privilege", False, e.message))

    try:
        version = check_os(os_release_path)
        results.append(CheckResult("Operating system", True, f"Ubuntu {version}"))
    except PreflightError as e:
        results.append(CheckResult("Operating system", False, e.message))

    return results
