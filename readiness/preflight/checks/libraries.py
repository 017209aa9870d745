"""
Library Checks

Development libraries detected through pkg-config.
"""

from typing import Optional

from ...config.models import LibraryRequirement
from ...detect.platform import MANAGERS, ManagerKind
from ...errors import ToolNotFound
from ...process import CommandRunner
from ..models import Check, Outcome


def install_hint(requirement: LibraryRequirement, kind: Optional[ManagerKind]) -> Optional[str]:
    """Install command for the library with the given (or default apt) manager."""
    kind = kind or ManagerKind.APT
    package = requirement.packages.get(kind)
    manager = MANAGERS.get(kind)
    if not package or manager is None:
        return None
    return f"Install with: sudo {' '.join(manager.install_argv([package]))}"


def check_library(
    requirement: LibraryRequirement,
    runner: CommandRunner,
    manager_kind: Optional[ManagerKind] = None,
    timeout: float = 10.0,
) -> Outcome:
    """Ask pkg-config whether a module is installed."""
    try:
        result = runner(["pkg-config", "--exists", requirement.module], timeout=timeout)
    except ToolNotFound:
        return Outcome.fail(
            f"{requirement.label} not checked: pkg-config not found",
            hint="Install pkg-config to detect development libraries",
        )

    if result.ok:
        return Outcome.passed(f"{requirement.label} found")

    return Outcome.fail(
        f"{requirement.label} not found",
        hint=install_hint(requirement, manager_kind),
    )


def library_check(
    requirement: LibraryRequirement,
    runner: CommandRunner,
    manager_kind: Optional[ManagerKind] = None,
    timeout: float = 10.0,
) -> Check:
    """Wrap a library requirement as a Check."""
    return Check(
        id=requirement.check_id,
        description=requirement.label,
        execute=lambda: check_library(requirement, runner, manager_kind, timeout),
        required=requirement.required,
    )
