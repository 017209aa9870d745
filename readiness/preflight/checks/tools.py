"""
Tool Checks

Presence and minimum-version checks for executables.
"""

from ...config.models import ToolRequirement
from ...detect.tools import ToolDetector
from ...detect.version import is_at_least
from ...errors import ToolNotFound, VersionTooOld
from ..models import Check, Outcome


def check_tool(requirement: ToolRequirement, detector: ToolDetector) -> Outcome:
    """
    Check one tool requirement.

    Raises:
        ToolNotFound: The executable is not on PATH
        VersionTooOld: The installed version is below the minimum
    """
    probe = detector.probe(
        requirement.executable,
        requirement.version_args,
        requirement.version_pattern,
    )
    name = requirement.name

    if not probe.found:
        raise ToolNotFound(requirement.executable, label=name, hint=requirement.hint)

    if requirement.min_version is None:
        return Outcome.passed(f"{name} found: {probe.version or 'installed'}")

    if probe.version is None:
        return Outcome.warn(
            f"{name} found, but its version could not be determined "
            f"(>= {requirement.min_version} required)",
            hint=f"Check '{requirement.executable} {' '.join(requirement.version_args)}' manually",
        )

    if not is_at_least(requirement.min_version, probe.version):
        raise VersionTooOld(
            requirement.executable,
            probe.version,
            requirement.min_version,
            label=name,
            hint=requirement.hint,
        )

    return Outcome.passed(
        f"{name} version {probe.version} (>= {requirement.min_version} required)"
    )


def tool_check(
    requirement: ToolRequirement,
    detector: ToolDetector,
    fatal: bool = False,
    check_id: str = "",
) -> Check:
    """Wrap a tool requirement as a Check."""
    return Check(
        id=check_id or requirement.check_id,
        description=requirement.name,
        execute=lambda: check_tool(requirement, detector),
        required=requirement.required,
        fatal=fatal and requirement.required,
    )
