"""
Path Checks

Existence checks for project files and directories.
"""

from pathlib import Path

from ...config.models import PathKind, PathRequirement
from ..models import Check, Outcome


def check_path(requirement: PathRequirement, root: Path) -> Outcome:
    """Check that a file or directory exists under the project root."""
    target = Path(root) / requirement.path

    if requirement.kind == PathKind.DIRECTORY:
        exists = target.is_dir()
    else:
        exists = target.is_file()

    if exists:
        return Outcome.passed(requirement.found_message or f"{requirement.name} exists")

    message = requirement.missing_message or f"{requirement.name} not found: {requirement.path}"
    return Outcome.fail(message, hint=requirement.hint)


def path_check(requirement: PathRequirement, root: Path) -> Check:
    """Wrap a path requirement as a Check."""
    depends_on = None
    if requirement.depends_on:
        depends_on = f"path.{requirement.depends_on}"

    return Check(
        id=requirement.check_id,
        description=requirement.name,
        execute=lambda: check_path(requirement, root),
        required=requirement.required,
        depends_on=depends_on,
    )
