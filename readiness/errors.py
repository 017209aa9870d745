"""
Error Taxonomy

Exceptions raised by detection and provisioning. Every error carries a
remediation hint so it can be turned into a user-facing outcome.
"""

from typing import List, Optional, Sequence


class ReadinessError(Exception):
    """Base class for all readiness errors."""

    default_hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint if hint is not None else self.default_hint

    def __str__(self) -> str:
        return self.message


class ToolNotFound(ReadinessError):
    """An executable is not on the search path."""

    def __init__(self, tool: str, label: Optional[str] = None, hint: Optional[str] = None):
        self.tool = tool
        super().__init__(f"{label or tool} not found", hint=hint)


class MissingPrerequisite(ToolNotFound):
    """A profile step needs a tool that is not installed."""

    def __init__(self, tool: str, purpose: str, hint: Optional[str] = None):
        self.purpose = purpose
        super().__init__(tool, hint=hint)
        self.message = f"{tool} was not found. It is required for {purpose}."


class VersionTooOld(ReadinessError):
    """An installed tool is older than the required minimum."""

    def __init__(
        self,
        tool: str,
        found: str,
        required: str,
        label: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.tool = tool
        self.found = found
        self.required = required
        super().__init__(
            f"{label or tool} too old: version {found} (>= {required} required)",
            hint=hint,
        )


class UnsupportedPlatform(ReadinessError):
    """No candidate package manager is available on this host."""

    default_hint = (
        "You may need to manually install the equivalent packages for your system."
    )

    def __init__(self, os_family: str, detail: Optional[str] = None, hint: Optional[str] = None):
        self.os_family = os_family
        self.detail = detail
        if detail:
            message = f"Your system ({os_family}, '{detail}') is not supported"
        else:
            message = f"Your system ({os_family}) is not supported"
        super().__init__(message, hint=hint)


class ProvisionFailed(ReadinessError):
    """The package manager could not install a set of packages."""

    def __init__(
        self,
        manager: str,
        packages: Sequence[str],
        detail: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.manager = manager
        self.packages: List[str] = list(packages)
        self.detail = detail
        message = f"{manager} failed to install: {', '.join(self.packages)}"
        if detail:
            message += f" ({detail})"
        super().__init__(
            message,
            hint=hint or "Install the packages manually, then re-run setup.",
        )


class ProbeTimeout(ReadinessError):
    """An external command did not finish within its timeout."""

    def __init__(self, command: Sequence[str], timeout: float, hint: Optional[str] = None):
        self.command = list(command)
        self.timeout = timeout
        super().__init__(
            f"'{' '.join(self.command)}' timed out after {timeout:g}s",
            hint=hint,
        )


class PermissionDenied(ReadinessError):
    """A command needed privileges the process does not have."""

    default_hint = "Re-run with administrator privileges (e.g. sudo) and try again."

    def __init__(self, command: Sequence[str], detail: Optional[str] = None, hint: Optional[str] = None):
        self.command = list(command)
        message = f"Permission denied running '{' '.join(self.command)}'"
        if detail:
            message += f": {detail}"
        super().__init__(message, hint=hint)
