"""
Command Executors

An Executor runs commands that change system state. DirectExecutor runs
them as-is; ElevatedExecutor wraps them with sudo. select_executor()
picks one once, based on the privileges of the current process.
"""

import os
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from ..errors import PermissionDenied
from ..logger import get_logger
from ..process import CommandResult, CommandRunner, run_command

logger = get_logger(__name__)

# Output fragments package managers print when they lack privileges
PERMISSION_MARKERS = (
    "permission denied",
    "are you root",
    "you need to be root",
    "must be run as root",
    "unless you are root",
    "superuser privileges",
    "a password is required",
    "operation not permitted",
)


def is_privileged() -> bool:
    """True if the current process runs as root."""
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None:
        # No POSIX uid model; nothing to elevate with
        return True
    return geteuid() == 0


def looks_like_permission_error(result: CommandResult) -> bool:
    if result.ok:
        return False
    output = result.output.lower()
    return any(marker in output for marker in PERMISSION_MARKERS)


class Executor(ABC):
    """Runs commands that mutate system state."""

    elevated: bool = False

    def __init__(self, runner: CommandRunner = run_command):
        self.runner = runner

    @abstractmethod
    def wrap(self, argv: Sequence[str]) -> List[str]:
        """Turn a command into the command line actually executed."""

    def run(
        self,
        argv: Sequence[str],
        timeout: float,
        cwd: Optional[Union[str, Path]] = None,
    ) -> CommandResult:
        """
        Run a command.

        Raises:
            PermissionDenied: The command failed for lack of privileges
        """
        result = self.runner(self.wrap(argv), timeout=timeout, cwd=cwd)
        if looks_like_permission_error(result):
            detail = next((line for line in result.output.splitlines() if line.strip()), None)
            raise PermissionDenied(argv, detail)
        return result


class DirectExecutor(Executor):
    """Runs commands with the current privileges."""

    def wrap(self, argv: Sequence[str]) -> List[str]:
        return list(argv)


class ElevatedExecutor(Executor):
    """Runs commands through sudo."""

    elevated = True

    def __init__(
        self,
        runner: CommandRunner = run_command,
        which: Callable[[str], Optional[str]] = shutil.which,
        helper: str = "sudo",
        non_interactive: bool = False,
    ):
        super().__init__(runner)
        self.which = which
        self.helper = helper
        self.non_interactive = non_interactive

    def wrap(self, argv: Sequence[str]) -> List[str]:
        if not self.which(self.helper):
            raise PermissionDenied(
                argv,
                f"{self.helper} is not available",
                hint=f"Run this command as root, or install {self.helper}.",
            )
        prefix = [self.helper, "-n"] if self.non_interactive else [self.helper]
        return [*prefix, *argv]


def select_executor(
    runner: CommandRunner = run_command,
    which: Callable[[str], Optional[str]] = shutil.which,
    non_interactive: bool = False,
    privileged: Optional[bool] = None,
) -> Executor:
    """
    Choose the executor for privileged commands.

    Args:
        runner: Command runner
        which: Search path lookup for the elevation helper
        non_interactive: Never let sudo prompt for a password (CI)
        privileged: Override privilege detection

    Returns:
        DirectExecutor when already root, ElevatedExecutor otherwise
    """
    if privileged is None:
        privileged = is_privileged()
    if privileged:
        logger.debug("Running privileged commands directly")
        return DirectExecutor(runner)
    logger.debug("Running privileged commands through sudo")
    return ElevatedExecutor(runner, which, non_interactive=non_interactive)
