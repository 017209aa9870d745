"""
External Commands

Every subprocess the package starts goes through run_command, which
always carries a timeout. On expiry the child is killed and ProbeTimeout
is raised.
"""

import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from .errors import PermissionDenied, ProbeTimeout, ToolNotFound
from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass
class CommandResult:
    """Outcome of one finished external command."""
    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stdout first."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


CommandRunner = Callable[..., CommandResult]


def run_command(
    argv: Sequence[str],
    timeout: float = DEFAULT_TIMEOUT,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Dict[str, str]] = None,
) -> CommandResult:
    """
    Run a command to completion and capture its output.

    Args:
        argv: Command and arguments
        timeout: Seconds before the child is killed
        cwd: Working directory
        env: Environment override

    Returns:
        CommandResult with exit code and decoded output

    Raises:
        ToolNotFound: The executable does not exist
        PermissionDenied: The executable cannot be executed
        ProbeTimeout: The command did not finish in time
    """
    argv = [str(a) for a in argv]
    logger.debug("+ %s (timeout %gs)", " ".join(argv), timeout)
    started = time.monotonic()

    try:
        completed = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(cwd) if cwd else None,
            env=env,
        )
    except subprocess.TimeoutExpired:
        logger.debug("  timed out after %gs", timeout)
        raise ProbeTimeout(argv, timeout)
    except FileNotFoundError:
        raise ToolNotFound(argv[0])
    except PermissionError as e:
        raise PermissionDenied(argv, str(e))

    logger.debug(
        "  exit %d in %.2fs", completed.returncode, time.monotonic() - started
    )
    return CommandResult(
        argv=argv,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
