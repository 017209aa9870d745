"""
Tool Detection

Locates executables on the search path and asks them for their version.
"""

import shutil
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..errors import ReadinessError, ProbeTimeout
from ..logger import get_logger
from ..process import CommandRunner, DEFAULT_TIMEOUT, run_command
from .version import extract_version

logger = get_logger(__name__)


@dataclass
class ToolProbe:
    """What was found for one executable."""
    name: str
    path: Optional[str] = None
    version: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.path is not None


class ToolDetector:
    """
    Probes executables for presence and version.

    Absence is never an error: locate() and detect() return None when the
    executable is not on the search path. A version query that exceeds
    its timeout raises ProbeTimeout.
    """

    def __init__(
        self,
        runner: CommandRunner = run_command,
        which: Callable[[str], Optional[str]] = shutil.which,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the detector.

        Args:
            runner: Command runner used for version queries
            which: Search path lookup
            timeout: Seconds allowed for each version query
        """
        self.runner = runner
        self.which = which
        self.timeout = timeout

    def locate(self, name: str) -> Optional[str]:
        """Return the executable's path, or None."""
        return self.which(name)

    def is_present(self, *names: str) -> bool:
        """True if every named executable is on the search path."""
        return all(self.locate(name) for name in names)

    def detect(self, name: str) -> Optional[str]:
        """Return the tool's version, or None if it is absent or unversioned."""
        if not self.locate(name):
            logger.debug("%s not on PATH", name)
            return None
        return self.get_version(name)

    def get_version(
        self,
        name: str,
        args: Sequence[str] = ("--version",),
        pattern: Optional[str] = None,
    ) -> Optional[str]:
        """
        Query a tool for its version.

        Args:
            name: Executable name
            args: Arguments that make the tool print its version
            pattern: Optional extraction regex

        Returns:
            Extracted version, or None when the output holds none
        """
        try:
            result = self.runner([name, *args], timeout=self.timeout)
        except ProbeTimeout:
            raise
        except ReadinessError as e:
            logger.debug("Version query for %s failed: %s", name, e)
            return None

        version = extract_version(result.output, pattern)
        if version is None:
            logger.debug("No version in output of %s: %r", name, result.output[:200])
        return version

    def probe(
        self,
        name: str,
        args: Sequence[str] = ("--version",),
        pattern: Optional[str] = None,
    ) -> ToolProbe:
        """Locate a tool and, when present, read its version."""
        path = self.locate(name)
        if path is None:
            return ToolProbe(name=name)
        return ToolProbe(name=name, path=path, version=self.get_version(name, args, pattern))
