"""
Package Manager Resolution

Identifies the host's OS family and picks the first available system
package manager from a fixed, priority-ordered candidate list.

Detection order on Linux:
1. apt (Debian, Ubuntu)
2. pacman (Arch)
3. dnf (Fedora)
"""

import platform
import shutil
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..errors import ReadinessError, UnsupportedPlatform
from ..logger import get_logger
from ..process import CommandResult, CommandRunner, run_command

logger = get_logger(__name__)


class ManagerKind(str, Enum):
    """System package managers."""
    APT = "apt"
    PACMAN = "pacman"
    DNF = "dnf"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class PackageManager:
    """
    How to drive one system package manager.

    Install commands use the manager's "ensure present" mode so already
    installed packages are left alone.
    """
    kind: ManagerKind
    executable: str
    detect_command: Tuple[str, ...]
    install_command: Tuple[str, ...]
    query_command: Tuple[str, ...]
    refresh_command: Optional[Tuple[str, ...]] = None
    installed_marker: Optional[str] = None
    group_install_command: Optional[Tuple[str, ...]] = None
    group_query_command: Optional[Tuple[str, ...]] = None

    @property
    def name(self) -> str:
        return self.kind.value

    def install_argv(self, packages: Sequence[str]) -> List[str]:
        return [*self.install_command, *packages]

    def query_argv(self, package: str) -> List[str]:
        return [*self.query_command, package]

    def is_installed(self, result: CommandResult) -> bool:
        """Interpret the output of query_argv()."""
        if not result.ok:
            return False
        if self.installed_marker:
            return self.installed_marker in result.stdout
        return True

    def group_argv(self, group: str) -> List[str]:
        if not self.group_install_command:
            raise ValueError(f"{self.name} has no package groups")
        return [*self.group_install_command, group]


# Single dispatch table for every supported manager
MANAGERS: Dict[ManagerKind, PackageManager] = {
    ManagerKind.APT: PackageManager(
        kind=ManagerKind.APT,
        executable="apt-get",
        detect_command=("apt-get", "--version"),
        refresh_command=("apt-get", "-y", "update"),
        install_command=("apt-get", "-y", "install"),
        query_command=("dpkg-query", "-W", "-f=${Status}"),
        installed_marker="install ok installed",
    ),
    ManagerKind.PACMAN: PackageManager(
        kind=ManagerKind.PACMAN,
        executable="pacman",
        detect_command=("pacman", "--version"),
        refresh_command=("pacman", "-Sy", "--noconfirm"),
        install_command=("pacman", "-S", "--needed", "--noconfirm"),
        query_command=("pacman", "-Q"),
    ),
    ManagerKind.DNF: PackageManager(
        kind=ManagerKind.DNF,
        executable="dnf",
        detect_command=("dnf", "--version"),
        install_command=("dnf", "install", "-y"),
        query_command=("rpm", "-q"),
        group_install_command=("dnf", "group", "install", "-y"),
        group_query_command=("dnf", "group", "list", "--installed"),
    ),
}

# Candidate managers per OS family, highest priority first
CANDIDATES: Dict[str, List[ManagerKind]] = {
    "linux": [ManagerKind.APT, ManagerKind.PACMAN, ManagerKind.DNF],
}


def detect_os_family() -> str:
    """
    Detect the operating system family.

    Returns:
        One of: 'linux', 'macos', 'windows', or the lowercased system name
    """
    if sys.platform.startswith(("msys", "cygwin", "win")):
        return "windows"

    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    if system.startswith(("mingw", "msys", "cygwin")):
        return "windows"
    return system or "unknown"


class PackageManagerResolver:
    """
    Picks the system package manager for this host.

    Each candidate's own detection command is run in priority order; the
    first that succeeds wins. When none does, resolution fails with
    UnsupportedPlatform and no provisioning may run.
    """

    def __init__(
        self,
        candidates: Optional[Dict[str, List[ManagerKind]]] = None,
        managers: Optional[Dict[ManagerKind, PackageManager]] = None,
        runner: CommandRunner = run_command,
        which: Callable[[str], Optional[str]] = shutil.which,
        timeout: float = 10.0,
    ):
        self.candidates = CANDIDATES if candidates is None else candidates
        self.managers = MANAGERS if managers is None else managers
        self.runner = runner
        self.which = which
        self.timeout = timeout

    def candidates_for(self, os_family: str) -> List[PackageManager]:
        """Candidate managers for an OS family, in priority order."""
        return [
            self.managers[kind]
            for kind in self.candidates.get(os_family, [])
            if kind in self.managers
        ]

    def is_available(self, manager: PackageManager) -> bool:
        """Run the manager's detection command."""
        if not self.which(manager.executable):
            return False
        try:
            result = self.runner(list(manager.detect_command), timeout=self.timeout)
        except ReadinessError as e:
            logger.debug("Detection of %s failed: %s", manager.name, e)
            return False
        return result.ok

    def find(self, os_family: Optional[str] = None) -> Optional[PackageManager]:
        """Like resolve(), but returns None instead of raising."""
        os_family = os_family or detect_os_family()
        for manager in self.candidates_for(os_family):
            if self.is_available(manager):
                logger.debug("Detected %s package manager", manager.name)
                return manager
        return None

    def resolve(self, os_family: Optional[str] = None) -> PackageManager:
        """
        Resolve the package manager.

        Args:
            os_family: OS family; detected when omitted

        Returns:
            The first available candidate manager

        Raises:
            UnsupportedPlatform: If no candidate is available
        """
        os_family = os_family or detect_os_family()
        manager = self.find(os_family)
        if manager is None:
            raise UnsupportedPlatform(os_family, detail=self._describe_distro())
        return manager

    def _describe_distro(self) -> Optional[str]:
        """Distribution description from lsb_release, when available."""
        if not self.which("lsb_release"):
            return None
        try:
            result = self.runner(["lsb_release", "-s", "-d"], timeout=self.timeout)
        except ReadinessError:
            return None
        description = result.stdout.strip().strip('"')
        return description if result.ok and description else None
