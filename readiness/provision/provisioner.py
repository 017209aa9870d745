"""
Dependency Provisioner

Installs a profile's system packages through the resolved package
manager, then runs the profile's extra steps.

Provisioning is idempotent: every package, package group, toolchain
target and cargo tool is queried first and only what is missing is
requested. Nothing is ever force-reinstalled. Commands run one at a time.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..config.models import ExtraStep, ExtraStepKind, PackageProfile
from ..detect.platform import PackageManager
from ..detect.tools import ToolDetector
from ..detect.version import is_at_least
from ..errors import MissingPrerequisite, ProvisionFailed, ReadinessError
from ..logger import get_logger
from ..process import CommandResult, CommandRunner, run_command
from .executor import DirectExecutor, Executor

logger = get_logger(__name__)


@dataclass
class ProvisionStep:
    """One unit of provisioning work; run() returns a summary line."""
    id: str
    description: str
    run: Callable[[], str]


@dataclass
class ProvisionResult:
    """What provisioning a profile did."""
    profile: str
    manager: Optional[str] = None
    installed: List[str] = field(default_factory=list)
    already_present: List[str] = field(default_factory=list)
    actions: List[List[str]] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.actions)


def _last_line(result: CommandResult) -> Optional[str]:
    lines = [line for line in result.output.splitlines() if line.strip()]
    return lines[-1] if lines else None


class DependencyProvisioner:
    """
    Provisions package profiles.

    System package commands go through system_executor (elevated when
    needed); toolchain and project commands go through user_executor.
    """

    def __init__(
        self,
        system_executor: Executor,
        user_executor: Optional[Executor] = None,
        runner: CommandRunner = run_command,
        detector: Optional[ToolDetector] = None,
        ci: bool = False,
        install_timeout: float = 1800.0,
        query_timeout: float = 30.0,
        project_root: Optional[Path] = None,
    ):
        """
        Initialize the provisioner.

        Args:
            system_executor: Executor for package manager commands
            user_executor: Executor for rustup, cargo and project commands
            runner: Runner for read-only queries
            detector: Tool detector for prerequisite checks
            ci: Skip steps marked skip_in_ci
            install_timeout: Seconds allowed per install command
            query_timeout: Seconds allowed per query command
            project_root: Working directory for project commands
        """
        self.system_executor = system_executor
        self.user_executor = user_executor or DirectExecutor(runner)
        self.runner = runner
        self.detector = detector or ToolDetector(runner=runner)
        self.ci = ci
        self.install_timeout = install_timeout
        self.query_timeout = query_timeout
        self.project_root = project_root

        self._extra_handlers: Dict[ExtraStepKind, Callable[[ExtraStep, ProvisionResult], str]] = {
            ExtraStepKind.REQUIRE_TOOL: self._require_tool,
            ExtraStepKind.TOOLCHAIN_TARGETS: self._add_targets,
            ExtraStepKind.CARGO_INSTALL: self._cargo_install,
            ExtraStepKind.COMMAND: self._run_project_command,
        }

    # ------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------

    def install(self, manager: PackageManager, profile: PackageProfile) -> ProvisionResult:
        """
        Provision a profile, stopping at the first failing step.

        Already installed packages are not rolled back on failure.

        Raises:
            ProvisionFailed: The manager or a tool could not install something
            PermissionDenied: Privileges were insufficient
            MissingPrerequisite: A tool required by an extra step is missing
        """
        result = ProvisionResult(profile=profile.name, manager=manager.name)
        for step in self.steps(manager, profile, result):
            logger.debug("Provisioning step %s", step.id)
            step.run()
        return result

    def steps(
        self,
        manager: PackageManager,
        profile: PackageProfile,
        result: Optional[ProvisionResult] = None,
    ) -> List[ProvisionStep]:
        """
        Plan a profile as an ordered list of steps.

        Args:
            manager: Resolved package manager
            profile: Profile to provision
            result: Accumulator the steps record into

        Returns:
            Steps in execution order
        """
        if result is None:
            result = ProvisionResult(profile=profile.name, manager=manager.name)
        steps: List[ProvisionStep] = []

        groups = profile.groups_for(manager.kind)
        if groups:
            steps.append(ProvisionStep(
                id=f"{profile.name}.groups",
                description=f"Install package group ({groups[0]})",
                run=lambda: self._install_group(manager, groups, result),
            ))

        packages = profile.packages_for(manager.kind)
        if packages:
            steps.append(ProvisionStep(
                id=f"{profile.name}.packages",
                description=f"Install {len(packages)} {manager.name} packages",
                run=lambda: self._install_packages(manager, packages, result),
            ))

        for index, extra in enumerate(profile.extra_steps):
            if extra.skip_in_ci and self.ci:
                result.skipped_steps.append(extra.title)
                continue
            steps.append(self._extra_step(profile, index, extra, result))

        return steps

    # ------------------------------------------------------------
    # System packages
    # ------------------------------------------------------------

    def is_installed(self, manager: PackageManager, package: str) -> bool:
        """Query the manager for a single package."""
        try:
            result = self.runner(manager.query_argv(package), timeout=self.query_timeout)
        except ReadinessError as e:
            logger.debug("Query for %s failed: %s", package, e)
            return False
        return manager.is_installed(result)

    def _install_packages(
        self,
        manager: PackageManager,
        packages: List[str],
        result: ProvisionResult,
    ) -> str:
        missing = [p for p in packages if not self.is_installed(manager, p)]
        present = [p for p in packages if p not in missing]
        result.already_present.extend(present)

        if not missing:
            return f"All {len(packages)} {manager.name} packages already installed"

        if manager.refresh_command:
            self._system(list(manager.refresh_command), manager, missing, result)

        self._system(manager.install_argv(missing), manager, missing, result)
        result.installed.extend(missing)
        return (
            f"Installed {len(missing)} {manager.name} package(s) "
            f"({len(present)} already present)"
        )

    def _install_group(
        self,
        manager: PackageManager,
        alternatives: List[str],
        result: ProvisionResult,
    ) -> str:
        if manager.group_query_command:
            listing = self.runner(list(manager.group_query_command), timeout=self.query_timeout)
            if listing.ok:
                for group in alternatives:
                    if group.lower() in listing.stdout.lower():
                        result.already_present.append(group)
                        return f"Package group '{group}' already installed"

        for group in alternatives:
            argv = manager.group_argv(group)
            outcome = self.system_executor.run(argv, timeout=self.install_timeout)
            result.actions.append(argv)
            if outcome.ok:
                result.installed.append(group)
                return f"Installed package group '{group}'"
            logger.debug("Group %s failed: %s", group, _last_line(outcome))

        raise ProvisionFailed(
            manager.name,
            alternatives,
            detail="none of the package groups could be installed",
        )

    def _system(
        self,
        argv: List[str],
        manager: PackageManager,
        packages: List[str],
        result: ProvisionResult,
    ) -> None:
        outcome = self.system_executor.run(argv, timeout=self.install_timeout)
        result.actions.append(argv)
        if not outcome.ok:
            raise ProvisionFailed(manager.name, packages, detail=_last_line(outcome))

    # ------------------------------------------------------------
    # Extra steps
    # ------------------------------------------------------------

    def _extra_step(
        self,
        profile: PackageProfile,
        index: int,
        extra: ExtraStep,
        result: ProvisionResult,
    ) -> ProvisionStep:
        handler = self._extra_handlers[extra.kind]
        return ProvisionStep(
            id=f"{profile.name}.{extra.kind.value}.{index}",
            description=extra.title,
            run=lambda: handler(extra, result),
        )

    def _require(self, tool: str, purpose: str, hint: Optional[str] = None) -> None:
        if not self.detector.locate(tool):
            raise MissingPrerequisite(
                tool,
                purpose,
                hint=hint or f"Ensure the '{tool}' binary is in your $PATH.",
            )

    def _require_tool(self, step: ExtraStep, result: ProvisionResult) -> str:
        for name in [step.tool, *step.alternatives]:
            if not self.detector.locate(name):
                continue
            if step.min_version is None:
                return f"{name} found"
            version = self.detector.get_version(name)
            if version and is_at_least(step.min_version, version):
                return f"{name} {version} found"
            logger.debug("%s %s does not satisfy >= %s", name, version, step.min_version)

        raise MissingPrerequisite(
            step.tool,
            step.purpose or step.title,
            hint=step.hint,
        )

    def _add_targets(self, step: ExtraStep, result: ProvisionResult) -> str:
        tool = step.tool or "rustup"
        self._require(tool, "installing compilation targets", step.hint)

        listing = self.user_executor.run([tool, "target", "list", "--installed"], timeout=self.query_timeout)
        installed = set(listing.stdout.split()) if listing.ok else set()
        missing = [t for t in step.targets if t not in installed]
        result.already_present.extend(t for t in step.targets if t in installed)

        if not missing:
            return f"All {len(step.targets)} {tool} targets already installed"

        argv = [tool, "target", "add", *missing]
        outcome = self.user_executor.run(argv, timeout=step.timeout or self.install_timeout)
        result.actions.append(argv)
        if not outcome.ok:
            raise ProvisionFailed(tool, missing, detail=_last_line(outcome))
        result.installed.extend(missing)
        return f"Added {tool} targets: {', '.join(missing)}"

    def _cargo_install(self, step: ExtraStep, result: ProvisionResult) -> str:
        self._require("cargo", "installing Rust tools", step.hint)

        listing = self.user_executor.run(["cargo", "install", "--list"], timeout=self.query_timeout)
        installed = set()
        if listing.ok:
            # Crate lines start at column 0: "cargo-watch v8.5.2:"
            for line in listing.stdout.splitlines():
                if line and not line[0].isspace():
                    installed.add(line.split()[0])

        missing = [c for c in step.crates if c not in installed]
        result.already_present.extend(c for c in step.crates if c in installed)
        if not missing:
            return f"Rust tools already installed: {', '.join(step.crates)}"

        argv = ["cargo", "install", *missing]
        outcome = self.user_executor.run(argv, timeout=step.timeout or self.install_timeout)
        result.actions.append(argv)
        if not outcome.ok:
            raise ProvisionFailed("cargo", missing, detail=_last_line(outcome))
        result.installed.extend(missing)
        return f"Installed Rust tools: {', '.join(missing)}"

    def _run_project_command(self, step: ExtraStep, result: ProvisionResult) -> str:
        tool = step.command[0]
        self._require(tool, step.title, step.hint)

        outcome = self.user_executor.run(
            step.command,
            timeout=step.timeout or self.install_timeout,
            cwd=self.project_root,
        )
        result.actions.append(list(step.command))
        if not outcome.ok:
            raise ProvisionFailed(tool, [" ".join(step.command)], detail=_last_line(outcome))
        return f"{step.title}: done"
