"""
Setup Session

Orchestrates `setup`: platform resolution, prerequisite checks,
provisioning of each requested profile and post-setup verification. All
work after resolution is expressed as sections run by CheckRunner, so
provisioning steps stream to the reporter like any other check.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from ..config.loader import ConfigError
from ..config.models import PackageProfile, ReadinessConfig
from ..config.runtime import RuntimeSettings
from ..detect.platform import PackageManager, PackageManagerResolver, detect_os_family
from ..detect.tools import ToolDetector
from ..logger import get_logger
from ..preflight.checker import CheckRunner, RunListener
from ..preflight.checks import build_validation_sections, probe_check, tool_check
from ..preflight.models import Check, Outcome, Report, Section
from ..process import CommandRunner, run_command
from .executor import DirectExecutor, Executor, select_executor
from .provisioner import DependencyProvisioner, ProvisionResult, ProvisionStep

logger = get_logger(__name__)

PREREQUISITES_SECTION = "Prerequisites"
VERIFICATION_SECTION = "Verification"


def project_root_check(config: ReadinessConfig, root: Path) -> Check:
    """Fatal check that setup runs from the project root."""

    def execute() -> Outcome:
        missing = [m for m in config.project_markers if not (root / m).is_file()]
        if missing:
            return Outcome.fail(
                f"This doesn't appear to be the {config.project_name} project root.",
                hint=(
                    f"Please run from the {config.project_name} project directory "
                    f"(missing: {', '.join(missing)})."
                ),
            )
        return Outcome.passed(f"{config.project_name} project root: {root}")

    return Check(
        id="prereq.project-root",
        description="Project root",
        execute=execute,
        fatal=True,
    )


class SetupSession:
    """
    Runs one `setup` invocation.

    resolve() must be called first; it raises UnsupportedPlatform before
    any check or provisioning step has run.
    """

    def __init__(
        self,
        config: ReadinessConfig,
        project_root: Path,
        settings: Optional[RuntimeSettings] = None,
        resolver: Optional[PackageManagerResolver] = None,
        detector: Optional[ToolDetector] = None,
        runner: CommandRunner = run_command,
        system_executor: Optional[Executor] = None,
        user_executor: Optional[Executor] = None,
        os_family: Optional[str] = None,
    ):
        self.config = config
        self.project_root = Path(project_root)
        self.settings = settings or RuntimeSettings()
        self.runner = runner
        self.resolver = resolver or PackageManagerResolver(runner=runner)
        self.detector = detector or ToolDetector(runner=runner, timeout=config.probe_timeout)
        self.os_family = os_family or detect_os_family()

        # Chosen once for the whole session
        self.system_executor = system_executor or select_executor(
            runner, non_interactive=self.settings.ci
        )
        self.provisioner = DependencyProvisioner(
            system_executor=self.system_executor,
            user_executor=user_executor or DirectExecutor(runner),
            runner=runner,
            detector=self.detector,
            ci=self.settings.ci,
            install_timeout=config.install_timeout,
            project_root=self.project_root,
        )
        self.manager: Optional[PackageManager] = None
        self.results: Dict[str, ProvisionResult] = {}

    def resolve(self) -> PackageManager:
        """
        Resolve the package manager for this host.

        Raises:
            UnsupportedPlatform: No candidate manager is available
        """
        self.manager = self.resolver.resolve(self.os_family)
        logger.debug("Resolved package manager: %s", self.manager.name)
        return self.manager

    def profiles(self, names: Iterable[str]) -> List[PackageProfile]:
        """
        Look up profiles by name, base profile first, without duplicates.

        Raises:
            ConfigError: A profile is not defined
        """
        ordered: List[str] = [self.config.base_profile]
        for name in names:
            if name and name not in ordered:
                ordered.append(name)

        profiles = []
        for name in ordered:
            profile = self.config.profile(name)
            if profile is None:
                available = ", ".join(sorted(self.config.profiles))
                raise ConfigError(f"Unknown profile '{name}' (available: {available})")
            profiles.append(profile)
        return profiles

    def build_sections(
        self,
        profiles: Sequence[PackageProfile],
        validate: bool = False,
    ) -> List[Section]:
        """Build every section that runs after resolution."""
        if self.manager is None:
            raise RuntimeError("resolve() must be called before building setup sections")

        sections = [self._prerequisites()]
        for profile in profiles:
            sections.append(self._profile_section(profile))
        sections.extend(self._verification(validate))
        return sections

    def run(
        self,
        profile_names: Iterable[str] = (),
        validate: bool = False,
        listeners: Optional[Iterable[RunListener]] = None,
    ) -> Report:
        """Provision the requested profiles (resolving first if needed)."""
        profiles = self.profiles(profile_names)
        if self.manager is None:
            self.resolve()
        sections = self.build_sections(profiles, validate)
        return CheckRunner(listeners).run(sections)

    # ------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------

    def _prerequisites(self) -> Section:
        section = Section(PREREQUISITES_SECTION)
        section.add(project_root_check(self.config, self.project_root))

        if self.settings.ci:
            section.note = "Skipping interactive prerequisite checks in CI"
            return section

        for index, requirement in enumerate(self.config.prerequisites):
            section.add(tool_check(
                requirement,
                self.detector,
                fatal=True,
                check_id=f"prereq.{index}.{requirement.executable}",
            ))
        return section

    def _profile_section(self, profile: PackageProfile) -> Section:
        result = ProvisionResult(profile=profile.name, manager=self.manager.name)
        self.results[profile.name] = result

        section = Section(f"Profile: {profile.name}", fail_fast=True)
        for step in self.provisioner.steps(self.manager, profile, result):
            section.add(Check(
                id=step.id,
                description=step.description,
                execute=_step_runner(step),
            ))

        if result.skipped_steps:
            section.note = f"Skipping in CI: {', '.join(result.skipped_steps)}"
        elif not section.checks:
            section.note = f"Nothing to provision with {self.manager.name}"
        return section

    def _verification(self, validate: bool) -> List[Section]:
        if validate:
            return build_validation_sections(
                self.config,
                self.project_root,
                self.detector,
                runner=self.runner,
                os_family=self.os_family,
                manager_kind=self.manager.kind,
            )

        if not self.config.verification_probe:
            return []
        probe = self.config.probe(self.config.verification_probe)
        if self.config.verification_hint:
            probe = probe.model_copy(update={"hint": self.config.verification_hint})
        section = Section(VERIFICATION_SECTION)
        section.add(probe_check(probe, self.runner, self.project_root, required=False))
        return [section]


def _step_runner(step: ProvisionStep):
    def execute() -> Outcome:
        return Outcome.passed(step.run())
    return execute
