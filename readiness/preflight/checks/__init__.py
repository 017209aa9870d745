"""
Check Implementations

Individual check factories and the batteries built from them.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ...config.models import PathRequirement, ReadinessConfig
from ...detect.platform import ManagerKind
from ...detect.tools import ToolDetector
from ...process import CommandRunner, run_command
from ..models import Section
from .libraries import check_library, install_hint, library_check
from .paths import check_path, path_check
from .probes import probe_check, run_probe
from .tools import check_tool, tool_check

BASIC_SECTION = "Basic Dependencies"
SYSTEM_SECTION = "System Dependencies (Linux)"
BUILD_SECTION = "Build Test"


def build_validation_sections(
    config: ReadinessConfig,
    project_root: Path,
    detector: ToolDetector,
    runner: CommandRunner = run_command,
    os_family: str = "linux",
    manager_kind: Optional[ManagerKind] = None,
) -> List[Section]:
    """
    Build the read-only validate battery.

    Args:
        config: Loaded configuration
        project_root: Directory the path checks and probes run in
        detector: Tool detector
        runner: Command runner for pkg-config and probes
        os_family: Host OS family; system library checks are Linux only
        manager_kind: Package manager used for install hints

    Returns:
        Sections in execution order
    """
    sections: List[Section] = []

    basic = Section(BASIC_SECTION)
    for requirement in config.tools:
        basic.add(tool_check(requirement, detector))
    sections.append(basic)

    sections.extend(_path_sections(config.paths, project_root))

    system = Section(SYSTEM_SECTION)
    if os_family == "linux":
        for requirement in config.system_tools:
            system.add(tool_check(requirement, detector))
        for library in config.libraries:
            system.add(library_check(library, runner, manager_kind, config.probe_timeout))
    else:
        system.note = "Skipping Linux-specific dependency checks (not on Linux)"
    sections.append(system)

    build = Section(BUILD_SECTION)
    for probe in config.probes:
        build.add(probe_check(probe, runner, project_root))
    sections.append(build)

    return sections


def build_desktop_sections(
    config: ReadinessConfig,
    project_root: Path,
    runner: CommandRunner = run_command,
) -> List[Section]:
    """
    Build the desktop app battery: workspace install, builds, essential files.

    Probe sections are fail-fast: a failing probe skips the rest of its
    section.

    Args:
        config: Loaded configuration
        project_root: Directory the probes run in
        runner: Command runner for the probes

    Returns:
        Sections in execution order
    """
    sections: List[Section] = []

    probe_sections: Dict[str, Section] = {}
    for probe in config.desktop_probes:
        if probe.section not in probe_sections:
            probe_sections[probe.section] = Section(probe.section, fail_fast=True)
            sections.append(probe_sections[probe.section])
        probe_sections[probe.section].add(probe_check(probe, runner, project_root))

    sections.extend(_path_sections(config.desktop_paths, project_root))
    return sections


def _path_sections(requirements: Sequence[PathRequirement], project_root: Path) -> List[Section]:
    # Sections keep the order in which they first appear
    by_name: Dict[str, Section] = {}
    for requirement in requirements:
        if requirement.section not in by_name:
            by_name[requirement.section] = Section(requirement.section)
        by_name[requirement.section].add(path_check(requirement, project_root))
    return list(by_name.values())


__all__ = [
    "build_desktop_sections",
    "build_validation_sections",
    "check_library",
    "check_path",
    "check_tool",
    "install_hint",
    "library_check",
    "path_check",
    "probe_check",
    "run_probe",
    "tool_check",
]
