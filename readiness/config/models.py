"""
Pydantic models for configuration validation.

These models define the schema for tool requirements, project paths,
system libraries, build probes and provisioning profiles.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..detect.platform import ManagerKind
from ..detect.version import parse_version


# ============================================================
# Validation Battery
# ============================================================

class ToolRequirement(BaseModel):
    """An executable that should be installed, optionally at a minimum version."""

    executable: str = Field(..., description="Executable name on PATH")
    label: Optional[str] = Field(None, description="Human readable name")
    min_version: Optional[str] = Field(None, description="Minimum dotted version")
    required: bool = Field(default=True, description="Missing optional tools only warn")
    version_args: List[str] = Field(default_factory=lambda: ["--version"])
    version_pattern: Optional[str] = Field(None, description="Regex extracting the version")
    hint: Optional[str] = Field(None, description="Remediation shown on failure")

    @field_validator("min_version")
    @classmethod
    def validate_min_version(cls, v: Optional[str]) -> Optional[str]:
        """Reject minimums that are not numeric versions."""
        if v is not None:
            parse_version(v)
        return v

    @property
    def name(self) -> str:
        return self.label or self.executable

    @property
    def check_id(self) -> str:
        return f"tool.{self.executable}"


class PathKind(str, Enum):
    """Kinds of filesystem entries."""
    FILE = "file"
    DIRECTORY = "directory"


class PathRequirement(BaseModel):
    """A file or directory that should exist under the project root."""

    path: str
    kind: PathKind = PathKind.FILE
    label: Optional[str] = None
    section: str = "Project Structure"
    required: bool = True
    hint: Optional[str] = None
    depends_on: Optional[str] = Field(None, description="Path that must exist first")
    missing_message: Optional[str] = Field(None, description="Message when the path is absent")
    found_message: Optional[str] = Field(None, description="Message when the path exists")

    @property
    def name(self) -> str:
        return self.label or self.path

    @property
    def check_id(self) -> str:
        return f"path.{self.path}"


class LibraryRequirement(BaseModel):
    """A development library detected through pkg-config."""

    module: str = Field(..., description="pkg-config module name")
    label: str
    packages: Dict[ManagerKind, str] = Field(default_factory=dict)
    required: bool = False

    @property
    def check_id(self) -> str:
        return f"library.{self.module}"


class BuildProbe(BaseModel):
    """A command that must exit successfully within a timeout."""

    id: str
    command: List[str]
    label: str
    timeout: float = Field(default=30.0, gt=0)
    section: str = "Build Test"
    required: bool = True
    announce: Optional[str] = None
    success_message: Optional[str] = None
    failure_message: Optional[str] = None
    hint: Optional[str] = None

    @property
    def check_id(self) -> str:
        return f"probe.{self.id}"


# ============================================================
# Provisioning
# ============================================================

class ExtraStepKind(str, Enum):
    """Provisioning work beyond system packages."""
    REQUIRE_TOOL = "require_tool"
    TOOLCHAIN_TARGETS = "toolchain_targets"
    CARGO_INSTALL = "cargo_install"
    COMMAND = "command"


class ExtraStep(BaseModel):
    """One extra provisioning step of a profile."""

    kind: ExtraStepKind
    description: Optional[str] = None
    tool: Optional[str] = Field(None, description="Tool required or used by the step")
    alternatives: List[str] = Field(default_factory=list, description="Acceptable substitutes for tool")
    min_version: Optional[str] = None
    purpose: Optional[str] = Field(None, description="Why the tool is required")
    targets: List[str] = Field(default_factory=list)
    crates: List[str] = Field(default_factory=list)
    command: List[str] = Field(default_factory=list)
    hint: Optional[str] = None
    skip_in_ci: bool = False
    timeout: Optional[float] = Field(None, gt=0)

    @field_validator("min_version")
    @classmethod
    def validate_min_version(cls, v: Optional[str]) -> Optional[str]:
        """Reject minimums that are not numeric versions."""
        if v is not None:
            parse_version(v)
        return v

    @model_validator(mode="after")
    def _check_fields(self) -> "ExtraStep":
        if self.kind == ExtraStepKind.REQUIRE_TOOL and not self.tool:
            raise ValueError("require_tool step needs 'tool'")
        if self.kind == ExtraStepKind.TOOLCHAIN_TARGETS and not self.targets:
            raise ValueError("toolchain_targets step needs 'targets'")
        if self.kind == ExtraStepKind.CARGO_INSTALL and not self.crates:
            raise ValueError("cargo_install step needs 'crates'")
        if self.kind == ExtraStepKind.COMMAND and not self.command:
            raise ValueError("command step needs 'command'")
        return self

    @property
    def title(self) -> str:
        if self.description:
            return self.description
        if self.kind == ExtraStepKind.REQUIRE_TOOL:
            return f"Require {self.tool}"
        if self.kind == ExtraStepKind.TOOLCHAIN_TARGETS:
            return f"Add {self.tool or 'rustup'} targets"
        if self.kind == ExtraStepKind.CARGO_INSTALL:
            return f"Install cargo tools: {', '.join(self.crates)}"
        return f"Run {' '.join(self.command)}"


class PackageProfile(BaseModel):
    """A named bundle of packages and provisioning steps."""

    name: str
    description: str = ""
    packages: Dict[ManagerKind, List[str]] = Field(default_factory=dict)
    groups: Dict[ManagerKind, List[str]] = Field(
        default_factory=dict,
        description="Alternative package groups; the first that installs wins",
    )
    extra_steps: List[ExtraStep] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list, description="Follow-up shown after setup")

    def packages_for(self, kind: ManagerKind) -> List[str]:
        return list(self.packages.get(kind, []))

    def groups_for(self, kind: ManagerKind) -> List[str]:
        return list(self.groups.get(kind, []))


# ============================================================
# Root Configuration
# ============================================================

class ReadinessConfig(BaseModel):
    """Complete configuration for validate and setup."""

    project_name: str = "project"
    project_markers: List[str] = Field(default_factory=list)
    tools: List[ToolRequirement] = Field(default_factory=list)
    system_tools: List[ToolRequirement] = Field(default_factory=list)
    paths: List[PathRequirement] = Field(default_factory=list)
    libraries: List[LibraryRequirement] = Field(default_factory=list)
    probes: List[BuildProbe] = Field(default_factory=list)
    desktop_probes: List[BuildProbe] = Field(default_factory=list)
    desktop_paths: List[PathRequirement] = Field(default_factory=list)
    prerequisites: List[ToolRequirement] = Field(default_factory=list)
    profiles: Dict[str, PackageProfile] = Field(default_factory=dict)
    base_profile: str = "base"
    verification_probe: Optional[str] = None
    verification_hint: Optional[str] = Field(None, description="Hint shown when setup verification fails")
    probe_timeout: float = Field(default=10.0, gt=0)
    install_timeout: float = Field(default=1800.0, gt=0)
    next_steps: List[str] = Field(default_factory=list)
    common_fixes: List[str] = Field(default_factory=list)
    setup_next_steps: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _name_profiles(cls, data: Any) -> Any:
        """Profiles are keyed by name; fill in the name field from the key."""
        if isinstance(data, dict) and isinstance(data.get("profiles"), dict):
            profiles = {}
            for key, profile in data["profiles"].items():
                if isinstance(profile, dict):
                    profile = {"name": key, **profile}
                profiles[key] = profile
            data = {**data, "profiles": profiles}
        return data

    @model_validator(mode="after")
    def _check_references(self) -> "ReadinessConfig":
        if self.profiles and self.base_profile not in self.profiles:
            raise ValueError(f"base_profile '{self.base_profile}' is not a defined profile")
        probe_ids = {p.id for p in self.probes}
        if self.verification_probe and self.verification_probe not in probe_ids:
            raise ValueError(f"verification_probe '{self.verification_probe}' is not a defined probe")
        return self

    def profile(self, name: str) -> Optional[PackageProfile]:
        return self.profiles.get(name)

    def probe(self, probe_id: str) -> Optional[BuildProbe]:
        for probe in self.probes:
            if probe.id == probe_id:
                return probe
        return None
