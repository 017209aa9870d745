"""Configuration handling for readiness checks and provisioning."""

from .models import (
    BuildProbe,
    ExtraStep,
    ExtraStepKind,
    LibraryRequirement,
    PackageProfile,
    PathKind,
    PathRequirement,
    ReadinessConfig,
    ToolRequirement,
)
from .loader import ConfigError, ConfigLoader, load_config
from .runtime import RuntimeSettings, is_ci

__all__ = [
    "BuildProbe",
    "ExtraStep",
    "ExtraStepKind",
    "LibraryRequirement",
    "PackageProfile",
    "PathKind",
    "PathRequirement",
    "ReadinessConfig",
    "ToolRequirement",
    "ConfigError",
    "ConfigLoader",
    "load_config",
    "RuntimeSettings",
    "is_ci",
]
