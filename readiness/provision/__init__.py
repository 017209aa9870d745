"""
Provisioning

Installs missing system dependencies and profile toolchains.
"""

from .executor import DirectExecutor, ElevatedExecutor, Executor, is_privileged, select_executor
from .provisioner import DependencyProvisioner, ProvisionResult, ProvisionStep
from .session import SetupSession

__all__ = [
    "DirectExecutor",
    "ElevatedExecutor",
    "Executor",
    "is_privileged",
    "select_executor",
    "DependencyProvisioner",
    "ProvisionResult",
    "ProvisionStep",
    "SetupSession",
]
