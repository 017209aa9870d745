"""
Runtime Settings

Settings read from the process environment.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

CI_ENV_VAR = "CI"
_TRUTHY = {"1", "true", "yes", "on"}


def is_ci(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True when running under a CI system."""
    environ = os.environ if environ is None else environ
    return environ.get(CI_ENV_VAR, "").strip().lower() in _TRUTHY


@dataclass
class RuntimeSettings:
    """
    Environment-derived behavior.

    Under CI prompts are suppressed, every command is traced and steps
    marked skip_in_ci are not run.
    """
    ci: bool = False
    verbose: bool = False
    assume_yes: bool = False

    @property
    def interactive(self) -> bool:
        return not (self.ci or self.assume_yes)

    @property
    def trace(self) -> bool:
        return self.ci or self.verbose

    @classmethod
    def from_env(
        cls,
        verbose: bool = False,
        assume_yes: bool = False,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "RuntimeSettings":
        return cls(ci=is_ci(environ), verbose=verbose, assume_yes=assume_yes)
