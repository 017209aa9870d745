"""
Check Models

Shared data types for readiness checks: the check definition, its
tri-state outcome and the per-run report accumulator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple


class CheckStatus(str, Enum):
    """Tri-state result of one check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class OverallStatus(str, Enum):
    """Aggregate status of a run."""
    PASS = "pass"
    PASS_WITH_WARNINGS = "pass_with_warnings"
    FAIL = "fail"


@dataclass(frozen=True)
class Outcome:
    """Result of a single check."""
    status: CheckStatus
    message: str
    hint: Optional[str] = None
    details: Tuple[str, ...] = ()

    @classmethod
    def passed(cls, message: str, details: Tuple[str, ...] = ()) -> "Outcome":
        return cls(CheckStatus.PASS, message, details=tuple(details))

    @classmethod
    def warn(cls, message: str, hint: Optional[str] = None, details: Tuple[str, ...] = ()) -> "Outcome":
        return cls(CheckStatus.WARN, message, hint, tuple(details))

    @classmethod
    def fail(cls, message: str, hint: Optional[str] = None, details: Tuple[str, ...] = ()) -> "Outcome":
        return cls(CheckStatus.FAIL, message, hint, tuple(details))

    @property
    def ok(self) -> bool:
        return self.status == CheckStatus.PASS

    def as_warning(self) -> "Outcome":
        """Downgrade a failure to a warning (used for optional checks)."""
        if self.status != CheckStatus.FAIL:
            return self
        return Outcome(CheckStatus.WARN, self.message, self.hint, self.details)

    def __str__(self) -> str:
        return f"[{self.status.value.upper()}] {self.message}"


@dataclass
class Check:
    """
    A single named check.

    Attributes:
        id: Unique identifier, referenced by depends_on
        description: Human readable name
        execute: Callable producing the Outcome
        required: Failures of optional checks are reported as warnings
        section: Name of the section the check belongs to
        fatal: A failure aborts the whole run
        depends_on: Skip unless this earlier check passed
        announce: Message shown before a slow check starts
    """
    id: str
    description: str
    execute: Callable[[], Outcome]
    required: bool = True
    section: str = ""
    fatal: bool = False
    depends_on: Optional[str] = None
    announce: Optional[str] = None


@dataclass
class Section:
    """An ordered group of checks."""
    name: str
    checks: List[Check] = field(default_factory=list)
    fail_fast: bool = False
    note: Optional[str] = None

    def add(self, check: Check) -> Check:
        check.section = self.name
        self.checks.append(check)
        return check


@dataclass
class Report:
    """Accumulates the outcomes of one run."""
    outcomes: List[Tuple[Check, Outcome]] = field(default_factory=list)
    skipped: List[Check] = field(default_factory=list)
    aborted: bool = False

    def record(self, check: Check, outcome: Outcome) -> None:
        self.outcomes.append((check, outcome))

    def skip(self, check: Check) -> None:
        self.skipped.append(check)

    def outcome_of(self, check_id: str) -> Optional[Outcome]:
        for check, outcome in self.outcomes:
            if check.id == check_id:
                return outcome
        return None

    def _count(self, status: CheckStatus) -> int:
        return len([o for _, o in self.outcomes if o.status == status])

    @property
    def pass_count(self) -> int:
        return self._count(CheckStatus.PASS)

    @property
    def fail_count(self) -> int:
        return self._count(CheckStatus.FAIL)

    @property
    def warn_count(self) -> int:
        return self._count(CheckStatus.WARN)

    @property
    def failures(self) -> List[Tuple[Check, Outcome]]:
        return [(c, o) for c, o in self.outcomes if o.status == CheckStatus.FAIL]

    @property
    def warnings(self) -> List[Tuple[Check, Outcome]]:
        return [(c, o) for c, o in self.outcomes if o.status == CheckStatus.WARN]

    @property
    def overall_status(self) -> OverallStatus:
        """FAIL if a required check failed, else warnings, else PASS."""
        if any(c.required and o.status == CheckStatus.FAIL for c, o in self.outcomes):
            return OverallStatus.FAIL
        if any(o.status == CheckStatus.WARN for _, o in self.outcomes):
            return OverallStatus.PASS_WITH_WARNINGS
        return OverallStatus.PASS

    @property
    def passed(self) -> bool:
        return self.overall_status != OverallStatus.FAIL

    def exit_code(self, strict: bool = False) -> int:
        """0 for a passing run, 1 for a failing one (or warnings when strict)."""
        status = self.overall_status
        if status == OverallStatus.FAIL:
            return 1
        if strict and status == OverallStatus.PASS_WITH_WARNINGS:
            return 1
        return 0

    def summary(self) -> str:
        """Get summary string."""
        status = self.overall_status
        if status == OverallStatus.FAIL:
            label = "FAILED"
        elif status == OverallStatus.PASS_WITH_WARNINGS:
            label = "PASSED with warnings"
        else:
            label = "PASSED"
        return (
            f"{label}: {self.pass_count} passed, {self.fail_count} failed, "
            f"{self.warn_count} warnings"
        )
