"""
Check Runner

Executes sections of checks strictly in declared order and streams every
outcome to listeners as soon as it is known.
"""

from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from ..errors import ReadinessError
from ..logger import get_logger
from .models import Check, CheckStatus, Outcome, Report, Section

logger = get_logger(__name__)


class RunnerState(str, Enum):
    """Lifecycle of a CheckRunner."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"


class RunListener:
    """Receives progress from a CheckRunner. All hooks are optional."""

    def section_started(self, section: Section) -> None:
        pass

    def check_started(self, check: Check) -> None:
        pass

    def check_finished(self, check: Check, outcome: Outcome) -> None:
        pass

    def check_skipped(self, check: Check, reason: str) -> None:
        pass

    def run_finished(self, report: Report) -> None:
        pass


class CheckRunner:
    """
    Orchestrates a battery of checks.

    Checks never run concurrently. A failing check is recorded once and
    the run moves on, except that:
    - a failing fatal check aborts the run
    - a failure inside a fail_fast section skips the rest of that section
    - a check whose depends_on check did not pass is skipped
    """

    def __init__(self, listeners: Optional[Iterable[RunListener]] = None):
        """
        Initialize the runner.

        Args:
            listeners: Objects notified as the run progresses
        """
        self.listeners: List[RunListener] = list(listeners or [])
        self.state = RunnerState.NOT_STARTED
        self.position: Optional[Tuple[int, int]] = None

    def run(self, sections: Sequence[Section]) -> Report:
        """
        Run all sections.

        Args:
            sections: Sections in execution order

        Returns:
            Report with every recorded outcome
        """
        report = Report()
        self.state = RunnerState.RUNNING

        for section_index, section in enumerate(sections):
            if report.aborted:
                for check in section.checks:
                    report.skip(check)
                continue

            self._notify("section_started", section)
            halted_by: Optional[Check] = None

            for check_index, check in enumerate(section.checks):
                self.position = (section_index, check_index)

                if report.aborted:
                    report.skip(check)
                    continue

                if halted_by is not None:
                    self._skip(report, check, f"skipped after '{halted_by.description}' failed")
                    continue

                if check.depends_on:
                    dependency = report.outcome_of(check.depends_on)
                    if dependency is None or not dependency.ok:
                        self._skip(report, check, f"requires '{check.depends_on}'")
                        continue

                self._notify("check_started", check)
                outcome = self._execute(check)
                report.record(check, outcome)
                self._notify("check_finished", check, outcome)

                if outcome.status == CheckStatus.FAIL:
                    if check.fatal:
                        logger.debug("Fatal check %s failed, aborting run", check.id)
                        report.aborted = True
                    elif section.fail_fast:
                        halted_by = check

        self.state = RunnerState.COMPLETED
        self.position = None
        self._notify("run_finished", report)
        return report

    def _execute(self, check: Check) -> Outcome:
        """Run one check, turning any error into an outcome."""
        logger.debug("Running check %s", check.id)
        try:
            outcome = check.execute()
        except ReadinessError as e:
            outcome = Outcome.fail(e.message, hint=e.hint)
        except Exception as e:
            logger.debug("Check %s raised", check.id, exc_info=True)
            outcome = Outcome.fail(f"{check.description}: unexpected error: {e}")

        if not check.required:
            outcome = outcome.as_warning()
        return outcome

    def _skip(self, report: Report, check: Check, reason: str) -> None:
        report.skip(check)
        self._notify("check_skipped", check, reason)

    def _notify(self, hook: str, *args) -> None:
        for listener in self.listeners:
            getattr(listener, hook)(*args)
