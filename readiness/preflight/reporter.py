"""
Console Reporter

Prints check outcomes as they arrive, grouped by section, and closes the
run with a summary and remediation guidance.

Messages, hints and details may quote tool output, so they are escaped
before they reach rich markup.
"""

from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .checker import RunListener
from .models import Check, CheckStatus, OverallStatus, Outcome, Report, Section

GLYPHS = {
    CheckStatus.PASS: "[green]✓[/green]",
    CheckStatus.FAIL: "[red]✗[/red]",
    CheckStatus.WARN: "[yellow]⚠[/yellow]",
}
INFO = "[blue]ℹ[/blue]"


class Reporter(RunListener):
    """
    Streams a run to the console.

    Args:
        console: Rich console for output
        success_message: Printed when the run passes
        failure_message: Printed when the run fails
        next_steps: Numbered steps shown after a passing run
        common_fixes: Bullets shown after a failing run
        verbose: Also print outcome details and skipped checks
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        success_message: str = "Environment validation passed!",
        failure_message: str = "Environment validation failed!",
        next_steps: Sequence[str] = (),
        common_fixes: Sequence[str] = (),
        verbose: bool = False,
    ):
        self.console = console or Console()
        self.success_message = success_message
        self.failure_message = failure_message
        self.next_steps: List[str] = list(next_steps)
        self.common_fixes: List[str] = list(common_fixes)
        self.verbose = verbose

    def section_started(self, section: Section) -> None:
        self.console.print(f"\n[bold blue]=== {escape(section.name)} ===[/bold blue]")
        if section.note:
            self.console.print(f"{INFO} {escape(section.note)}")

    def check_started(self, check: Check) -> None:
        if check.announce:
            self.console.print(f"{INFO} {escape(check.announce)}")

    def check_finished(self, check: Check, outcome: Outcome) -> None:
        self.console.print(f"{GLYPHS[outcome.status]} {escape(outcome.message)}", highlight=False)
        if outcome.hint and outcome.status != CheckStatus.PASS:
            self.console.print(f"  {INFO} {escape(outcome.hint)}", highlight=False)
        if self.verbose:
            for line in outcome.details:
                self.console.print(f"    [dim]{escape(line)}[/dim]", highlight=False)

    def check_skipped(self, check: Check, reason: str) -> None:
        if self.verbose:
            self.console.print(
                f"[dim]○ {escape(check.description)} ({escape(reason)})[/dim]",
                highlight=False,
            )

    def run_finished(self, report: Report) -> None:
        self.print_summary(report)

    def print_summary(self, report: Report) -> None:
        """Print counts and guidance for a finished run."""
        self.console.print("\n[bold blue]=== Summary ===[/bold blue]")
        self.console.print("\nResults:")
        self.console.print(f"  [green]Passed: {report.pass_count}[/green]")
        self.console.print(f"  [red]Failed: {report.fail_count}[/red]")
        self.console.print(f"  [yellow]Warnings: {report.warn_count}[/yellow]")
        if report.skipped:
            self.console.print(f"  [dim]Skipped: {len(report.skipped)}[/dim]")

        status = report.overall_status
        if status == OverallStatus.FAIL:
            self.console.print(f"\n[red]✗ {escape(self.failure_message)}[/red]")
            if report.aborted:
                self.console.print("[red]The run stopped at a fatal check.[/red]")
            self.console.print(
                f"Please address the {report.fail_count} failed check(s) above before proceeding:"
            )
            for check, _ in report.failures:
                self.console.print(f"  [red]✗[/red] {escape(check.description)}", highlight=False)
            if self.common_fixes:
                self.console.print("\nCommon fixes:")
                for fix in self.common_fixes:
                    self.console.print(f"  • {escape(fix)}", highlight=False)
            return

        self.console.print(f"\n[green]✓ {escape(self.success_message)}[/green]")
        if status == OverallStatus.PASS_WITH_WARNINGS:
            self.console.print(
                f"\n[yellow]Note: There are {report.warn_count} warnings above.[/yellow]"
            )
            self.console.print(
                "These are optional dependencies that may improve your development experience:"
            )
            for check, _ in report.warnings:
                self.console.print(f"  [yellow]⚠[/yellow] {escape(check.description)}", highlight=False)
        if self.next_steps:
            self.console.print("\nNext steps:")
            for number, step in enumerate(self.next_steps, start=1):
                self.console.print(f"  {number}. {escape(step)}", highlight=False)
