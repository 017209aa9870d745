"""
Build Probes

Commands such as a compile check that must succeed within a timeout.
"""

from pathlib import Path
from typing import Optional

from ...config.models import BuildProbe
from ...errors import ProbeTimeout
from ...process import CommandRunner
from ..models import Check, Outcome

OUTPUT_TAIL_LINES = 5


def run_probe(probe: BuildProbe, runner: CommandRunner, root: Optional[Path] = None) -> Outcome:
    """Run a probe command; a timeout becomes a failed outcome."""
    try:
        result = runner(probe.command, timeout=probe.timeout, cwd=root)
    except ProbeTimeout:
        return Outcome.fail(
            f"{probe.label} timed out after {probe.timeout:g}s",
            hint=probe.hint,
        )

    if result.ok:
        return Outcome.passed(probe.success_message or f"{probe.label} succeeded")

    tail = [line for line in result.output.splitlines() if line.strip()][-OUTPUT_TAIL_LINES:]
    return Outcome.fail(
        probe.failure_message or f"{probe.label} failed (exit {result.returncode})",
        hint=probe.hint,
        details=tuple(tail),
    )


def probe_check(
    probe: BuildProbe,
    runner: CommandRunner,
    root: Optional[Path] = None,
    required: Optional[bool] = None,
) -> Check:
    """Wrap a build probe as a Check."""
    return Check(
        id=probe.check_id,
        description=probe.label,
        execute=lambda: run_probe(probe, runner, root),
        required=probe.required if required is None else required,
        announce=probe.announce,
    )
