"""
Test doubles for readiness.process.run_command and shutil.which.

FakeRunner and FakeHost stand in for the command runner so no test
touches the real package manager.
"""

from typing import Callable, Dict, Iterable, List, Optional

from readiness.preflight import RunListener
from readiness.process import CommandResult


class FakeRunner:
    """Scripted command runner keyed by the full argv."""

    def __init__(self, responses: Optional[Dict[tuple, object]] = None):
        self.responses = dict(responses or {})
        self.calls: List[List[str]] = []
        self.timeouts: List[float] = []

    def __call__(self, argv, timeout=10.0, cwd=None, env=None) -> CommandResult:
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        self.timeouts.append(timeout)

        response = self.responses.get(tuple(argv), 1)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return CommandResult(argv, 0, stdout=response)
        if isinstance(response, int):
            return CommandResult(argv, response)
        return response


class FakeHost:
    """
    In-memory host with an apt database, rustup targets and cargo tools.

    Install commands mutate the state so repeated provisioning can be
    observed.
    """

    def __init__(
        self,
        packages: Iterable[str] = (),
        targets: Iterable[str] = (),
        crates: Iterable[str] = (),
        fail_install: bool = False,
        permission_error: bool = False,
    ):
        self.packages = set(packages)
        self.targets = set(targets)
        self.crates = set(crates)
        self.fail_install = fail_install
        self.permission_error = permission_error
        self.calls: List[List[str]] = []

    def __call__(self, argv, timeout=10.0, cwd=None, env=None) -> CommandResult:
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        command = argv[1:] if argv[0] == "sudo" else argv

        if command[:3] == ["dpkg-query", "-W", "-f=${Status}"]:
            if command[3] in self.packages:
                return CommandResult(argv, 0, stdout="install ok installed")
            return CommandResult(argv, 1, stderr=f"no packages found matching {command[3]}")

        if command == ["apt-get", "-y", "update"]:
            return CommandResult(argv, 0)

        if command[:3] == ["apt-get", "-y", "install"]:
            if self.permission_error:
                return CommandResult(argv, 100, stderr="E: Could not open lock file - open (13: Permission denied)")
            if self.fail_install:
                return CommandResult(argv, 100, stderr="E: Unable to locate package")
            self.packages.update(command[3:])
            return CommandResult(argv, 0)

        if command == ["rustup", "target", "list", "--installed"]:
            return CommandResult(argv, 0, stdout="\n".join(sorted(self.targets)))

        if command[:3] == ["rustup", "target", "add"]:
            self.targets.update(command[3:])
            return CommandResult(argv, 0)

        if command == ["cargo", "install", "--list"]:
            lines = []
            for crate in sorted(self.crates):
                lines.append(f"{crate} v1.0.0:")
                lines.append(f"    {crate}")
            return CommandResult(argv, 0, stdout="\n".join(lines))

        if command[:2] == ["cargo", "install"]:
            self.crates.update(command[2:])
            return CommandResult(argv, 0)

        return CommandResult(argv, 1)

    def mutating_calls(self) -> List[List[str]]:
        """Commands that install something."""
        mutating = []
        for argv in self.calls:
            command = argv[1:] if argv[0] == "sudo" else argv
            if command[:3] in (["apt-get", "-y", "install"], ["rustup", "target", "add"]):
                mutating.append(argv)
            elif command[:2] == ["cargo", "install"] and command[2:3] != ["--list"]:
                mutating.append(argv)
            elif command == ["apt-get", "-y", "update"]:
                mutating.append(argv)
        return mutating


def which_from(*names: str) -> Callable[[str], Optional[str]]:
    """A shutil.which replacement that knows only the given executables."""
    present = set(names)
    return lambda name: f"/usr/bin/{name}" if name in present else None


class RecordingListener(RunListener):
    """Records every run event in arrival order."""

    def __init__(self, runner=None):
        self.events = []
        self.runner = runner

    def section_started(self, section):
        self.events.append(("section", section.name))

    def check_started(self, check):
        state = self.runner.state if self.runner else None
        self.events.append(("start", check.id, state))

    def check_finished(self, check, outcome):
        self.events.append(("finish", check.id, outcome.status))

    def check_skipped(self, check, reason):
        self.events.append(("skip", check.id))

    def run_finished(self, report):
        self.events.append(("done",))
