"""
Command-line interface for readiness.

Provides commands for validating a development environment, provisioning
missing dependencies and inspecting the detected platform.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from . import __version__
from .config import ConfigError, ConfigLoader, ReadinessConfig, RuntimeSettings
from .detect import (
    CANDIDATES,
    ManagerKind,
    PackageManagerResolver,
    ToolDetector,
    detect_os_family,
)
from .errors import UnsupportedPlatform
from .logger import set_level
from .preflight import CheckRunner, Reporter
from .preflight.checks import build_desktop_sections, build_validation_sections
from .provision import SetupSession, is_privileged

console = Console()

EXIT_UNSUPPORTED = 2


def _load_config(config: Optional[str], root: str) -> ReadinessConfig:
    """Load configuration or exit with an error."""
    try:
        return ConfigLoader(config, root).load()
    except ConfigError as e:
        console.print(f"[red]Error loading configuration: {escape(str(e))}[/red]")
        sys.exit(1)


def _print_title(title: str) -> None:
    console.print(f"[bold blue]{escape(title)}[/bold blue]")
    console.print("=" * len(title))


def _root_option(func):
    return click.option(
        "--root",
        "-r",
        type=click.Path(exists=True, file_okay=False),
        default=".",
        help="Project root directory",
    )(func)


def _config_option(func):
    return click.option(
        "--config",
        "-c",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="Configuration file (or set READINESS_CONFIG)",
    )(func)


# ============================================================
# Main CLI Group
# ============================================================

@click.group()
@click.version_option(version=__version__, prog_name="readiness")
@click.option("--verbose", "-v", is_flag=True, help="Trace every external command")
@click.pass_context
def cli(ctx, verbose: bool):
    """
    Development Environment Readiness

    Checks toolchains and libraries, installs missing system dependencies
    and reports what is left to fix.
    """
    settings = RuntimeSettings.from_env(verbose=verbose)
    if settings.trace:
        set_level(logging.DEBUG)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# ============================================================
# VALIDATE Command
# ============================================================

@cli.command()
@_root_option
@_config_option
@click.option("--strict", is_flag=True, help="Exit non-zero on warnings")
@click.option("--desktop", is_flag=True, help="Validate that the desktop app installs, type-checks and builds")
@click.pass_context
def validate(ctx, root: str, config: Optional[str], strict: bool, desktop: bool):
    """
    Run environment checks.

    The default battery is read-only. With --desktop, the desktop app
    battery runs instead: it installs workspace dependencies and builds.
    """
    settings: RuntimeSettings = ctx.obj["settings"]
    cfg = _load_config(config, root)
    project_root = Path(root).resolve()

    if desktop:
        _print_title(f"{cfg.project_name} Desktop App Validation")
        sections = build_desktop_sections(cfg, project_root)
        reporter = Reporter(
            console,
            success_message="Desktop app validation passed!",
            failure_message="Desktop app validation failed!",
            common_fixes=cfg.common_fixes,
            verbose=settings.trace,
        )
    else:
        _print_title(f"{cfg.project_name} Development Environment Validation")

        os_family = detect_os_family()
        manager_kind = None
        if os_family == "linux" and cfg.libraries:
            # Only used to phrase install hints
            manager = PackageManagerResolver(timeout=cfg.probe_timeout).find(os_family)
            manager_kind = manager.kind if manager else None

        sections = build_validation_sections(
            cfg,
            project_root,
            ToolDetector(timeout=cfg.probe_timeout),
            os_family=os_family,
            manager_kind=manager_kind,
        )
        reporter = Reporter(
            console,
            success_message="Environment validation passed!",
            failure_message="Environment validation failed!",
            next_steps=cfg.next_steps,
            common_fixes=cfg.common_fixes,
            verbose=settings.trace,
        )

    report = CheckRunner([reporter]).run(sections)

    code = report.exit_code(strict=strict)
    if code:
        sys.exit(code)


# ============================================================
# SETUP Command
# ============================================================

@cli.command()
@click.argument("profile", required=False)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.option("--workspace", "-w", is_flag=True, help="Also install Node.js dependencies and prepare the build")
@click.option("--validate", "run_validation", is_flag=True, help="Run the full validation afterwards")
@_root_option
@_config_option
@click.pass_context
def setup(
    ctx,
    profile: Optional[str],
    yes: bool,
    workspace: bool,
    run_validation: bool,
    root: str,
    config: Optional[str],
):
    """
    Install missing system dependencies.

    Provisions the base profile and, when given, PROFILE (e.g. android).
    """
    settings: RuntimeSettings = ctx.obj["settings"]
    settings.assume_yes = yes
    cfg = _load_config(config, root)

    names: List[str] = [profile] if profile else []
    if workspace:
        names.append("workspace")

    session = SetupSession(cfg, Path(root).resolve(), settings)
    try:
        profiles = session.profiles(names)
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    _print_title(f"{cfg.project_name} Development Environment Setup")

    try:
        manager = session.resolve()
    except UnsupportedPlatform as e:
        console.print(f"[red]✗ {escape(e.message)}.[/red]")
        if e.hint:
            console.print(f"[red]{escape(e.hint)}[/red]")
        sys.exit(EXIT_UNSUPPORTED)

    console.print(f"[blue]Detected {session.os_family} system[/blue]")
    console.print(f"[blue]Detected {manager.name} package manager[/blue]")
    if session.system_executor.elevated:
        console.print("[dim]Package installation will run through sudo[/dim]")

    if settings.interactive:
        console.print(Panel.fit(
            "\n".join(f"• [cyan]{escape(p.name)}[/cyan]: {escape(p.description)}" for p in profiles),
            title="Profiles to provision",
        ))
        if not Confirm.ask("Continue?", default=True):
            console.print("[red]Aborted.[/red]")
            sys.exit(1)

    reporter = Reporter(
        console,
        success_message=f"{cfg.project_name} development environment setup complete!",
        failure_message="Setup failed.",
        next_steps=cfg.setup_next_steps,
        common_fixes=[
            "Install the packages named above manually, then re-run setup",
            "Re-run with --verbose to see every command",
        ],
        verbose=settings.trace,
    )
    report = session.run(names, validate=run_validation, listeners=[reporter])

    for selected in profiles:
        if selected.notes and report.passed:
            console.print(f"\n[bold]{escape(selected.name.capitalize())} development setup:[/bold]")
            for note in selected.notes:
                console.print(f"  • {escape(note)}", highlight=False)

    code = report.exit_code()
    if code:
        sys.exit(code)


# ============================================================
# PROFILES Command
# ============================================================

@cli.command("profiles")
@_root_option
@_config_option
def list_profiles(root: str, config: Optional[str]):
    """List provisioning profiles."""
    cfg = _load_config(config, root)

    table = Table(title="Provisioning Profiles")
    table.add_column("Profile", style="cyan")
    table.add_column("Description")
    for kind in ManagerKind:
        if kind != ManagerKind.UNSUPPORTED:
            table.add_column(kind.value, justify="right")
    table.add_column("Extra Steps", justify="right")

    for name, item in cfg.profiles.items():
        counts = [
            str(len(item.packages_for(kind)))
            for kind in ManagerKind
            if kind != ManagerKind.UNSUPPORTED
        ]
        label = f"{name} (base)" if name == cfg.base_profile else name
        table.add_row(escape(label), escape(item.description), *counts, str(len(item.extra_steps)))

    console.print(table)


# ============================================================
# DETECT-MANAGER Command
# ============================================================

@cli.command("detect-manager")
def detect_manager():
    """Show the detected OS family and package manager."""
    os_family = detect_os_family()
    resolver = PackageManagerResolver()
    manager = resolver.find(os_family)

    table = Table(title="Platform Detection")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    candidates = [kind.value for kind in CANDIDATES.get(os_family, [])]
    table.add_row("OS Family", os_family)
    table.add_row("Candidates", ", ".join(candidates) or "None")
    table.add_row("Package Manager", manager.name if manager else ManagerKind.UNSUPPORTED.value)
    table.add_row("Privileges", "root (direct)" if is_privileged() else "user (sudo)")

    console.print(table)

    if manager is None:
        console.print("\n[yellow]No supported package manager found; setup is unavailable.[/yellow]")


# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    cli()
