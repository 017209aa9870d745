"""
Unit tests for the console reporter.
"""

from io import StringIO

from rich.console import Console

from readiness.preflight import Check, CheckRunner, Outcome, Reporter, Section


def _run(sections, **kwargs):
    output = StringIO()
    reporter = Reporter(Console(file=output, width=120), **kwargs)
    CheckRunner([reporter]).run(sections)
    return output.getvalue()


def _check(check_id, outcome, **kwargs):
    return Check(id=check_id, description=check_id, execute=lambda: outcome, **kwargs)


class TestReporter:
    """Tests for Reporter output."""

    def test_glyphs_and_sections(self):
        text = _run([Section("Basic Dependencies", [
            _check("a", Outcome.passed("Rust compiler version 1.82.0 (>= 1.81.0 required)")),
            _check("b", Outcome.warn("Git not found", hint="Install git")),
        ])])

        assert "=== Basic Dependencies ===" in text
        assert "✓ Rust compiler version 1.82.0 (>= 1.81.0 required)" in text
        assert "⚠ Git not found" in text
        assert "ℹ Install git" in text

    def test_success_summary(self):
        text = _run(
            [Section("One", [_check("a", Outcome.passed("ok"))])],
            next_steps=["Run 'pnpm tauri dev'"],
        )

        assert "Passed: 1" in text
        assert "Failed: 0" in text
        assert "✓ Environment validation passed!" in text
        assert "1. Run 'pnpm tauri dev'" in text

    def test_warnings_note(self):
        text = _run([Section("One", [_check("a", Outcome.warn("meh"))])])

        assert "There are 1 warnings above" in text

    def test_failure_summary(self):
        text = _run(
            [Section("One", [_check("a", Outcome.fail("Rust compiler not found", hint="Install Rust"))])],
            common_fixes=["Update Rust: rustup update"],
        )

        assert "✗ Rust compiler not found" in text
        assert "✗ Environment validation failed!" in text
        assert "address the 1 failed check(s)" in text
        assert "• Update Rust: rustup update" in text

    def test_section_note_and_announce(self):
        text = _run([
            Section("System Dependencies (Linux)", note="Skipping Linux-specific dependency checks (not on Linux)"),
            Section("Build Test", [_check("p", Outcome.passed("compiles"), announce="Testing Rust core compilation...")]),
        ])

        assert "ℹ Skipping Linux-specific dependency checks" in text
        assert text.index("Testing Rust core compilation...") < text.index("✓ compiles")

    def test_verbose_shows_details_and_skips(self):
        sections = [Section("Deps", [
            _check("node_modules", Outcome.fail("missing", details=("line one",))),
            _check("tauri", Outcome.passed("ok"), depends_on="node_modules"),
        ])]

        quiet = _run(sections)
        loud = _run(sections, verbose=True)

        assert "line one" not in quiet
        assert "line one" in loud
        assert "requires 'node_modules'" in loud
        assert "Skipped: 1" in quiet

    def test_tool_output_is_printed_verbatim(self):
        """Bracketed text in tool output is not treated as markup."""
        sections = [Section("Build Test", [
            _check("probe", Outcome.fail(
                "Rust core compilation failed",
                details=("= note: `#[warn(unused_variables)]` on by default",),
            )),
        ])]

        text = _run(sections, verbose=True)

        assert "`#[warn(unused_variables)]` on by default" in text

    def test_closing_tag_lookalike_does_not_break_run(self):
        failing = _check("base.packages", Outcome.fail(
            "apt failed to install: curl (E: could not open [/var/lib/dpkg/lock])",
            hint="Install [bold]manually[/bold]",
        ))

        text = _run([Section("Profile: base", [failing, _check("after", Outcome.passed("still runs"))])])

        assert "(E: could not open [/var/lib/dpkg/lock])" in text
        assert "Install [bold]manually[/bold]" in text
        assert "✓ still runs" in text

    def test_summary_names_failed_and_warned_checks(self):
        failed = _run([Section("One", [
            Check(id="a", description="Rust compiler", execute=lambda: Outcome.fail("missing")),
        ])])
        warned = _run([Section("One", [
            Check(id="b", description="LLD linker", execute=lambda: Outcome.warn("missing")),
        ])])

        assert "✗ Rust compiler" in failed
        assert "⚠ LLD linker" in warned
