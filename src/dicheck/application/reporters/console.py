"""Console reporter: CheckResult → rich formatted output."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from io import StringIO
from typing import TYPE_CHECKING, TextIO

from rich.console import Console

from dicheck.application.reporters._base import BaseReporter
from dicheck.application.reporters.strategies import ByRuleStrategy, GroupStrategy

if TYPE_CHECKING:
    from dicheck.domain.model.check_result import CheckResult
    from dicheck.domain.model.diagnostic import Diagnostic
    from dicheck.domain.model.enums import Severity


@dataclass(frozen=True, slots=True)
class ConsoleConfig:
    """Configuration for console reporter.

    All fields have defaults.

    Attributes:
        max_diagnostics: Max diagnostics to display. None = unlimited.
        group_by: Strategy for grouping diagnostics. None = ByRuleStrategy().
        min_severity: Hide diagnostics less severe than this. None = show all.
        width: Console width in columns.
    """

    max_diagnostics: int | None = None
    group_by: GroupStrategy | None = None
    min_severity: Severity | None = None
    width: int = 120

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.max_diagnostics is not None and self.max_diagnostics < 0:
            raise ValueError(f"max_diagnostics must be >= 0, got {self.max_diagnostics}")
        if self.width < 40:
            raise ValueError(f"width must be >= 40, got {self.width}")


class ConsoleReporter(BaseReporter):
    """Console reporter: outputs rich formatted text.

    render() returns the text; report() writes it to the output stream.
    """

    def __init__(self, config: ConsoleConfig | None = None, output: TextIO | None = None) -> None:
        """Initialize reporter.

        Args:
            config: Reporter configuration. Uses defaults if None.
            output: Output stream for report() (default: sys.stdout)
        """
        self._config = config or ConsoleConfig()
        self._output = output if output is not None else sys.stdout

    def report(self, result: CheckResult) -> None:
        """Write rendered result to the output stream."""
        self._output.write(self.render(result))

    def render(self, result: CheckResult) -> str:
        """Format check result as rich formatted string.

        Args:
            result: Check result to format

        Returns:
            Formatted string with colors and tables
        """
        output = StringIO()
        console = Console(file=output, force_terminal=True, width=self._config.width)

        diagnostics = self._filter(result.diagnostics)

        self._render_header(console, result)
        if diagnostics:
            strategy = self._config.group_by or ByRuleStrategy()
            strategy.render(console, strategy.group(diagnostics))
        self._render_footer(console, result, shown=len(diagnostics))

        return output.getvalue()

    def _filter(self, diagnostics: tuple[Diagnostic, ...]) -> tuple[Diagnostic, ...]:
        """Apply severity and count limits from config."""
        selected = diagnostics
        if self._config.min_severity is not None:
            threshold = self._config.min_severity
            selected = tuple(d for d in selected if d.severity.at_least(threshold))
        if self._config.max_diagnostics is not None:
            selected = selected[: self._config.max_diagnostics]
        return selected

    def _render_header(self, console: Console, result: CheckResult) -> None:
        """Render header with summary."""
        console.print()
        console.rule("[bold]DI CHECK RESULT[/bold]")
        console.print()

        stats = result.stats
        console.print(
            f"[bold]Services:[/bold] {stats.services_resolved}  "
            f"[bold]Edges:[/bold] {stats.edges_analyzed}  "
            f"[bold]Procedures:[/bold] {stats.procedures_analyzed}"
        )
        console.print(
            f"[bold]Diagnostics:[/bold] {result.diagnostic_count} "
            f"([bold red]{result.error_count} errors[/bold red], "
            f"[yellow]{result.warning_count} warnings[/yellow], "
            f"[blue]{result.info_count} info[/blue])"
        )
        if stats.procedures_skipped:
            console.print(f"[dim]Skipped procedures: {stats.procedures_skipped}[/dim]")
        console.print()

    def _render_footer(self, console: Console, result: CheckResult, shown: int) -> None:
        """Render pass/fail line."""
        hidden = result.diagnostic_count - shown
        if hidden:
            console.print(f"[dim]{hidden} diagnostic(s) hidden by console settings[/dim]")
        if result.passed:
            console.print("[bold green]PASSED[/bold green]")
        else:
            console.print("[bold red]FAILED[/bold red]")
