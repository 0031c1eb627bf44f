"""Group strategies for console reporter.

GroupStrategy Protocol defines interface for grouping and rendering diagnostics.
Built-in strategies: ByRuleStrategy, ByFileStrategy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from rich.table import Table

from dicheck.domain.model.enums import Severity

if TYPE_CHECKING:
    from rich.console import Console

    from dicheck.domain.model.diagnostic import Diagnostic
    from dicheck.domain.model.location import Location

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


class GroupStrategy(Protocol):
    """Protocol for diagnostic grouping and rendering."""

    def group(self, diagnostics: tuple[Diagnostic, ...]) -> dict[str, list[Diagnostic]]:
        """Group diagnostics by strategy-specific key.

        Args:
            diagnostics: Diagnostics to group

        Returns:
            Dict mapping group key to list of diagnostics
        """
        ...

    def render(self, console: Console, grouped: dict[str, list[Diagnostic]]) -> None:
        """Render grouped diagnostics to console.

        Args:
            console: Rich console for output
            grouped: Diagnostics grouped by key
        """
        ...


def format_location_short(loc: Location) -> str:
    """Format location as short string: file:line."""
    return f"{loc.file.name or loc.file}:{loc.line}"


def format_severity(severity: Severity) -> str:
    """Severity name wrapped in its rich style."""
    style = SEVERITY_STYLES[severity]
    return f"[{style}]{severity.name}[/{style}]"


@dataclass(frozen=True, slots=True)
class ByRuleStrategy:
    """Group diagnostics by rule id.

    Attributes:
        show_related: Show related locations column
    """

    show_related: bool = True

    def group(self, diagnostics: tuple[Diagnostic, ...]) -> dict[str, list[Diagnostic]]:
        """Group diagnostics by rule id."""
        by_rule: dict[str, list[Diagnostic]] = {}
        for diagnostic in diagnostics:
            by_rule.setdefault(diagnostic.rule.id, []).append(diagnostic)
        return by_rule

    def render(self, console: Console, grouped: dict[str, list[Diagnostic]]) -> None:
        """Render one table per rule, rules in id order."""
        for rule_id in sorted(grouped):
            diagnostics = grouped[rule_id]
            title = diagnostics[0].rule.descriptor.title
            console.print(f"[bold]{rule_id}[/bold] {title} ({len(diagnostics)})")

            table = Table(show_header=True, header_style="bold", box=None)
            table.add_column("Location", style="cyan")
            table.add_column("Severity")
            table.add_column("Message")
            if self.show_related:
                table.add_column("Related", style="dim")

            for diagnostic in diagnostics:
                row = [
                    format_location_short(diagnostic.location),
                    format_severity(diagnostic.severity),
                    diagnostic.message,
                ]
                if self.show_related:
                    related = ", ".join(format_location_short(loc) for loc in diagnostic.related_locations)
                    row.append(related or "-")
                table.add_row(*row)

            console.print(table)
            console.print()


@dataclass(frozen=True, slots=True)
class ByFileStrategy:
    """Group diagnostics by source file."""

    def group(self, diagnostics: tuple[Diagnostic, ...]) -> dict[str, list[Diagnostic]]:
        """Group diagnostics by file path."""
        by_file: dict[str, list[Diagnostic]] = {}
        for diagnostic in diagnostics:
            by_file.setdefault(str(diagnostic.location.file), []).append(diagnostic)
        return by_file

    def render(self, console: Console, grouped: dict[str, list[Diagnostic]]) -> None:
        """Render diagnostics grouped by file."""
        for file_path, diagnostics in sorted(grouped.items()):
            console.print(f"[bold]{file_path}[/bold]")
            table = Table(show_header=False, box=None, padding=(0, 1))
            table.add_column("line", style="dim")
            table.add_column("rule", style="cyan")
            table.add_column("severity")
            table.add_column("message")

            for diagnostic in diagnostics:
                table.add_row(
                    f":{diagnostic.location.line}",
                    diagnostic.rule.id,
                    format_severity(diagnostic.severity),
                    diagnostic.message,
                )

            console.print(table)
            console.print()
