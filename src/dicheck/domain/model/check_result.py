"""Check result aggregate."""

from __future__ import annotations

from dataclasses import dataclass

from dicheck.domain.exceptions.violation import DiagnosticsFoundError
from dicheck.domain.model.check_stats import CheckStats
from dicheck.domain.model.dependency_graph import DependencyGraph
from dicheck.domain.model.diagnostic import Diagnostic
from dicheck.domain.model.enums import Severity
from dicheck.domain.model.rule import Rule


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Result of one check run.

    Immutable aggregate containing all analysis results.
    Used by ReporterProtocol.report() method.

    Attributes:
        diagnostics: All diagnostics, sorted by (file, line, column, rule)
        graph: Dependency graph the analysis ran on
        stats: Analysis statistics
    """

    diagnostics: tuple[Diagnostic, ...]
    graph: DependencyGraph
    stats: CheckStats

    @property
    def passed(self) -> bool:
        """Check if analysis passed (no diagnostics)."""
        return len(self.diagnostics) == 0

    @property
    def diagnostic_count(self) -> int:
        """Number of diagnostics."""
        return len(self.diagnostics)

    @property
    def error_count(self) -> int:
        """Number of ERROR severity diagnostics."""
        return sum(1 for d in self.diagnostics if d.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        """Number of WARNING severity diagnostics."""
        return sum(1 for d in self.diagnostics if d.severity == Severity.WARNING)

    @property
    def info_count(self) -> int:
        """Number of INFO severity diagnostics."""
        return sum(1 for d in self.diagnostics if d.severity == Severity.INFO)

    def by_rule(self, rule: Rule) -> tuple[Diagnostic, ...]:
        """Diagnostics of one rule, in report order."""
        return tuple(d for d in self.diagnostics if d.rule is rule)

    def at_least(self, threshold: Severity) -> tuple[Diagnostic, ...]:
        """Diagnostics as severe as threshold or more."""
        return tuple(d for d in self.diagnostics if d.severity.at_least(threshold))

    def assert_clean(self, threshold: Severity = Severity.INFO) -> None:
        """Raise if any diagnostic reaches the threshold.

        Raises:
            DiagnosticsFoundError: If diagnostics at or above threshold exist
        """
        found = self.at_least(threshold)
        if found:
            raise DiagnosticsFoundError(found)

    @classmethod
    def empty(cls) -> CheckResult:
        """Create empty check result (passed, no diagnostics)."""
        return cls(
            diagnostics=(),
            graph=DependencyGraph.empty(),
            stats=CheckStats.empty(),
        )
