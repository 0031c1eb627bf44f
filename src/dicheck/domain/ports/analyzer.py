"""Analyzer protocol for DI analyzers.

Users extend dicheck by implementing this Protocol.
Analyzers check the registration graph and procedure traces.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Self

if TYPE_CHECKING:
    from dicheck.domain.model.analysis_context import AnalysisContext
    from dicheck.domain.model.configuration import CheckConfig
    from dicheck.domain.model.diagnostic import Diagnostic
    from dicheck.domain.model.enums import RuleCategory
    from dicheck.domain.model.rule import Rule


class AnalyzerProtocol(Protocol):
    """Contract for analyzers.

    Analyzers are stateless: analyze() is a pure function of the context.

    Key pattern: from_config() returns None if analyzer should be disabled.

    Example:
        class TooManyScopedAnalyzer:
            category = RuleCategory.STYLE
            rules = (Rule.CAPTIVE_DEPENDENCY,)

            def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
                diagnostics: list[Diagnostic] = []
                # ... analysis logic ...
                return tuple(diagnostics)

            @classmethod
            def from_config(cls, config: CheckConfig) -> Self | None:
                return cls() if config.rule_enabled(Rule.CAPTIVE_DEPENDENCY) else None
    """

    category: RuleCategory
    """Rule category for grouping diagnostics."""

    rules: tuple[Rule, ...]
    """Rules this analyzer can report."""

    def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
        """Analyze facts and return diagnostics.

        Args:
            context: Facts, graphs and configuration of this run

        Returns:
            Tuple of diagnostics found (empty if clean)
        """
        ...

    @classmethod
    def from_config(cls, config: CheckConfig) -> Self | None:
        """Create analyzer from config.

        Args:
            config: User configuration

        Returns:
            Analyzer instance if enabled, None if disabled
        """
        ...
