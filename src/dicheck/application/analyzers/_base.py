"""Base analyzer class for DI analyzers.

Provides default implementation of AnalyzerProtocol.
Concrete analyzers inherit from this.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING, Self, TypeAlias

if TYPE_CHECKING:
    from dicheck.domain.model.analysis_context import AnalysisContext
    from dicheck.domain.model.configuration import CheckConfig
    from dicheck.domain.model.diagnostic import Diagnostic
    from dicheck.domain.model.enums import RuleCategory
    from dicheck.domain.model.rule import Rule

WorkUnit: TypeAlias = "Callable[[], tuple[Diagnostic, ...]]"


class BaseAnalyzer(ABC):
    """Base class for analyzers implementing AnalyzerProtocol.

    Concrete analyzers must:
    1. Set `category` and `rules` class attributes
    2. Implement `analyze()` method
    3. Optionally override `work_units()` to split work for the thread pool
    4. Optionally override `from_config()` for conditional activation

    Example:
        class MyAnalyzer(BaseAnalyzer):
            category = RuleCategory.STYLE
            rules = (Rule.DUPLICATE_REGISTRATION,)

            def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
                # ... analysis logic ...
                return tuple(diagnostics)
    """

    category: RuleCategory
    """Rule category for grouping diagnostics."""

    rules: tuple[Rule, ...]
    """Rules this analyzer can report."""

    @property
    def name(self) -> str:
        """Analyzer name for logs."""
        return type(self).__name__

    @abstractmethod
    def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
        """Analyze facts and return diagnostics.

        Args:
            context: Facts, graphs and configuration of this run

        Returns:
            Tuple of diagnostics found (empty if clean)
        """

    def work_units(self, context: AnalysisContext) -> tuple[WorkUnit, ...]:
        """Independent units of work for the engine's thread pool.

        Default: the whole analysis is one unit.
        """
        return (partial(self.analyze, context),)

    @classmethod
    def from_config(cls, config: CheckConfig) -> Self | None:
        """Create analyzer from config.

        Default: enabled while at least one of its rules is enabled.

        Args:
            config: User configuration

        Returns:
            Analyzer instance if enabled, None if disabled
        """
        if not config.any_enabled(*cls.rules):
            return None
        return cls()
