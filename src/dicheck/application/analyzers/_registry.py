"""Analyzer registry.

Central registry of all analyzers with factory functions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dicheck.application.analyzers._base import BaseAnalyzer
from dicheck.application.analyzers.captive import CaptiveDependencyAnalyzer
from dicheck.application.analyzers.compatibility import ImplementationCompatibilityAnalyzer
from dicheck.application.analyzers.disposable_transient import DisposableTransientAnalyzer
from dicheck.application.analyzers.registration_conflicts import RegistrationConflictAnalyzer
from dicheck.application.analyzers.resolvability import ResolvabilityAnalyzer
from dicheck.application.analyzers.scope_lifecycle import ScopeLifecycleAnalyzer
from dicheck.application.analyzers.static_cache import StaticProviderCacheAnalyzer

if TYPE_CHECKING:
    from dicheck.domain.model.configuration import CheckConfig


# Registry - tuple for immutability
# Order matters: work units are submitted in this order
_ALL_ANALYZERS: tuple[type[BaseAnalyzer], ...] = (
    RegistrationConflictAnalyzer,  # graph builder output
    ImplementationCompatibilityAnalyzer,
    CaptiveDependencyAnalyzer,
    ResolvabilityAnalyzer,
    DisposableTransientAnalyzer,
    ScopeLifecycleAnalyzer,  # one unit per procedure
    StaticProviderCacheAnalyzer,
)


def default_analyzers() -> tuple[BaseAnalyzer, ...]:
    """Instantiate every analyzer.

    Returns:
        Tuple of all analyzers
    """
    return tuple(analyzer_cls() for analyzer_cls in _ALL_ANALYZERS)


def analyzers_from_config(config: CheckConfig) -> tuple[BaseAnalyzer, ...]:
    """Instantiate analyzers based on config.

    Analyzers are created using their from_config() factory method.
    If from_config() returns None, the analyzer is disabled.

    Args:
        config: User configuration

    Returns:
        Tuple of enabled analyzers
    """
    analyzers: list[BaseAnalyzer] = []

    for analyzer_cls in _ALL_ANALYZERS:
        analyzer = analyzer_cls.from_config(config)
        if analyzer is not None:
            analyzers.append(analyzer)

    return tuple(analyzers)
