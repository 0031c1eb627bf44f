"""DI analyzers.

Each analyzer checks one defect family and reports Diagnostics.
"""

from dicheck.application.analyzers._base import BaseAnalyzer, WorkUnit
from dicheck.application.analyzers._registry import analyzers_from_config, default_analyzers
from dicheck.application.analyzers.captive import CaptiveDependencyAnalyzer
from dicheck.application.analyzers.compatibility import (
    ImplementationCompatibilityAnalyzer,
    implementation_satisfies,
)
from dicheck.application.analyzers.disposable_transient import DisposableTransientAnalyzer
from dicheck.application.analyzers.registration_conflicts import RegistrationConflictAnalyzer
from dicheck.application.analyzers.resolvability import ResolvabilityAnalyzer, UnresolvedPath
from dicheck.application.analyzers.scope_lifecycle import ScopeLifecycleAnalyzer, analyze_trace
from dicheck.application.analyzers.static_cache import StaticProviderCacheAnalyzer

__all__ = [
    # Base
    "BaseAnalyzer",
    "WorkUnit",
    # Registry
    "default_analyzers",
    "analyzers_from_config",
    # Analyzers
    "RegistrationConflictAnalyzer",
    "ImplementationCompatibilityAnalyzer",
    "CaptiveDependencyAnalyzer",
    "ResolvabilityAnalyzer",
    "DisposableTransientAnalyzer",
    "ScopeLifecycleAnalyzer",
    "StaticProviderCacheAnalyzer",
    # Helpers
    "implementation_satisfies",
    "analyze_trace",
    "UnresolvedPath",
]
