"""Check statistics for analysis results."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CheckStats:
    """Statistics from one check run.

    Immutable value object tracking analysis metrics.

    Attributes:
        registrations_analyzed: Number of registration facts
        services_resolved: Number of effective registrations (graph nodes)
        edges_analyzed: Number of dependency graph edges
        procedures_analyzed: Number of procedure traces analyzed
        procedures_skipped: Number of traces skipped on integrity errors
        analyzers_run: Number of analyzers executed
        analysis_time_ms: Total analysis time in milliseconds
    """

    registrations_analyzed: int
    services_resolved: int
    edges_analyzed: int
    procedures_analyzed: int
    procedures_skipped: int
    analyzers_run: int
    analysis_time_ms: float

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.registrations_analyzed < 0:
            raise ValueError(f"registrations_analyzed must be >= 0, got {self.registrations_analyzed}")
        if self.services_resolved < 0:
            raise ValueError(f"services_resolved must be >= 0, got {self.services_resolved}")
        if self.edges_analyzed < 0:
            raise ValueError(f"edges_analyzed must be >= 0, got {self.edges_analyzed}")
        if self.procedures_analyzed < 0:
            raise ValueError(f"procedures_analyzed must be >= 0, got {self.procedures_analyzed}")
        if self.procedures_skipped < 0:
            raise ValueError(f"procedures_skipped must be >= 0, got {self.procedures_skipped}")
        if self.analyzers_run < 0:
            raise ValueError(f"analyzers_run must be >= 0, got {self.analyzers_run}")
        if self.analysis_time_ms < 0:
            raise ValueError(f"analysis_time_ms must be >= 0, got {self.analysis_time_ms}")

    @classmethod
    def empty(cls) -> "CheckStats":
        """Create empty check stats."""
        return cls(
            registrations_analyzed=0,
            services_resolved=0,
            edges_analyzed=0,
            procedures_analyzed=0,
            procedures_skipped=0,
            analyzers_run=0,
            analysis_time_ms=0.0,
        )
