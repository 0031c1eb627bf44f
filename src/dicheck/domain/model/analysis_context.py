"""Read-only inputs shared by all analyzers of one run."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from dicheck.domain.model.configuration import CheckConfig
from dicheck.domain.model.dependency_graph import DependencyGraph
from dicheck.domain.model.registration_graph import RegistrationGraph

if TYPE_CHECKING:
    from collections.abc import Mapping

    from dicheck.domain.model.fact_set import FactSet
    from dicheck.domain.model.type_ref import TypeRef
    from dicheck.domain.model.type_shape import TypeShape
    from dicheck.domain.ports.cancellation import CancellationProtocol


@dataclass(frozen=True, slots=True)
class AnalysisContext:
    """Immutable snapshot handed to every analyzer.

    Attributes:
        facts: Facts of the compilation unit
        config: User configuration
        registrations: Conflict-resolved registration graph
        dependencies: Dependency graph derived from registrations and shapes
        shapes: (name, arity) → shape of the implementation type
        token: Cooperative cancellation signal, None = never cancelled
    """

    facts: FactSet
    config: CheckConfig
    registrations: RegistrationGraph = field(default_factory=RegistrationGraph.empty)
    dependencies: DependencyGraph = field(default_factory=DependencyGraph.empty)
    shapes: Mapping[tuple[str, int], TypeShape] = field(default_factory=dict)
    token: CancellationProtocol | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.facts is None:
            raise TypeError("facts must not be None")
        if not isinstance(self.config, CheckConfig):
            raise TypeError(f"config must be CheckConfig, got {type(self.config).__name__}")
        object.__setattr__(self, "shapes", MappingProxyType(dict(self.shapes)))

    def shape_for(self, type_: TypeRef) -> TypeShape | None:
        """Shape of an implementation type, matched by generic definition."""
        return self.shapes.get(type_.definition_key)

    def checkpoint(self) -> None:
        """Raise AnalysisCancelled if the run was cancelled."""
        if self.token is not None:
            self.token.raise_if_cancelled()
