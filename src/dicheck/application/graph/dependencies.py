"""Dependency resolution over the registration graph and type shapes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Self

from dicheck.domain.model.dependency_graph import DependencyEdge, DependencyGraph, DependencyNode
from dicheck.domain.model.registration import FactoryImplementation, TypeImplementation

if TYPE_CHECKING:
    from collections.abc import Mapping

    from dicheck.domain.model.analysis_context import AnalysisContext
    from dicheck.domain.model.registration import Registration
    from dicheck.domain.model.registration_graph import RegistrationGraph
    from dicheck.domain.model.service_identity import ServiceIdentity
    from dicheck.domain.model.type_ref import TypeRef
    from dicheck.domain.model.type_shape import ParameterDependency, TypeShape

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Answers "what does this registration depend on" for any instantiation.

    Stateless apart from the read-only graph and shape index, so one
    instance can be shared by analyzers running on different threads.

    Attributes:
        _registrations: Conflict-resolved registration graph
        _shapes: (name, arity) → implementation shape
    """

    def __init__(
        self,
        registrations: RegistrationGraph,
        shapes: Mapping[tuple[str, int], TypeShape],
    ) -> None:
        """Initialize resolver.

        Args:
            registrations: Registration graph
            shapes: Shape index keyed by generic definition

        Raises:
            TypeError: If any parameter is None (FAIL-FIRST)
        """
        if registrations is None:
            raise TypeError("registrations must not be None")
        if shapes is None:
            raise TypeError("shapes must not be None")

        self._registrations = registrations
        self._shapes = shapes

    @classmethod
    def from_context(cls, context: AnalysisContext) -> Self:
        """Create resolver over the context's graph and shapes."""
        return cls(context.registrations, context.shapes)

    @property
    def registrations(self) -> RegistrationGraph:
        """Registration graph this resolver reads."""
        return self._registrations

    def shape_of(self, registration: Registration) -> TypeShape | None:
        """Shape of a type-form registration's implementation, if known."""
        impl_type = registration.implementation_type
        if impl_type is None:
            return None
        return self._shapes.get(impl_type.definition_key)

    def request(self, identity: ServiceIdentity) -> tuple[Registration, tuple[TypeRef, ...]] | None:
        """Find the registration serving a request and its closing arguments.

        A closed request served by an open-generic registration closes the
        registration over the request's type arguments (IRepo<Order> →
        Repository<T> with T = Order).

        Args:
            identity: Requested service

        Returns:
            (registration, closing arguments) or None if not registered
        """
        registration = self._registrations.lookup(identity)
        if registration is None:
            return None
        if registration.is_open_generic and not identity.is_open_generic:
            return registration, identity.type.arguments
        return registration, ()

    def dependencies_of(
        self,
        registration: Registration,
        arguments: tuple[TypeRef, ...] = (),
    ) -> tuple[ParameterDependency, ...]:
        """Dependencies the container resolves to build a registration.

        Type implementations yield the shape's constructor dependencies
        closed over the closing arguments. Inspectable factories yield their
        resolution calls. Opaque factories, instances and unknown shapes are
        edge-free.

        Args:
            registration: Registration to expand
            arguments: Closing arguments for an open-generic registration

        Returns:
            Dependencies in parameter (or call) order
        """
        match registration.implementation:
            case TypeImplementation(type=impl_type):
                shape = self._shapes.get(impl_type.definition_key)
                if shape is None:
                    return ()
                closing = impl_type.arguments
                if arguments and impl_type.is_generic_definition and impl_type.arity == len(arguments):
                    closing = arguments
                return shape.dependencies_for(closing)
            case FactoryImplementation(calls=calls) if calls is not None:
                return calls
            case _:
                return ()

    def is_opaque(self, registration: Registration) -> bool:
        """True if resolvability treats the registration as a resolved leaf.

        Factories (inspectable or not) and instances are never expanded.
        """
        return not isinstance(registration.implementation, TypeImplementation)


def build_dependency_graph(resolver: DependencyResolver) -> DependencyGraph:
    """Build the dependency graph of all effective registrations.

    Nodes follow registration order; edges follow node then parameter order.
    Open-generic nodes keep their open dependencies (ILogger<T>).

    Args:
        resolver: Resolver over registrations and shapes

    Returns:
        DependencyGraph (pure function of the facts)
    """
    registrations = resolver.registrations
    ordered = sorted(registrations.effective.items(), key=lambda item: item[1].insertion_index)

    nodes: list[DependencyNode] = []
    edges: list[DependencyEdge] = []
    for identity, registration in ordered:
        nodes.append(DependencyNode(service=identity, lifetime=registration.lifetime, location=registration.location))
        edges.extend(
            DependencyEdge(consumer=identity, dependency=dependency)
            for dependency in resolver.dependencies_of(registration)
        )

    logger.debug("Dependency graph: %d nodes, %d edges", len(nodes), len(edges))
    return DependencyGraph(nodes=tuple(nodes), edges=tuple(edges))
