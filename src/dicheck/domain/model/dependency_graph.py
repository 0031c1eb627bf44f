"""Dependency graph: effective registrations and their substituted dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dicheck.domain.model.enums import Lifetime
from dicheck.domain.model.location import Location
from dicheck.domain.model.service_identity import ServiceIdentity
from dicheck.domain.model.type_ref import TypeRef
from dicheck.domain.model.type_shape import ParameterDependency

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True)
class DependencyNode:
    """Graph node: one effective registration.

    Attributes:
        service: Registered service identity
        lifetime: Registration lifetime
        location: Registration call site
    """

    service: ServiceIdentity
    lifetime: Lifetime
    location: Location


@dataclass(frozen=True, slots=True)
class DependencyEdge:
    """Directed edge consumer → dependency.

    Attributes:
        consumer: Consuming service identity
        dependency: Required parameter, substituted by the closing arguments
    """

    consumer: ServiceIdentity
    dependency: ParameterDependency


@dataclass(frozen=True, slots=True)
class DependencyGraph:
    """Derived dependency graph. Not stored between runs.

    Invariants (FAIL-FIRST):
    - node services are unique
    - every edge consumer is a node

    Attributes:
        nodes: Nodes in registration order
        edges: Edges in registration then parameter order
    """

    nodes: tuple[DependencyNode, ...] = ()
    edges: tuple[DependencyEdge, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        services = [node.service for node in self.nodes]
        if len(set(services)) != len(services):
            raise ValueError("dependency graph nodes must have unique services")
        known = frozenset(services)
        for edge in self.edges:
            if edge.consumer not in known:
                raise ValueError(f"edge consumer '{edge.consumer}' is not a node")

    @classmethod
    def empty(cls) -> DependencyGraph:
        """Create empty graph."""
        return cls()

    @property
    def node_count(self) -> int:
        """Number of nodes."""
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        """Number of edges."""
        return len(self.edges)

    def edges_from(self, consumer: ServiceIdentity) -> Iterator[DependencyEdge]:
        """Outgoing edges of a consumer, in parameter order."""
        return (edge for edge in self.edges if edge.consumer == consumer)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "nodes": [
                {
                    "service": _identity_to_dict(node.service),
                    "lifetime": node.lifetime.word,
                    "location": _location_to_dict(node.location),
                }
                for node in self.nodes
            ],
            "edges": [
                {
                    "consumer": _identity_to_dict(edge.consumer),
                    "dependency": _identity_to_dict(edge.dependency.required),
                    "enumerable": edge.dependency.is_enumerable,
                    "optional": edge.dependency.has_default_or_optional,
                    "name": edge.dependency.name,
                }
                for edge in self.edges
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DependencyGraph:
        """Rebuild a graph serialized by to_dict().

        Raises:
            KeyError: If a required key is missing
            ValueError: If a value fails model validation
        """
        nodes = tuple(
            DependencyNode(
                service=_identity_from_dict(item["service"]),
                lifetime=Lifetime.parse(item["lifetime"]),
                location=_location_from_dict(item["location"]),
            )
            for item in data["nodes"]
        )
        edges = tuple(
            DependencyEdge(
                consumer=_identity_from_dict(item["consumer"]),
                dependency=ParameterDependency(
                    required=_identity_from_dict(item["dependency"]),
                    is_enumerable=bool(item.get("enumerable", False)),
                    has_default_or_optional=bool(item.get("optional", False)),
                    name=item.get("name"),
                ),
            )
            for item in data["edges"]
        )
        return cls(nodes=nodes, edges=edges)


def _type_to_dict(type_: TypeRef) -> dict[str, Any]:
    result: dict[str, Any] = {"name": type_.name}
    if type_.arguments:
        result["arguments"] = [_type_to_dict(arg) for arg in type_.arguments]
    if type_.is_parameter:
        result["parameter"] = True
    return result


def _type_from_dict(data: dict[str, Any]) -> TypeRef:
    return TypeRef(
        name=data["name"],
        arguments=tuple(_type_from_dict(arg) for arg in data.get("arguments", ())),
        is_parameter=bool(data.get("parameter", False)),
    )


def _identity_to_dict(identity: ServiceIdentity) -> dict[str, Any]:
    result: dict[str, Any] = {"type": _type_to_dict(identity.type)}
    if identity.is_keyed:
        result["key"] = identity.key
    return result


def _identity_from_dict(data: dict[str, Any]) -> ServiceIdentity:
    type_ = _type_from_dict(data["type"])
    if "key" in data:
        return ServiceIdentity.keyed(type_, data["key"])
    return ServiceIdentity(type=type_)


def _location_to_dict(location: Location) -> dict[str, Any]:
    result: dict[str, Any] = {"file": str(location.file), "line": location.line, "column": location.column}
    if location.end_line is not None:
        result["end_line"] = location.end_line
    if location.end_column is not None:
        result["end_column"] = location.end_column
    return result


def _location_from_dict(data: dict[str, Any]) -> Location:
    return Location(
        file=Path(data["file"]),
        line=int(data["line"]),
        column=int(data.get("column", 0)),
        end_line=data.get("end_line"),
        end_column=data.get("end_column"),
    )
