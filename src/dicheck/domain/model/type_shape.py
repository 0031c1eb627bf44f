"""Type shape and constructor dependency value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dicheck.domain.model.service_identity import ServiceIdentity
from dicheck.domain.model.type_ref import TypeRef

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class ParameterDependency:
    """One constructor parameter (or factory resolution) of an implementation.

    Attributes:
        required: Service identity the parameter needs. For enumerable
            parameters this is the element service T of IEnumerable<T>.
        is_enumerable: IEnumerable<T>-shaped parameter (multi-registration)
        has_default_or_optional: Parameter has a default value or is optional
        name: Parameter name, for messages
    """

    required: ServiceIdentity
    is_enumerable: bool = False
    has_default_or_optional: bool = False
    name: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.required is None:
            raise TypeError("required must not be None")

    def substitute(self, mapping: Mapping[str, TypeRef]) -> ParameterDependency:
        """Close generic parameters of the required type."""
        if not mapping:
            return self
        return ParameterDependency(
            required=self.required.with_type(self.required.type.substitute(mapping)),
            is_enumerable=self.is_enumerable,
            has_default_or_optional=self.has_default_or_optional,
            name=self.name,
        )

    def display(self) -> str:
        """Format for messages: IEnumerable<IFoo> for enumerable parameters."""
        if self.is_enumerable:
            return f"IEnumerable<{self.required.display()}>"
        return self.required.display()


@dataclass(frozen=True, slots=True)
class TypeShape:
    """Structural description of an implementation type.

    Type parameters in capabilities and dependencies use the names declared
    in identity.arguments (Repository<T> → capabilities {IRepository<T>}).

    Attributes:
        identity: Implementation type (generic definition for generic types)
        capabilities: Implemented interfaces and base chain, closed over
            generic substitution. The identity itself is always a capability.
        constructor_dependencies: Parameters of the activated constructor,
            in declaration order
        is_disposable: Implements IDisposable
        is_async_disposable: Implements IAsyncDisposable
    """

    identity: TypeRef
    capabilities: frozenset[TypeRef] = field(default_factory=frozenset)
    constructor_dependencies: tuple[ParameterDependency, ...] = ()
    is_disposable: bool = False
    is_async_disposable: bool = False

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.identity is None:
            raise TypeError("identity must not be None")
        if self.identity.is_open and not self.identity.is_generic_definition:
            raise ValueError(f"shape identity '{self.identity}' must be closed or a generic definition")

    @property
    def definition_key(self) -> tuple[str, int]:
        """Lookup key shared by all instantiations of this type."""
        return self.identity.definition_key

    @property
    def disposal_interface(self) -> str | None:
        """IDisposable / IAsyncDisposable name, None if not disposable."""
        if self.is_disposable:
            return "IDisposable"
        if self.is_async_disposable:
            return "IAsyncDisposable"
        return None

    def closing_map(self, arguments: tuple[TypeRef, ...]) -> dict[str, TypeRef]:
        """Map this shape's parameters positionally onto closing arguments.

        Returns an empty mapping if the shape is not a generic definition or
        the arity does not match.
        """
        if not self.identity.is_generic_definition:
            return {}
        if len(arguments) != self.identity.arity:
            return {}
        return {param.name: arg for param, arg in zip(self.identity.arguments, arguments, strict=True)}

    def has_capability(self, service: TypeRef) -> bool:
        """True if service is the identity or one of the capabilities."""
        return service == self.identity or service in self.capabilities

    def dependencies_for(self, arguments: tuple[TypeRef, ...]) -> tuple[ParameterDependency, ...]:
        """Constructor dependencies closed over the given type arguments."""
        mapping = self.closing_map(arguments)
        return tuple(dep.substitute(mapping) for dep in self.constructor_dependencies)
