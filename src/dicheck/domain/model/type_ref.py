"""Type reference value object with generic substitution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


@dataclass(frozen=True, slots=True)
class TypeRef:
    """Reference to a (possibly generic) type.

    A reference is *open* when its argument tree contains a type parameter:
    TypeRef("IRepository", (TypeRef("T", is_parameter=True),)) is the open
    definition IRepository<T>; TypeRef("IRepository", (TypeRef("Order"),)) is
    a closed instantiation.

    Attributes:
        name: Type name, optionally namespace-qualified ("Ns.IFoo")
        arguments: Generic type arguments in declaration order
        is_parameter: True for an unbound type parameter ("T")
    """

    name: str
    arguments: tuple[TypeRef, ...] = ()
    is_parameter: bool = False

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.name:
            raise ValueError("name must not be empty")
        if self.is_parameter and self.arguments:
            raise ValueError(f"type parameter '{self.name}' cannot have arguments")

    @classmethod
    def parameter(cls, name: str) -> TypeRef:
        """Create an unbound type parameter reference."""
        return cls(name=name, is_parameter=True)

    @property
    def arity(self) -> int:
        """Number of generic arguments."""
        return len(self.arguments)

    @property
    def definition_key(self) -> tuple[str, int]:
        """Generic definition key: (name, arity). Same for IRepo<T> and IRepo<Order>."""
        return (self.name, self.arity)

    @property
    def simple_name(self) -> str:
        """Name without namespace qualification."""
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_open(self) -> bool:
        """True if any type parameter occurs in this reference."""
        if self.is_parameter:
            return True
        return any(arg.is_open for arg in self.arguments)

    @property
    def is_generic_definition(self) -> bool:
        """True if every argument is a bare type parameter (IRepo<T>, IMap<K, V>)."""
        return bool(self.arguments) and all(arg.is_parameter for arg in self.arguments)

    def parameters(self) -> Iterator[str]:
        """Yield parameter names in depth-first order."""
        if self.is_parameter:
            yield self.name
            return
        for arg in self.arguments:
            yield from arg.parameters()

    def substitute(self, mapping: Mapping[str, TypeRef]) -> TypeRef:
        """Replace type parameters by name.

        Parameters absent from mapping are left unbound.

        Args:
            mapping: Parameter name → replacement type

        Returns:
            New reference (self if nothing changed)
        """
        if not mapping:
            return self
        if self.is_parameter:
            return mapping.get(self.name, self)
        if not self.arguments:
            return self
        return TypeRef(
            name=self.name,
            arguments=tuple(arg.substitute(mapping) for arg in self.arguments),
        )

    def with_arguments(self, arguments: tuple[TypeRef, ...]) -> TypeRef:
        """Same definition closed over different arguments."""
        return TypeRef(name=self.name, arguments=arguments)

    def display(self, *, qualified: bool = False) -> str:
        """Format as C#-like text: IRepository<Order>."""
        base = self.name if qualified else self.simple_name
        if not self.arguments:
            return base
        inner = ", ".join(arg.display(qualified=qualified) for arg in self.arguments)
        return f"{base}<{inner}>"

    def __str__(self) -> str:
        """Format with simple names."""
        return self.display()
