"""Service identity value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from dicheck.domain.model.type_ref import TypeRef

ServiceKey: TypeAlias = "str | int | bool | None"


@dataclass(frozen=True, slots=True)
class ServiceIdentity:
    """Identifies a registered service.

    Either a closed type reference, an open-generic type definition, or a
    keyed variant of either. Equality is structural, so IRepo<T> (open) and
    IRepo<Order> (closed) are distinct identities, as are keyed and
    non-keyed variants of the same type.

    Attributes:
        type: Service type reference
        key: Service key (keyed registrations only, may be None)
        is_keyed: True for keyed registrations
    """

    type: TypeRef
    key: ServiceKey = None
    is_keyed: bool = False

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.type is None:
            raise TypeError("type must not be None")
        if self.key is not None and not self.is_keyed:
            raise ValueError("key requires is_keyed=True")

    @classmethod
    def of(cls, name: str, *arguments: TypeRef) -> ServiceIdentity:
        """Shortcut for a non-keyed identity."""
        return cls(type=TypeRef(name=name, arguments=arguments))

    @classmethod
    def keyed(cls, type_: TypeRef, key: ServiceKey) -> ServiceIdentity:
        """Shortcut for a keyed identity."""
        return cls(type=type_, key=key, is_keyed=True)

    @property
    def is_open_generic(self) -> bool:
        """True if the service type contains unbound parameters."""
        return self.type.is_open

    @property
    def name(self) -> str:
        """Simple display name of the service type."""
        return self.type.display()

    def with_type(self, type_: TypeRef) -> ServiceIdentity:
        """Same key, different type."""
        return ServiceIdentity(type=type_, key=self.key, is_keyed=self.is_keyed)

    def open_definition(self) -> ServiceIdentity | None:
        """Open-generic identity for a closed generic, None otherwise.

        IRepo<Order> → IRepo<T0>. Parameter names are positional (T0, T1, ...)
        and must match the names the graph builder normalizes to.
        """
        if not self.type.arguments or self.type.is_generic_definition:
            return None
        params = tuple(TypeRef.parameter(f"T{i}") for i in range(self.type.arity))
        return self.with_type(self.type.with_arguments(params))

    def normalized(self) -> ServiceIdentity:
        """Rename parameters of an open definition positionally (T0, T1, ...).

        Makes IRepo<T> and IRepo<TEntity> the same identity.
        """
        if not self.type.is_generic_definition:
            return self
        params = tuple(TypeRef.parameter(f"T{i}") for i in range(self.type.arity))
        return self.with_type(self.type.with_arguments(params))

    def display(self) -> str:
        """Format for messages: IFoo or IFoo (key: primary)."""
        if not self.is_keyed:
            return self.name
        return f"{self.name} (key: {self.key if self.key is not None else 'null'})"

    def __str__(self) -> str:
        """Same as display()."""
        return self.display()
