"""Service registration entity and its implementation variants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from dicheck.domain.model.enums import Lifetime
from dicheck.domain.model.location import Location
from dicheck.domain.model.service_identity import ServiceIdentity

if TYPE_CHECKING:
    from dicheck.domain.model.type_ref import TypeRef
    from dicheck.domain.model.type_shape import ParameterDependency


@dataclass(frozen=True, slots=True)
class TypeImplementation:
    """Implementation given as a type: closed type or open-generic definition.

    Attributes:
        type: Implementation type (Repository<T> for open generics)
        explicit_types: True for the typeof(Service), typeof(Impl) form, which
            the host compiler does not type-check
    """

    type: TypeRef
    explicit_types: bool = True

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.type is None:
            raise TypeError("type must not be None")


@dataclass(frozen=True, slots=True)
class FactoryImplementation:
    """Implementation given as a factory expression.

    Attributes:
        calls: Resolutions the factory body performs, in source order.
            None = the body cannot be inspected statically (opaque factory).
    """

    calls: tuple[ParameterDependency, ...] | None = None

    @property
    def is_opaque(self) -> bool:
        """True if the factory body is not statically inspectable."""
        return self.calls is None


@dataclass(frozen=True, slots=True)
class InstanceImplementation:
    """Implementation given as a pre-built instance.

    Attributes:
        type: Static type of the instance, if known
    """

    type: TypeRef | None = None


Implementation: TypeAlias = "TypeImplementation | FactoryImplementation | InstanceImplementation"


@dataclass(frozen=True, slots=True)
class Registration:
    """One service registration from the composition root.

    Immutable: lifetime is fixed once recorded.

    Attributes:
        service: Service identity being registered
        implementation: How the container builds the service
        lifetime: Service lifetime
        location: Registration call site
        insertion_index: Declaration order in the composition root (authoritative)
        is_conditional: True for TryAdd*-style registrations
        method: Registration method name, for messages ("AddSingleton")
    """

    service: ServiceIdentity
    implementation: Implementation
    lifetime: Lifetime
    location: Location
    insertion_index: int
    is_conditional: bool = False
    method: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.service is None:
            raise TypeError("service must not be None")
        if self.implementation is None:
            raise TypeError("implementation must not be None")
        if not isinstance(self.lifetime, Lifetime):
            raise TypeError(f"lifetime must be Lifetime, got {type(self.lifetime).__name__}")
        if self.location is None:
            raise TypeError("location must not be None")
        if self.insertion_index < 0:
            raise ValueError(f"insertion_index must be >= 0, got {self.insertion_index}")

    @property
    def implementation_type(self) -> TypeRef | None:
        """Implementation type for type-form registrations, else None."""
        match self.implementation:
            case TypeImplementation(type=impl_type):
                return impl_type
            case _:
                return None

    @property
    def is_self_registration(self) -> bool:
        """True for AddSingleton<Foo>()-style registrations (impl == service)."""
        impl_type = self.implementation_type
        return impl_type is not None and impl_type == self.service.type

    @property
    def is_open_generic(self) -> bool:
        """True if the service is an open-generic definition."""
        return self.service.is_open_generic

    @property
    def consumer_name(self) -> str:
        """Name used in messages for this registration as a consumer."""
        return self.service.display()

    def describe(self) -> str:
        """Short description: AddScoped(IFoo) at file:line:col."""
        method = self.method or f"Add{self.lifetime.name.title()}"
        return f"{method}({self.service.display()}) at {self.location}"
