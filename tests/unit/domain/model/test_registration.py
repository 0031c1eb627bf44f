"""Tests for domain/model/registration.py and type_shape.py."""

import pytest

from dicheck.domain.model.enums import Lifetime
from dicheck.domain.model.registration import FactoryImplementation, Registration, TypeImplementation
from dicheck.domain.model.type_ref import TypeRef
from dicheck.domain.model.type_shape import TypeShape
from tests.factories import (
    make_dependency,
    make_factory_registration,
    make_identity,
    make_location,
    make_registration,
    make_shape,
)


class TestRegistration:
    """Tests for Registration."""

    def test_negative_index_raises(self) -> None:
        with pytest.raises(ValueError, match="insertion_index"):
            Registration(
                service=make_identity("IFoo"),
                implementation=TypeImplementation(TypeRef("Foo")),
                lifetime=Lifetime.SCOPED,
                location=make_location(),
                insertion_index=-1,
            )

    def test_lifetime_must_be_enum(self) -> None:
        with pytest.raises(TypeError, match="lifetime"):
            Registration(
                service=make_identity("IFoo"),
                implementation=TypeImplementation(TypeRef("Foo")),
                lifetime="scoped",  # type: ignore[arg-type]
                location=make_location(),
                insertion_index=0,
            )

    def test_self_registration(self) -> None:
        assert make_registration("Foo").is_self_registration
        assert not make_registration("IFoo", "Foo").is_self_registration

    def test_implementation_type_of_factory_is_none(self) -> None:
        assert make_factory_registration("IFoo").implementation_type is None

    def test_opaque_factory(self) -> None:
        assert FactoryImplementation().is_opaque
        assert not FactoryImplementation(calls=()).is_opaque

    def test_describe_uses_default_method(self) -> None:
        registration = make_registration("IFoo", "Foo", Lifetime.SCOPED, line=7)
        assert registration.describe().startswith("AddScoped(IFoo) at ")


class TestLifetime:
    """Tests for Lifetime ordering."""

    def test_singleton_outlives_scoped(self) -> None:
        assert Lifetime.SINGLETON.outlives(Lifetime.SCOPED)
        assert Lifetime.SCOPED.outlives(Lifetime.TRANSIENT)
        assert not Lifetime.SCOPED.outlives(Lifetime.SCOPED)

    def test_parse_case_insensitive(self) -> None:
        assert Lifetime.parse(" Scoped ") is Lifetime.SCOPED

    def test_parse_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="unknown lifetime"):
            Lifetime.parse("forever")


class TestTypeShape:
    """Tests for TypeShape."""

    def test_partially_open_identity_raises(self) -> None:
        identity = TypeRef("Repo", (TypeRef("List", (TypeRef.parameter("T"),)),))
        with pytest.raises(ValueError, match="generic definition"):
            TypeShape(identity=identity)

    def test_dependencies_closed_over_arguments(self) -> None:
        shape = make_shape("Repository<T>", dependencies=("ILogger<T>", "IDbContext"))
        deps = shape.dependencies_for((TypeRef("Order"),))
        assert deps[0].required == make_identity("ILogger<Order>")
        assert deps[1].required == make_identity("IDbContext")

    def test_closing_map_arity_mismatch_is_empty(self) -> None:
        shape = make_shape("Repository<T>")
        assert shape.closing_map((TypeRef("A"), TypeRef("B"))) == {}

    def test_identity_is_capability(self) -> None:
        shape = make_shape("Foo", capabilities=("IFoo",))
        assert shape.has_capability(TypeRef("Foo"))
        assert shape.has_capability(TypeRef("IFoo"))
        assert not shape.has_capability(TypeRef("IBar"))

    def test_disposal_interface(self) -> None:
        assert make_shape("A", disposable=True).disposal_interface == "IDisposable"
        assert make_shape("B", async_disposable=True).disposal_interface == "IAsyncDisposable"
        assert make_shape("C").disposal_interface is None

    def test_enumerable_dependency_display(self) -> None:
        assert make_dependency("IPlugin", enumerable=True).display() == "IEnumerable<IPlugin>"
