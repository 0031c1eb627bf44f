"""Tests for application/analyzers/resolvability.py."""

from dicheck.application.analyzers import ResolvabilityAnalyzer
from dicheck.domain.model.configuration import CheckConfig
from dicheck.domain.model.enums import Lifetime
from dicheck.domain.model.rule import Rule
from tests.factories import (
    make_context,
    make_dependency,
    make_facts,
    make_factory_registration,
    make_registration,
    make_shape,
)


def _analyze(registrations, shapes, config: CheckConfig | None = None):
    context = make_context(make_facts(tuple(registrations), tuple(shapes)), config)
    return ResolvabilityAnalyzer().analyze(context)


class TestUnresolvedDependency:
    """Tests for missing registrations."""

    def test_direct_missing_dependency(self) -> None:
        diagnostics = _analyze(
            [make_registration("IFoo", "Foo", Lifetime.SCOPED)],
            [make_shape("Foo", capabilities=("IFoo",), dependencies=("IBar",))],
        )

        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.rule is Rule.UNRESOLVABLE_DEPENDENCY
        assert diagnostic.message == "Service 'IFoo' depends on unregistered service 'IBar'"
        assert diagnostic.properties["path"] == "IFoo -> IBar"
        assert diagnostic.related_locations == ()

    def test_transitive_path(self) -> None:
        diagnostics = _analyze(
            [
                make_registration("IA", "A", index=0),
                make_registration("IB", "B", index=1),
            ],
            [
                make_shape("A", capabilities=("IA",), dependencies=("IB",)),
                make_shape("B", capabilities=("IB",), dependencies=("IMissing",)),
            ],
        )

        assert [d.properties["path"] for d in diagnostics] == ["IA -> IB -> IMissing", "IB -> IMissing"]
        assert diagnostics[0].properties["missing"] == "IMissing"
        assert diagnostics[0].related_locations[0].line == 2

    def test_first_missing_in_parameter_order(self) -> None:
        diagnostics = _analyze(
            [make_registration("IFoo", "Foo")],
            [make_shape("Foo", capabilities=("IFoo",), dependencies=("IFirst", "ISecond"))],
        )
        assert len(diagnostics) == 1
        assert diagnostics[0].properties["missing"] == "IFirst"

    def test_closed_request_of_open_registration_expanded(self) -> None:
        diagnostics = _analyze(
            [
                make_registration("IFoo", "Foo", index=0),
                make_registration("IRepo<T>", "Repo<T>", index=1),
            ],
            [
                make_shape("Foo", capabilities=("IFoo",), dependencies=("IRepo<Order>",)),
                make_shape("Repo<T>", capabilities=("IRepo<T>",), dependencies=("IValidator<T>",)),
            ],
        )
        assert diagnostics[0].properties["path"] == "IFoo -> IRepo<Order> -> IValidator<Order>"

    def test_open_root_path_uses_registered_spelling(self) -> None:
        diagnostics = _analyze(
            [make_registration("IRepo<TEntity>", "Repo<TEntity>")],
            [
                make_shape(
                    "Repo<TEntity>",
                    capabilities=("IRepo<TEntity>",),
                    dependencies=("IValidator<TEntity>",),
                )
            ],
        )
        assert [d.properties["path"] for d in diagnostics] == ["IRepo<TEntity> -> IValidator<TEntity>"]
        assert diagnostics[0].properties["service"] == "IRepo<TEntity>"

    def test_enumerable_without_registrations(self) -> None:
        diagnostics = _analyze(
            [make_registration("IHost", "Host")],
            [
                make_shape(
                    "Host",
                    capabilities=("IHost",),
                    dependencies=(make_dependency("IPlugin", enumerable=True),),
                )
            ],
        )
        assert [d.properties["missing"] for d in diagnostics] == ["IPlugin"]


class TestResolvedDependency:
    """Tests for dependencies treated as resolved."""

    def test_cycle_is_not_reported(self) -> None:
        diagnostics = _analyze(
            [make_registration("IA", "A", index=0), make_registration("IB", "B", index=1)],
            [
                make_shape("A", capabilities=("IA",), dependencies=("IB",)),
                make_shape("B", capabilities=("IB",), dependencies=("IA",)),
            ],
        )
        assert diagnostics == ()

    def test_optional_dependency(self) -> None:
        diagnostics = _analyze(
            [make_registration("IFoo", "Foo")],
            [
                make_shape(
                    "Foo",
                    capabilities=("IFoo",),
                    dependencies=(make_dependency("IClock", optional=True),),
                )
            ],
        )
        assert diagnostics == ()

    def test_container_services(self) -> None:
        diagnostics = _analyze(
            [make_registration("IFoo", "Foo")],
            [
                make_shape(
                    "Foo",
                    capabilities=("IFoo",),
                    dependencies=("IServiceProvider", "IServiceScopeFactory"),
                )
            ],
        )
        assert diagnostics == ()

    def test_framework_service_allow_list(self) -> None:
        registrations = [make_registration("IFoo", "Foo")]
        shapes = [make_shape("Foo", capabilities=("IFoo",), dependencies=("ILogger<Foo>",))]

        assert _analyze(registrations, shapes) == ()
        strict = CheckConfig(assume_framework_services_registered=False)
        assert len(_analyze(registrations, shapes, strict)) == 1

    def test_factory_is_leaf(self) -> None:
        diagnostics = _analyze(
            [make_factory_registration("IFoo", calls=(make_dependency("IMissing"),))],
            [],
        )
        assert diagnostics == ()

    def test_depth_bound(self) -> None:
        registrations = [
            make_registration("IA", "A", index=0),
            make_registration("IB", "B", index=1),
            make_registration("IC", "C", index=2),
        ]
        shapes = [
            make_shape("A", capabilities=("IA",), dependencies=("IB",)),
            make_shape("B", capabilities=("IB",), dependencies=("IC",)),
            make_shape("C", capabilities=("IC",), dependencies=("IMissing",)),
        ]
        diagnostics = _analyze(registrations, shapes, CheckConfig(max_resolution_depth=1))
        # only roots close enough to the missing service see it
        assert [d.properties["path"] for d in diagnostics] == ["IB -> IC -> IMissing", "IC -> IMissing"]

    def test_incompatible_root_skipped(self) -> None:
        diagnostics = _analyze(
            [make_registration("IFoo", "Bar")],
            [make_shape("Bar", capabilities=("IBar",), dependencies=("IMissing",))],
        )
        assert diagnostics == ()


class TestIdempotence:
    """Repeated runs give identical results."""

    def test_same_result_twice(self) -> None:
        registrations = [make_registration("IA", "A", index=0), make_registration("IB", "B", index=1)]
        shapes = [
            make_shape("A", capabilities=("IA",), dependencies=("IB", "IX")),
            make_shape("B", capabilities=("IB",), dependencies=("IY",)),
        ]
        assert _analyze(registrations, shapes) == _analyze(registrations, shapes)
