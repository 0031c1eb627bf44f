"""Tests for domain/model/registration_graph.py."""

import pytest

from dicheck.application.graph import build_registration_graph
from dicheck.domain.model.enums import Lifetime
from dicheck.domain.model.registration_graph import RegistrationConflict, RegistrationGraph
from dicheck.domain.model.rule import Rule
from tests.factories import make_identity, make_registration


class TestRegistrationGraphInvariants:
    """Tests for FAIL-FIRST validation."""

    def test_empty(self) -> None:
        graph = RegistrationGraph.empty()
        assert len(graph) == 0
        assert graph.lookup(make_identity("IFoo")) is None

    def test_effective_must_be_active(self) -> None:
        a = make_registration("IFoo", "A", index=0)
        b = make_registration("IFoo", "B", index=1)
        identity = make_identity("IFoo")
        with pytest.raises(ValueError, match="must be active"):
            RegistrationGraph(groups={identity: (a, b)}, active={identity: (a,)}, effective={identity: b})

    def test_conflict_rule_restricted(self) -> None:
        a = make_registration("IFoo", "A", index=0)
        b = make_registration("IFoo", "B", index=1)
        with pytest.raises(ValueError, match="conflict rule"):
            RegistrationConflict(registration=a, blocker=b, rule=Rule.CAPTIVE_DEPENDENCY)

    def test_mappings_are_read_only(self) -> None:
        graph = build_registration_graph([make_registration("IFoo", "Foo")])
        with pytest.raises(TypeError):
            graph.effective[make_identity("IBar")] = make_registration("IBar")  # type: ignore[index]


class TestRegistrationGraphLookup:
    """Tests for lookup() and lookup_all()."""

    def test_closed_request_falls_back_to_open(self) -> None:
        open_reg = make_registration("IRepo<T>", "Repo<T>", Lifetime.SCOPED)
        graph = build_registration_graph([open_reg])
        assert graph.lookup(make_identity("IRepo<Order>")) is open_reg

    def test_closed_registration_preferred(self) -> None:
        open_reg = make_registration("IRepo<T>", "Repo<T>", index=0)
        closed_reg = make_registration("IRepo<Order>", "OrderRepo", index=1)
        graph = build_registration_graph([open_reg, closed_reg])
        assert graph.lookup(make_identity("IRepo<Order>")) is closed_reg
        assert graph.lookup(make_identity("IRepo<Invoice>")) is open_reg

    def test_open_parameter_names_are_irrelevant(self) -> None:
        graph = build_registration_graph([make_registration("IRepo<TEntity>", "Repo<TEntity>")])
        assert graph.lookup(make_identity("IRepo<T>")) is not None

    def test_keyed_is_separate(self) -> None:
        keyed = make_registration("ICache", "FastCache", key="fast")
        graph = build_registration_graph([keyed])
        assert graph.lookup(make_identity("ICache")) is None
        assert graph.lookup(make_identity("ICache", key="fast")) is keyed

    def test_lookup_all_excludes_ignored_try_add(self) -> None:
        first = make_registration("IPlugin", "A", index=0)
        second = make_registration("IPlugin", "B", index=1)
        ignored = make_registration("IPlugin", "C", index=2, conditional=True)
        graph = build_registration_graph([first, second, ignored])
        assert graph.lookup_all(make_identity("IPlugin")) == (first, second)

    def test_all_registrations_in_insertion_order(self) -> None:
        regs = [make_registration("IB", index=2), make_registration("IA", index=0), make_registration("IA", index=1)]
        graph = build_registration_graph(regs)
        assert [r.insertion_index for r in graph.all_registrations()] == [0, 1, 2]
        assert [r.insertion_index for r in graph] == [1, 2]
