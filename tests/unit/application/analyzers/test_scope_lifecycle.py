"""Tests for application/analyzers/scope_lifecycle.py."""

import pytest

from dicheck.application.analyzers import ScopeLifecycleAnalyzer, analyze_trace
from dicheck.application.graph import build_registration_graph
from dicheck.domain.exceptions import TraceIntegrityError
from dicheck.domain.model.configuration import CheckConfig
from dicheck.domain.model.enums import EscapeSink, Lifetime
from dicheck.domain.model.rule import Rule
from dicheck.domain.model.scope_event import BasicBlock, ProcedureTrace
from tests.factories import (
    create,
    create_root,
    dispose,
    escape,
    make_context,
    make_facts,
    make_registration,
    make_trace,
    resolve,
    use,
)


def _rules(diagnostics) -> list[Rule]:
    return [d.rule for d in diagnostics]


class TestUndisposedScope:
    """Tests for DI001 and DI014."""

    def test_disposed_scope_is_clean(self) -> None:
        assert analyze_trace(make_trace("Run", create(), dispose())) == ()

    def test_missing_dispose(self) -> None:
        diagnostics = analyze_trace(make_trace("Run", create(line=10)))
        assert _rules(diagnostics) == [Rule.UNDISPOSED_SCOPE]
        assert diagnostics[0].location.line == 10
        assert diagnostics[0].message == "Scope created by 'Run' is not disposed on every path"

    def test_guarded_scope_is_clean(self) -> None:
        assert analyze_trace(make_trace("Run", create(guarded=True))) == ()

    def test_dispose_on_one_branch_only(self) -> None:
        trace = ProcedureTrace(
            name="Run",
            blocks=(
                BasicBlock("entry", events=(create(),), successors=("then", "else")),
                BasicBlock("then", events=(dispose(),)),
                BasicBlock("else"),
            ),
        )
        assert _rules(analyze_trace(trace)) == [Rule.UNDISPOSED_SCOPE]

    def test_dispose_on_both_branches(self) -> None:
        trace = ProcedureTrace(
            name="Run",
            blocks=(
                BasicBlock("entry", events=(create(),), successors=("then", "else")),
                BasicBlock("then", events=(dispose(line=20),), successors=("exit",)),
                BasicBlock("else", events=(dispose(line=30),), successors=("exit",)),
                BasicBlock("exit"),
            ),
        )
        assert analyze_trace(trace) == ()

    def test_root_provider_not_disposed(self) -> None:
        diagnostics = analyze_trace(make_trace("Main", create_root()))
        assert _rules(diagnostics) == [Rule.ROOT_PROVIDER_NOT_DISPOSED]
        assert diagnostics[0].message == "The root service provider built in 'Main' should be disposed"

    def test_escaped_handle_not_reported(self) -> None:
        diagnostics = analyze_trace(make_trace("Open", create(), escape(value="scope")))
        assert diagnostics == ()

    def test_loop_reaches_fixpoint(self) -> None:
        trace = ProcedureTrace(
            name="Poll",
            blocks=(
                BasicBlock("entry", successors=("body",)),
                BasicBlock("body", events=(create(), dispose()), successors=("body", "exit")),
                BasicBlock("exit"),
            ),
        )
        assert analyze_trace(trace) == ()

    def test_back_edge_into_entry(self) -> None:
        trace = ProcedureTrace(
            name="Loop",
            blocks=(
                BasicBlock("entry", events=(resolve(handle="scope", line=5),), successors=("body",)),
                BasicBlock("body", events=(create(line=6), dispose(line=7)), successors=("entry", "exit")),
                BasicBlock("exit"),
            ),
        )
        # the resolve on the second iteration sees a disposed scope
        assert _rules(analyze_trace(trace)) == [Rule.USE_AFTER_DISPOSE]


class TestScopeEscape:
    """Tests for DI002."""

    def test_escape_before_dispose(self) -> None:
        diagnostics = analyze_trace(
            make_trace("GetRepo", create(), resolve(service="IRepo"), escape(line=12), dispose())
        )
        assert _rules(diagnostics) == [Rule.SCOPE_ESCAPE]
        assert diagnostics[0].message == "Service 'IRepo' resolved from scope escapes via 'return'"
        assert diagnostics[0].related_locations[0].line == 10

    def test_field_store_target(self) -> None:
        diagnostics = analyze_trace(
            make_trace(
                "Init",
                create(),
                resolve(),
                escape(sink=EscapeSink.FIELD_STORE, target="_repo"),
                dispose(),
            )
        )
        assert "via '_repo'" in diagnostics[0].message

    def test_singleton_escape_is_clean(self) -> None:
        registrations = build_registration_graph([make_registration("IClock", "Clock", Lifetime.SINGLETON)])
        trace = make_trace("Get", create(), resolve(service="IClock"), escape(), dispose())
        assert analyze_trace(trace, registrations) == ()

    def test_scoped_escape_with_registrations(self) -> None:
        registrations = build_registration_graph([make_registration("IRepo", "Repo", Lifetime.SCOPED)])
        trace = make_trace("Get", create(), resolve(service="IRepo"), escape(), dispose())
        assert _rules(analyze_trace(trace, registrations)) == [Rule.SCOPE_ESCAPE]

    def test_escape_after_handle_escaped(self) -> None:
        trace = make_trace("Get", create(), resolve(), escape(value="scope", line=12), escape(line=13))
        assert analyze_trace(trace) == ()


class TestUseAfterDispose:
    """Tests for DI004."""

    def test_use_after_dispose(self) -> None:
        diagnostics = analyze_trace(
            make_trace("Run", create(guarded=True), resolve(service="IRepo"), dispose(), use(line=21))
        )
        assert _rules(diagnostics) == [Rule.USE_AFTER_DISPOSE]
        assert diagnostics[0].location.line == 21
        assert diagnostics[0].message == "Service 'IRepo' is used after its scope is disposed"

    def test_escape_after_dispose_is_use_after_dispose(self) -> None:
        diagnostics = analyze_trace(make_trace("Run", create(), resolve(), dispose(), escape(line=22)))
        assert _rules(diagnostics) == [Rule.USE_AFTER_DISPOSE]

    def test_resolve_after_dispose(self) -> None:
        diagnostics = analyze_trace(make_trace("Run", create(), dispose(), resolve(line=25)))
        assert _rules(diagnostics) == [Rule.USE_AFTER_DISPOSE]

    def test_maybe_disposed_not_reported(self) -> None:
        trace = ProcedureTrace(
            name="Run",
            blocks=(
                BasicBlock("entry", events=(create(guarded=True), resolve()), successors=("then", "join")),
                BasicBlock("then", events=(dispose(),), successors=("join",)),
                BasicBlock("join", events=(use(),)),
            ),
        )
        assert analyze_trace(trace) == ()

    def test_singleton_use_after_dispose_is_clean(self) -> None:
        registrations = build_registration_graph([make_registration("IClock", "Clock", Lifetime.SINGLETON)])
        trace = make_trace("Run", create(), resolve(service="IClock"), dispose(), use())
        assert analyze_trace(trace, registrations) == ()

    def test_root_provider_values_ignored(self) -> None:
        trace = make_trace("Main", create_root(), resolve(handle="provider"), dispose(handle="provider"), use())
        assert analyze_trace(trace) == ()


class TestValueRebinding:
    """Tests for values resolved again from a later scope."""

    def test_rebound_to_live_scope_is_clean(self) -> None:
        trace = make_trace(
            "Run",
            create(handle="s1", line=10),
            resolve(handle="s1", line=11),
            dispose(handle="s1", line=12),
            create(handle="s2", line=13),
            resolve(handle="s2", line=14),
            use(line=15),
            dispose(handle="s2", line=16),
        )
        assert analyze_trace(trace) == ()

    def test_use_of_old_binding_before_rebind(self) -> None:
        trace = make_trace(
            "Run",
            create(handle="s1", line=10),
            resolve(handle="s1", line=11),
            dispose(handle="s1", line=12),
            use(line=13),
            create(handle="s2", line=14),
            resolve(handle="s2", line=15),
            use(line=16),
            dispose(handle="s2", line=17),
        )
        diagnostics = analyze_trace(trace)
        assert _rules(diagnostics) == [Rule.USE_AFTER_DISPOSE]
        assert diagnostics[0].location.line == 13
        assert diagnostics[0].properties["handle"] == "s1"

    def test_rebound_on_one_branch_only(self) -> None:
        trace = ProcedureTrace(
            name="Run",
            blocks=(
                BasicBlock(
                    "entry",
                    events=(
                        create(handle="s1", line=10),
                        resolve(handle="s1", line=11),
                        dispose(handle="s1", line=12),
                        create(handle="s2", line=13, guarded=True),
                    ),
                    successors=("then", "join"),
                ),
                BasicBlock("then", events=(resolve(handle="s2", line=14),), successors=("join",)),
                BasicBlock("join", events=(use(line=15),)),
            ),
        )
        # disposed on one path only
        assert analyze_trace(trace) == ()

    def test_escape_after_rebind_to_live_scope(self) -> None:
        trace = make_trace(
            "Get",
            create(handle="s1", line=10),
            resolve(handle="s1", line=11),
            dispose(handle="s1", line=12),
            create(handle="s2", line=13),
            resolve(handle="s2", line=14, service="IRepo"),
            escape(line=15),
            dispose(handle="s2", line=16),
        )
        diagnostics = analyze_trace(trace)
        assert _rules(diagnostics) == [Rule.SCOPE_ESCAPE]
        assert diagnostics[0].properties["handle"] == "s2"
        assert diagnostics[0].related_locations[0].line == 13


class TestAsyncScope:
    """Tests for DI005."""

    def test_sync_scope_in_async_method(self) -> None:
        diagnostics = analyze_trace(make_trace("HandleAsync", create(line=10), dispose(), is_async=True))
        assert _rules(diagnostics) == [Rule.ASYNC_SCOPE_REQUIRED]
        assert diagnostics[0].message == (
            "Use 'CreateAsyncScope' instead of 'CreateScope' in async method 'HandleAsync'"
        )

    def test_async_scope_is_clean(self) -> None:
        assert analyze_trace(make_trace("HandleAsync", create(is_async=True), dispose(), is_async=True)) == ()

    def test_takes_precedence_over_escape(self) -> None:
        diagnostics = analyze_trace(
            make_trace("HandleAsync", create(), resolve(), escape(), dispose(), is_async=True)
        )
        assert _rules(diagnostics) == [Rule.ASYNC_SCOPE_REQUIRED]

    def test_escape_reported_when_async_rule_off(self) -> None:
        trace = make_trace("HandleAsync", create(), resolve(), escape(), dispose(), is_async=True)
        diagnostics = analyze_trace(trace, report_async_scope=False)
        assert _rules(diagnostics) == [Rule.ASYNC_SCOPE_REQUIRED, Rule.SCOPE_ESCAPE]

    def test_root_provider_in_async_method(self) -> None:
        diagnostics = analyze_trace(make_trace("MainAsync", create_root(), dispose(handle="provider"), is_async=True))
        assert diagnostics == ()


class TestTraceIntegrity:
    """Tests for dangling handles."""

    def test_dispose_unknown_handle(self) -> None:
        with pytest.raises(TraceIntegrityError) as exc_info:
            analyze_trace(make_trace("Run", create(), dispose(handle="other")))
        assert exc_info.value.handle == "other"

    def test_use_unknown_value(self) -> None:
        with pytest.raises(TraceIntegrityError):
            analyze_trace(make_trace("Run", create(), use(value="ghost")))

    def test_trace_without_handles(self) -> None:
        assert analyze_trace(make_trace("Empty")) == ()


class TestScopeLifecycleAnalyzer:
    """Tests for the analyzer wrapper."""

    def test_one_work_unit_per_trace(self) -> None:
        facts = make_facts(traces=(make_trace("A", create()), make_trace("B", create(), dispose())))
        context = make_context(facts)
        analyzer = ScopeLifecycleAnalyzer()

        units = analyzer.work_units(context)

        assert len(units) == 2
        assert _rules(units[0]()) == [Rule.UNDISPOSED_SCOPE]
        assert units[1]() == ()

    def test_analyze_uses_registration_lifetimes(self) -> None:
        facts = make_facts(
            registrations=(make_registration("IClock", "Clock", Lifetime.SINGLETON),),
            traces=(make_trace("Get", create(), resolve(service="IClock"), escape(), dispose()),),
        )
        assert ScopeLifecycleAnalyzer().analyze(make_context(facts)) == ()

    def test_escape_reported_when_only_escape_rule_enabled(self) -> None:
        facts = make_facts(
            traces=(make_trace("HandleAsync", create(), resolve(), escape(), dispose(), is_async=True),),
        )
        config = CheckConfig(enabled_rules=frozenset({Rule.SCOPE_ESCAPE}))

        diagnostics = ScopeLifecycleAnalyzer().analyze(make_context(facts, config))

        assert Rule.SCOPE_ESCAPE in _rules(diagnostics)
