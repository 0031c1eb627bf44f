"""Scope lifecycle and disposal analyzer.

Forward may-dataflow over a procedure's control-flow graph. Each scope or
root-provider handle carries the set of states it may be in at a program
point:

    CREATED ──Dispose──▶ DISPOSED
       │
       └──Escape(handle)──▶ ESCAPED   (ownership moves to the caller)

Resolved values carry the set of bindings (owning handle, service, lifetime)
that may reach a program point; a Resolve rebinds its result. Join is set
union for both. The fixpoint is computed first; diagnostics come from a
single replay of every reachable block with its fixed entry state, so the
verdict depends only on the trace, not on worklist order.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from functools import partial
from types import MappingProxyType
from typing import TYPE_CHECKING, TypeAlias

from dicheck.application.analyzers._base import BaseAnalyzer, WorkUnit
from dicheck.domain.exceptions.facts import TraceIntegrityError
from dicheck.domain.model.diagnostic import Diagnostic
from dicheck.domain.model.enums import HandleKind, HandleState, Lifetime, RuleCategory
from dicheck.domain.model.rule import Rule
from dicheck.domain.model.scope_event import Create, Dispose, Escape, Resolve, Use

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from dicheck.domain.model.analysis_context import AnalysisContext
    from dicheck.domain.model.location import Location
    from dicheck.domain.model.registration_graph import RegistrationGraph
    from dicheck.domain.model.scope_event import BasicBlock, ProcedureTrace, ScopeEvent

logger = logging.getLogger(__name__)

Emit: TypeAlias = "Callable[[Diagnostic], None]"

_CREATED = frozenset({HandleState.CREATED})
_DISPOSED_ONLY = frozenset({HandleState.DISPOSED})


@dataclass(frozen=True, slots=True)
class _Binding:
    """One way a resolved value may have been produced.

    Attributes:
        handle: Handle the value was resolved from
        label: Display name (service if known, else the value name)
        lifetime: Lifetime of the resolved service, if known
    """

    handle: str
    label: str
    lifetime: Lifetime | None = None

    @property
    def disposal_matters(self) -> bool:
        """Singletons outlive the scope; only scoped and transient values die with it."""
        return self.lifetime is None or self.lifetime is not Lifetime.SINGLETON

    @property
    def escape_matters(self) -> bool:
        """Only scoped services are owned by the scope they escape."""
        return self.lifetime is None or self.lifetime is Lifetime.SCOPED


@dataclass(slots=True)
class _FlowState:
    """Abstract state at one program point.

    Attributes:
        handles: Handle → states it may be in
        owners: Resolved value → bindings that may reach this point
    """

    handles: dict[str, frozenset[HandleState]] = field(default_factory=dict)
    owners: dict[str, frozenset[_Binding]] = field(default_factory=dict)

    def copy(self) -> _FlowState:
        return _FlowState(dict(self.handles), dict(self.owners))


@dataclass(frozen=True, slots=True)
class _TraceIndex:
    """Flow-insensitive facts about one trace.

    Attributes:
        creates: Handle → its Create event
        resolved: Every value some Resolve produces
        bindings: Resolve event → binding it introduces
        sync_in_async: Handles created synchronously inside an async procedure
    """

    creates: Mapping[str, Create]
    resolved: frozenset[str]
    bindings: Mapping[Resolve, _Binding]
    sync_in_async: frozenset[str] = field(default_factory=frozenset)


def _index_trace(trace: ProcedureTrace, registrations: RegistrationGraph | None) -> _TraceIndex:
    """Collect handles and resolve bindings; validate references.

    Raises:
        TraceIntegrityError: If an event references an unknown handle or value
    """
    creates: dict[str, Create] = {}
    bindings: dict[Resolve, _Binding] = {}

    events = tuple(trace.events())
    for event in events:
        match event:
            case Create(handle=handle):
                creates.setdefault(handle, event)
            case Resolve(handle=handle, result=result, service=service):
                lifetime: Lifetime | None = None
                if service is not None and registrations is not None:
                    registration = registrations.lookup(service)
                    if registration is not None:
                        lifetime = registration.lifetime
                label = service.display() if service is not None else result
                bindings[event] = _Binding(handle, label, lifetime)

    resolved = frozenset(event.result for event in bindings)
    for event in events:
        match event:
            case Dispose(handle=handle) | Resolve(handle=handle):
                if handle not in creates:
                    raise TraceIntegrityError(trace.name, handle, "no Create event for handle")
            case Escape(value=value) | Use(value=value):
                if value not in creates and value not in resolved:
                    raise TraceIntegrityError(trace.name, value, "value is neither a handle nor resolved from one")

    sync_in_async = frozenset(
        handle
        for handle, create in creates.items()
        if trace.is_async and not create.is_async and create.kind is HandleKind.SCOPE
    )

    return _TraceIndex(
        creates=MappingProxyType(creates),
        resolved=resolved,
        bindings=MappingProxyType(bindings),
        sync_in_async=sync_in_async,
    )


def _join(states: list[_FlowState]) -> _FlowState:
    """Union per handle and per value. Absent on one path keeps the other's entry."""
    joined = _FlowState()
    for state in states:
        for handle, values in state.handles.items():
            joined.handles[handle] = joined.handles.get(handle, frozenset()) | values
        for value, owners in state.owners.items():
            joined.owners[value] = joined.owners.get(value, frozenset()) | owners
    return joined


class _ScopeMachine:
    """Transfer function and diagnostics for one trace."""

    def __init__(self, trace: ProcedureTrace, index: _TraceIndex, *, report_async_scope: bool = True) -> None:
        self._trace = trace
        self._index = index
        self._report_async_scope = report_async_scope

    # -- dataflow -----------------------------------------------------------

    def fixpoint(self) -> dict[str, _FlowState]:
        """Entry state of every reachable block."""
        blocks = self._trace.block_map
        preds = self._trace.predecessors()
        order = {block.id: i for i, block in enumerate(self._trace.blocks)}

        entry_id = self._trace.entry.id
        entry_states: dict[str, _FlowState] = {entry_id: _FlowState()}
        exit_states: dict[str, _FlowState] = {}

        worklist = deque([entry_id])
        queued = {entry_id}
        while worklist:
            block_id = worklist.popleft()
            queued.discard(block_id)
            block = blocks[block_id]

            incoming = [exit_states[p] for p in preds[block_id] if p in exit_states]
            if block_id == entry_id:
                incoming.append(_FlowState())
            entry_states[block_id] = _join(incoming)

            out = self.run_block(block, entry_states[block_id], emit=None)
            if exit_states.get(block_id) == out:
                continue
            exit_states[block_id] = out

            for succ in sorted(block.successors, key=order.__getitem__):
                if succ not in queued:
                    worklist.append(succ)
                    queued.add(succ)

        return entry_states

    def run_block(self, block: BasicBlock, entry: _FlowState, emit: Emit | None) -> _FlowState:
        """Apply every event of a block to a copy of its entry state."""
        state = entry.copy()
        for event in block.events:
            self._transfer(event, state, emit)
        if block.is_exit and emit is not None:
            self._check_exit(state, emit)
        return state

    def _transfer(self, event: ScopeEvent, state: _FlowState, emit: Emit | None) -> None:
        match event:
            case Create(handle=handle, location=location):
                state.handles[handle] = _CREATED
                if emit is not None and handle in self._index.sync_in_async:
                    emit(Diagnostic.create(Rule.ASYNC_SCOPE_REQUIRED, location, self._trace.name))

            case Dispose(handle=handle):
                current = state.handles.get(handle)
                if current:
                    state.handles[handle] = frozenset(
                        HandleState.DISPOSED if s is HandleState.CREATED else s for s in current
                    )

            case Resolve(handle=handle, result=result, location=location):
                binding = self._index.bindings[event]
                if emit is not None and state.handles.get(handle) == _DISPOSED_ONLY:
                    emit(
                        Diagnostic.create(
                            Rule.USE_AFTER_DISPOSE,
                            location,
                            binding.label,
                            properties={"value": result, "handle": handle},
                        )
                    )
                state.owners[result] = frozenset({binding})

            case Escape(value=value) as escape:
                if value in self._index.creates:
                    current = state.handles.get(value, frozenset())
                    state.handles[value] = frozenset(
                        HandleState.ESCAPED if s is HandleState.CREATED else s for s in current
                    )
                elif emit is not None:
                    self._check_escape(escape, state, emit)

            case Use(value=value, location=location):
                if emit is not None:
                    self._check_use(value, location, state, emit)

    # -- checks -------------------------------------------------------------

    def _scope_bindings(self, value: str, state: _FlowState) -> list[_Binding]:
        """Bindings of a resolved value, ordered by handle; empty unless every one is a scope."""
        bindings = sorted(state.owners.get(value, frozenset()), key=lambda b: (b.handle, b.label))
        if any(self._index.creates[b.handle].kind is not HandleKind.SCOPE for b in bindings):
            return []
        return bindings

    def _disposed_on_every_path(self, bindings: list[_Binding], state: _FlowState) -> bool:
        return bool(bindings) and all(
            state.handles.get(b.handle) == _DISPOSED_ONLY and b.disposal_matters for b in bindings
        )

    def _check_escape(self, escape: Escape, state: _FlowState, emit: Emit) -> None:
        bindings = self._scope_bindings(escape.value, state)
        if self._disposed_on_every_path(bindings, state):
            binding = bindings[0]
            emit(self._use_after_dispose(escape.value, binding.label, binding.handle, escape.location))
            return

        for binding in bindings:
            current = state.handles.get(binding.handle, frozenset())
            if HandleState.CREATED not in current or HandleState.ESCAPED in current:
                continue
            if self._report_async_scope and binding.handle in self._index.sync_in_async:
                # reported as async scope required at the creation site
                continue
            if not binding.escape_matters:
                continue
            emit(
                Diagnostic.create(
                    Rule.SCOPE_ESCAPE,
                    escape.location,
                    binding.label,
                    escape.target_name,
                    related_locations=(self._index.creates[binding.handle].location,),
                    properties={"value": escape.value, "handle": binding.handle, "sink": escape.sink.value},
                )
            )
            return

    def _check_use(self, value: str, location: Location, state: _FlowState, emit: Emit) -> None:
        create = self._index.creates.get(value)
        if create is not None:
            if create.kind is HandleKind.SCOPE and state.handles.get(value) == _DISPOSED_ONLY:
                emit(self._use_after_dispose(value, value, value, location))
            return

        bindings = self._scope_bindings(value, state)
        if self._disposed_on_every_path(bindings, state):
            binding = bindings[0]
            emit(self._use_after_dispose(value, binding.label, binding.handle, location))

    def _use_after_dispose(self, value: str, label: str, handle: str, location: Location) -> Diagnostic:
        return Diagnostic.create(
            Rule.USE_AFTER_DISPOSE,
            location,
            label,
            related_locations=(self._index.creates[handle].location,),
            properties={"value": value, "handle": handle},
        )

    def _check_exit(self, state: _FlowState, emit: Emit) -> None:
        for handle, current in state.handles.items():
            if HandleState.CREATED not in current:
                continue
            create = self._index.creates[handle]
            if create.guarded:
                continue
            rule = Rule.ROOT_PROVIDER_NOT_DISPOSED if create.kind is HandleKind.ROOT_PROVIDER else Rule.UNDISPOSED_SCOPE
            emit(Diagnostic.create(rule, create.location, self._trace.name, properties={"handle": handle}))


def analyze_trace(
    trace: ProcedureTrace,
    registrations: RegistrationGraph | None = None,
    *,
    report_async_scope: bool = True,
) -> tuple[Diagnostic, ...]:
    """Run the scope machine over one procedure.

    Args:
        trace: Procedure control-flow graph with scope events
        registrations: Registration graph for lifetime refinement, if any
        report_async_scope: Whether async-scope-required is reported; when it
            is, escapes from the offending handle are left to that rule

    Returns:
        Diagnostics deduplicated by (rule, location), in block order

    Raises:
        TraceIntegrityError: If the trace references unknown handles
    """
    index = _index_trace(trace, registrations)
    if not index.creates:
        return ()

    machine = _ScopeMachine(trace, index, report_async_scope=report_async_scope)
    entry_states = machine.fixpoint()

    seen: set[tuple[str, str]] = set()
    diagnostics: list[Diagnostic] = []

    def emit(diagnostic: Diagnostic) -> None:
        key = (diagnostic.rule.id, str(diagnostic.location))
        if key not in seen:
            seen.add(key)
            diagnostics.append(diagnostic)

    for block in trace.blocks:
        if block.id in entry_states:
            machine.run_block(block, entry_states[block.id], emit)

    return tuple(diagnostics)


class ScopeLifecycleAnalyzer(BaseAnalyzer):
    """Per-procedure scope and root-provider lifecycle analysis.

    Reports:
    - undisposed scope: may still be CREATED at an exit, not guarded
    - root provider not disposed: same, for explicitly built providers
    - scope escape: a resolved service leaves while its scope is live
    - use after dispose: a resolved service is used after every path
      disposed its scope
    - async scope required: synchronous scope in an async procedure
      (takes precedence over scope escape for that handle while enabled)

    With registrations available, escapes are reported only for scoped
    services and use after dispose only for scoped and transient ones.

    Each procedure is an independent unit of work.

    Diagnostic severity: WARNING.
    """

    category = RuleCategory.SCOPE
    rules = (
        Rule.UNDISPOSED_SCOPE,
        Rule.SCOPE_ESCAPE,
        Rule.USE_AFTER_DISPOSE,
        Rule.ASYNC_SCOPE_REQUIRED,
        Rule.ROOT_PROVIDER_NOT_DISPOSED,
    )

    def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
        """Analyze every trace sequentially."""
        diagnostics: list[Diagnostic] = []
        for trace in context.facts.traces:
            context.checkpoint()
            diagnostics.extend(self.analyze_trace(trace, context))
        return tuple(diagnostics)

    def analyze_trace(self, trace: ProcedureTrace, context: AnalysisContext) -> tuple[Diagnostic, ...]:
        """Analyze one procedure."""
        registrations = context.registrations if len(context.registrations) else None
        diagnostics = analyze_trace(
            trace,
            registrations,
            report_async_scope=context.config.rule_enabled(Rule.ASYNC_SCOPE_REQUIRED),
        )
        logger.debug("Procedure %s: %d diagnostics", trace.name, len(diagnostics))
        return diagnostics

    def work_units(self, context: AnalysisContext) -> tuple[WorkUnit, ...]:
        """One unit per procedure trace."""
        return tuple(partial(self.analyze_trace, trace, context) for trace in context.facts.traces)
