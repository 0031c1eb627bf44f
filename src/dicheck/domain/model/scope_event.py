"""Scope events and procedure traces.

A ProcedureTrace is the control-flow graph of one procedure reduced to the
events the scope lifecycle machine cares about. Handles and values are
procedure-local string identifiers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from dicheck.domain.model.enums import EscapeSink, HandleKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from dicheck.domain.model.location import Location
    from dicheck.domain.model.service_identity import ServiceIdentity


@dataclass(frozen=True, slots=True)
class Create:
    """A scope (or root provider) is created.

    Attributes:
        handle: Handle identifier
        location: Creation site
        is_async: Created via the asynchronous API (CreateAsyncScope)
        kind: SCOPE or ROOT_PROVIDER
        guarded: Wrapped by a structured scoped-acquisition construct that
            releases it on every exit path, exceptions included
    """

    handle: str
    location: Location
    is_async: bool = False
    kind: HandleKind = HandleKind.SCOPE
    guarded: bool = False

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.handle:
            raise ValueError("handle must not be empty")


@dataclass(frozen=True, slots=True)
class Dispose:
    """A handle is released (explicit call or end of a scoped-acquisition construct)."""

    handle: str
    location: Location

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.handle:
            raise ValueError("handle must not be empty")


@dataclass(frozen=True, slots=True)
class Resolve:
    """A service is resolved from a handle into a value.

    Attributes:
        handle: Scope handle resolved from
        result: Value identifier receiving the service
        location: Resolution site
        service: Resolved service, if the front end knows it
    """

    handle: str
    result: str
    location: Location
    service: ServiceIdentity | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.handle:
            raise ValueError("handle must not be empty")
        if not self.result:
            raise ValueError("result must not be empty")


@dataclass(frozen=True, slots=True)
class Escape:
    """A value (or the handle itself) leaves the procedure's ownership."""

    value: str
    sink: EscapeSink
    location: Location
    target: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.value:
            raise ValueError("value must not be empty")

    @property
    def target_name(self) -> str:
        """Sink description for messages: field name or sink word."""
        return self.target or self.sink.value


@dataclass(frozen=True, slots=True)
class Use:
    """A derived value is used."""

    value: str
    location: Location

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.value:
            raise ValueError("value must not be empty")


ScopeEvent: TypeAlias = "Create | Dispose | Resolve | Escape | Use"


@dataclass(frozen=True, slots=True)
class BasicBlock:
    """Straight-line run of events with its control-flow successors.

    Attributes:
        id: Block identifier, unique within the trace
        events: Events in program order
        successors: Identifiers of successor blocks (empty = exit block)
    """

    id: str
    events: tuple[ScopeEvent, ...] = ()
    successors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.id:
            raise ValueError("id must not be empty")

    @property
    def is_exit(self) -> bool:
        """True if control leaves the procedure after this block."""
        return not self.successors


@dataclass(frozen=True, slots=True)
class ProcedureTrace:
    """Control-flow graph of one procedure's scope events.

    Invariants (FAIL-FIRST):
    - at least one block; the first block is the entry
    - block ids are unique and every successor names an existing block

    Attributes:
        name: Procedure name (for messages)
        blocks: Basic blocks, entry first
        is_async: Procedure is asynchronous (async method, lambda, local function)
        location: Declaration site, if known
    """

    name: str
    blocks: tuple[BasicBlock, ...]
    is_async: bool = False
    location: Location | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.name:
            raise ValueError("name must not be empty")
        if not self.blocks:
            raise ValueError(f"procedure '{self.name}' must have at least one block")

        ids = [block.id for block in self.blocks]
        if len(set(ids)) != len(ids):
            raise ValueError(f"procedure '{self.name}' has duplicate block ids")

        known = frozenset(ids)
        for block in self.blocks:
            for succ in block.successors:
                if succ not in known:
                    raise ValueError(f"block '{block.id}' has unknown successor '{succ}'")

    @classmethod
    def linear(
        cls,
        name: str,
        events: Iterable[ScopeEvent],
        *,
        is_async: bool = False,
        location: Location | None = None,
    ) -> ProcedureTrace:
        """Single-block trace: events in program order, one exit."""
        return cls(
            name=name,
            blocks=(BasicBlock(id="entry", events=tuple(events)),),
            is_async=is_async,
            location=location,
        )

    @property
    def entry(self) -> BasicBlock:
        """Entry block."""
        return self.blocks[0]

    @property
    def block_map(self) -> Mapping[str, BasicBlock]:
        """Block id → block."""
        return {block.id: block for block in self.blocks}

    def predecessors(self) -> dict[str, tuple[str, ...]]:
        """Block id → predecessor ids, in block order."""
        preds: dict[str, list[str]] = {block.id: [] for block in self.blocks}
        for block in self.blocks:
            for succ in block.successors:
                preds[succ].append(block.id)
        return {k: tuple(v) for k, v in preds.items()}

    def events(self) -> Iterable[ScopeEvent]:
        """All events, block by block."""
        for block in self.blocks:
            yield from block.events
