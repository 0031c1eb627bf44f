"""Immutable snapshot of the facts of one compilation unit."""

from __future__ import annotations

from dataclasses import dataclass

from dicheck.domain.exceptions.facts import FactValidationError
from dicheck.domain.model.registration import Registration
from dicheck.domain.model.scope_event import ProcedureTrace
from dicheck.domain.model.storage import StorageFact
from dicheck.domain.model.type_shape import TypeShape


@dataclass(frozen=True, slots=True)
class FactSet:
    """Facts produced by the front end for one compilation pass.

    Discarded after the pass. Order of registrations is NOT significant
    (insertion_index is authoritative).

    Attributes:
        registrations: Every service registration
        shapes: Every implementation type shape
        traces: One trace per analyzed procedure
        storages: Field/property declarations for the static cache check
    """

    registrations: tuple[Registration, ...] = ()
    shapes: tuple[TypeShape, ...] = ()
    traces: tuple[ProcedureTrace, ...] = ()
    storages: tuple[StorageFact, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST.

        Raises:
            FactValidationError: If two shapes describe the same type definition
        """
        seen: set[tuple[str, int]] = set()
        for shape in self.shapes:
            if shape.definition_key in seen:
                raise FactValidationError(f"shape '{shape.identity}'", "type described more than once")
            seen.add(shape.definition_key)

    @property
    def is_empty(self) -> bool:
        """True if there is nothing to analyze."""
        return not (self.registrations or self.traces or self.storages)

    @classmethod
    def empty(cls) -> FactSet:
        """Create empty fact set."""
        return cls()
