"""Indexed, conflict-resolved registration graph."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from dicheck.domain.model.rule import Rule

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from dicheck.domain.model.registration import Registration
    from dicheck.domain.model.service_identity import ServiceIdentity


@dataclass(frozen=True, slots=True)
class RegistrationConflict:
    """A registration whose effect is nullified by another one.

    Attributes:
        registration: Nullified entry (primary location)
        blocker: Entry that nullifies it (related location)
        rule: TRY_ADD_IGNORED or DUPLICATE_REGISTRATION
    """

    registration: Registration
    blocker: Registration
    rule: Rule

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.rule not in (Rule.TRY_ADD_IGNORED, Rule.DUPLICATE_REGISTRATION):
            raise ValueError(f"rule must be a registration conflict rule, got {self.rule.id}")
        if self.registration is self.blocker:
            raise ValueError("registration cannot conflict with itself")


@dataclass(frozen=True, slots=True)
class RegistrationGraph:
    """Registrations grouped by service identity.

    Pure function of the registration set: rebuilt from scratch each run.
    Open-generic identities are normalized (IRepo<T> → IRepo<T0>) and kept
    apart from their closed instantiations.

    Attributes:
        groups: Identity → every entry, sorted by insertion_index
        active: Identity → entries the container holds (not ignored TryAdds)
        effective: Identity → the registration that satisfies a single request
        conflicts: Nullified registrations, in insertion order
    """

    groups: Mapping[ServiceIdentity, tuple[Registration, ...]]
    active: Mapping[ServiceIdentity, tuple[Registration, ...]]
    effective: Mapping[ServiceIdentity, Registration]
    conflicts: tuple[RegistrationConflict, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if set(self.effective) != set(self.groups):
            raise ValueError("every group must have exactly one effective registration")
        if set(self.active) != set(self.groups):
            raise ValueError("every group must have an active entry list")
        for identity, registration in self.effective.items():
            if registration not in self.active[identity]:
                raise ValueError(f"effective registration for '{identity}' must be active")

        object.__setattr__(self, "groups", MappingProxyType(dict(self.groups)))
        object.__setattr__(self, "active", MappingProxyType(dict(self.active)))
        object.__setattr__(self, "effective", MappingProxyType(dict(self.effective)))

    @classmethod
    def empty(cls) -> RegistrationGraph:
        """Create empty graph."""
        return cls(groups={}, active={}, effective={})

    def __len__(self) -> int:
        return len(self.effective)

    def __contains__(self, identity: object) -> bool:
        return identity in self.effective

    def __iter__(self) -> Iterator[Registration]:
        """Iterate effective registrations in insertion order."""
        return iter(self.effective_registrations())

    def effective_registrations(self) -> tuple[Registration, ...]:
        """Effective registrations sorted by insertion_index."""
        return tuple(sorted(self.effective.values(), key=lambda r: r.insertion_index))

    def all_registrations(self) -> tuple[Registration, ...]:
        """Every registration, sorted by insertion_index."""
        entries = [r for group in self.groups.values() for r in group]
        return tuple(sorted(entries, key=lambda r: r.insertion_index))

    def _candidates(self, identity: ServiceIdentity) -> Iterator[ServiceIdentity]:
        """Identities that can satisfy a request: exact, then open definition."""
        normalized = identity.normalized()
        yield normalized
        open_definition = normalized.open_definition()
        if open_definition is not None:
            yield open_definition

    def lookup(self, identity: ServiceIdentity) -> Registration | None:
        """Effective registration satisfying a request for identity.

        A closed generic request (IRepo<Order>) falls back to the open-generic
        registration (IRepo<T0>) when no closed registration exists.

        Args:
            identity: Requested service

        Returns:
            Effective registration, or None if the service is not registered
        """
        for candidate in self._candidates(identity):
            registration = self.effective.get(candidate)
            if registration is not None:
                return registration
        return None

    def lookup_all(self, identity: ServiceIdentity) -> tuple[Registration, ...]:
        """Active registrations a multi-registration request sees."""
        for candidate in self._candidates(identity):
            entries = self.active.get(candidate)
            if entries:
                return entries
        return ()
