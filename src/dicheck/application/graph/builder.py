"""Registration graph builder."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from dicheck.domain.model.registration_graph import RegistrationConflict, RegistrationGraph
from dicheck.domain.model.rule import Rule

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dicheck.domain.model.registration import Registration
    from dicheck.domain.model.service_identity import ServiceIdentity

logger = logging.getLogger(__name__)


def build_registration_graph(registrations: Iterable[Registration]) -> RegistrationGraph:
    """Build the conflict-resolved registration graph.

    Algorithm:
    1. Group by service identity (open generics normalized to T0, T1, ...)
    2. Sort each group by insertion_index
    3. Pick the effective entry and record every nullified entry

    Arrival order of the input is irrelevant. Never fails: identities
    without registrations simply do not appear.

    Args:
        registrations: Registration facts in any order

    Returns:
        RegistrationGraph with groups, active entries, effective entries
        and conflicts

    Raises:
        TypeError: If registrations is None
    """
    if registrations is None:
        raise TypeError("registrations must not be None")

    grouped: dict[ServiceIdentity, list[Registration]] = defaultdict(list)
    for registration in registrations:
        grouped[registration.service.normalized()].append(registration)

    groups: dict[ServiceIdentity, tuple[Registration, ...]] = {}
    active: dict[ServiceIdentity, tuple[Registration, ...]] = {}
    effective: dict[ServiceIdentity, Registration] = {}
    conflicts: list[RegistrationConflict] = []

    for identity, entries in grouped.items():
        ordered = tuple(sorted(entries, key=lambda r: r.insertion_index))
        winner, nullified = _resolve_group(ordered)

        groups[identity] = ordered
        effective[identity] = winner
        ignored = {id(c.registration) for c in nullified if c.rule is Rule.TRY_ADD_IGNORED}
        active[identity] = tuple(r for r in ordered if id(r) not in ignored)
        conflicts.extend(nullified)

    conflicts.sort(key=lambda c: c.registration.insertion_index)

    logger.debug(
        "Registration graph: %d registrations, %d services, %d conflicts",
        sum(len(g) for g in groups.values()),
        len(groups),
        len(conflicts),
    )

    return RegistrationGraph(
        groups=groups,
        active=active,
        effective=effective,
        conflicts=tuple(conflicts),
    )


def _resolve_group(
    ordered: tuple[Registration, ...],
) -> tuple[Registration, list[RegistrationConflict]]:
    """Pick the effective registration of one identity.

    Conditional-first group: the first entry wins; later TryAdds are ignored,
    later Adds are duplicates. Otherwise the last Add wins; earlier Adds are
    duplicates and every TryAdd is ignored (blocked by the first Add).

    Args:
        ordered: Non-empty group sorted by insertion_index

    Returns:
        (effective registration, nullified entries)
    """
    first = ordered[0]
    conflicts: list[RegistrationConflict] = []

    if first.is_conditional:
        for entry in ordered[1:]:
            rule = Rule.TRY_ADD_IGNORED if entry.is_conditional else Rule.DUPLICATE_REGISTRATION
            conflicts.append(RegistrationConflict(registration=entry, blocker=first, rule=rule))
        return first, conflicts

    unconditional = [r for r in ordered if not r.is_conditional]
    winner = unconditional[-1]
    for entry in ordered:
        if entry is winner:
            continue
        if entry.is_conditional:
            blocker = first
            conflicts.append(RegistrationConflict(registration=entry, blocker=blocker, rule=Rule.TRY_ADD_IGNORED))
        else:
            conflicts.append(
                RegistrationConflict(registration=entry, blocker=winner, rule=Rule.DUPLICATE_REGISTRATION)
            )
    return winner, conflicts
