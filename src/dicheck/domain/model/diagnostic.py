"""Diagnostic entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from dicheck.domain.model.rule import Rule

if TYPE_CHECKING:
    from collections.abc import Mapping

    from dicheck.domain.model.enums import RuleCategory, Severity
    from dicheck.domain.model.location import Location


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One reported defect.

    Attributes:
        rule: Violated rule
        severity: ERROR/WARNING/INFO
        message: Human-readable message
        location: Primary location
        related_locations: Additional locations (effective registration, path)
        properties: Structured details for reporters (consumer, dependency, path)
    """

    rule: Rule
    severity: Severity
    message: str
    location: Location
    related_locations: tuple[Location, ...] = ()
    properties: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not isinstance(self.rule, Rule):
            raise TypeError(f"rule must be Rule, got {type(self.rule).__name__}")
        if not self.message:
            raise ValueError("message must not be empty")
        if self.location is None:
            raise TypeError("location must not be None")
        # freeze caller's dict so the diagnostic stays immutable
        if not isinstance(self.properties, MappingProxyType):
            object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def __hash__(self) -> int:
        return hash(self.key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Diagnostic):
            return NotImplemented
        return self.key == other.key

    @classmethod
    def create(
        cls,
        rule: Rule,
        location: Location,
        *args: object,
        related_locations: tuple[Location, ...] = (),
        properties: Mapping[str, str] | None = None,
    ) -> Diagnostic:
        """Build a diagnostic from the rule descriptor's template and severity."""
        descriptor = rule.descriptor
        return cls(
            rule=rule,
            severity=descriptor.severity,
            message=descriptor.format(*args),
            location=location,
            related_locations=related_locations,
            properties=properties or {},
        )

    @property
    def rule_id(self) -> str:
        """Stable rule id."""
        return self.rule.id

    @property
    def category(self) -> RuleCategory:
        """Rule category."""
        return self.rule.descriptor.category

    @property
    def key(self) -> tuple[str, str, str]:
        """Deduplication key: (rule, location, message)."""
        return (self.rule.id, str(self.location), self.message)

    @property
    def sort_key(self) -> tuple[str, int, int, str]:
        """Deterministic order: file, line, column, rule."""
        return (*self.location.sort_key, self.rule.id)

    def __str__(self) -> str:
        """Format diagnostic for display."""
        lines = [
            f"[{self.severity.name}] {self.rule.id}: {self.message}",
            f"  at {self.location}",
        ]
        lines.extend(f"  see {related}" for related in self.related_locations)
        return "\n".join(lines)
