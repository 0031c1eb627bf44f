"""Storage fact for the static provider cache check."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dicheck.domain.model.enums import ProviderType

if TYPE_CHECKING:
    from dicheck.domain.model.location import Location


@dataclass(frozen=True, slots=True)
class StorageFact:
    """A field or property declaration that can hold a value.

    Attributes:
        member: Member name ("_provider")
        value_type: Declared value type classified for provider detection
        is_static: Storage has process-wide (not instance) lifetime
        location: Declaration site
        type_name: Declared type as written, for messages
    """

    member: str
    value_type: ProviderType
    is_static: bool
    location: Location
    type_name: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.member:
            raise ValueError("member must not be empty")
        if not isinstance(self.value_type, ProviderType):
            raise TypeError("value_type must be ProviderType")

    @property
    def display_type(self) -> str:
        """Type name for messages."""
        return self.type_name or self.value_type.value
