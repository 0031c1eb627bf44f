"""Domain enumerations."""

from __future__ import annotations

from enum import Enum, auto


class Lifetime(Enum):
    """Service lifetime, ordered by rank.

    Lower rank = longer-lived. Total order used for captive-dependency checks.
    """

    SINGLETON = 0
    SCOPED = 1
    TRANSIENT = 2

    @property
    def rank(self) -> int:
        """Ordering rank (0 = longest-lived)."""
        return self.value

    @property
    def word(self) -> str:
        """Lowercase name used in messages ("scoped")."""
        return self.name.lower()

    def outlives(self, other: Lifetime) -> bool:
        """True if this lifetime is strictly longer than other."""
        return self.rank < other.rank

    @classmethod
    def parse(cls, text: str) -> Lifetime:
        """Parse lifetime name, case-insensitive.

        Raises:
            ValueError: If text names no lifetime
        """
        try:
            return cls[text.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown lifetime '{text}'") from None


class Severity(Enum):
    """Diagnostic severity. Ordered: ERROR is most severe."""

    ERROR = auto()  # guaranteed runtime failure
    WARNING = auto()  # probable misuse
    INFO = auto()  # informational

    def at_least(self, threshold: Severity) -> bool:
        """True if this severity is as severe as threshold or more."""
        return self.value <= threshold.value


class RuleCategory(Enum):
    """Defect taxonomy.

    - STRUCTURAL: guaranteed runtime failure (mismatch, unresolvable)
    - LIFETIME: lifetime hygiene (captive, disposable transient)
    - SCOPE: scope/provider lifecycle (undisposed, escape, use after dispose)
    - STYLE: stylistic signals (duplicate/ignored registration)
    """

    STRUCTURAL = auto()
    LIFETIME = auto()
    SCOPE = auto()
    STYLE = auto()


class HandleKind(Enum):
    """What a created handle represents."""

    SCOPE = auto()  # CreateScope / CreateAsyncScope
    ROOT_PROVIDER = auto()  # provider built explicitly, not obtained from a host


class HandleState(Enum):
    """Abstract state of a handle in the scope lifecycle machine."""

    CREATED = auto()
    DISPOSED = auto()  # terminal
    ESCAPED = auto()  # terminal, owned by the caller from here on


class EscapeSink(Enum):
    """Where an escaping value goes."""

    RETURN = "return"
    FIELD_STORE = "field"
    OUTER_CAPTURE = "capture"


class ProviderType(Enum):
    """Value type of a storage location, for the static cache check."""

    SERVICE_PROVIDER = "IServiceProvider"
    SCOPE_FACTORY = "IServiceScopeFactory"
    KEYED_SERVICE_PROVIDER = "IKeyedServiceProvider"
    OTHER = "other"

    @property
    def is_provider(self) -> bool:
        """True for provider and scope-factory types."""
        return self is not ProviderType.OTHER
