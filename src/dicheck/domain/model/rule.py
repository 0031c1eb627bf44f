"""Rule identifiers and their immutable descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from dicheck.domain.model.enums import RuleCategory, Severity


class Rule(Enum):
    """Diagnostic rules. Values are the stable rule ids."""

    UNDISPOSED_SCOPE = "DI001"
    SCOPE_ESCAPE = "DI002"
    CAPTIVE_DEPENDENCY = "DI003"
    USE_AFTER_DISPOSE = "DI004"
    ASYNC_SCOPE_REQUIRED = "DI005"
    STATIC_PROVIDER_CACHE = "DI006"
    DISPOSABLE_TRANSIENT = "DI008"
    OPEN_GENERIC_CAPTIVE_DEPENDENCY = "DI009"
    TRY_ADD_IGNORED = "DI012"
    DUPLICATE_REGISTRATION = "DI012b"
    IMPLEMENTATION_TYPE_MISMATCH = "DI013"
    ROOT_PROVIDER_NOT_DISPOSED = "DI014"
    UNRESOLVABLE_DEPENDENCY = "DI015"

    @property
    def id(self) -> str:
        """Stable rule id ("DI003")."""
        return self.value

    @property
    def descriptor(self) -> RuleDescriptor:
        """Descriptor with title, message format and default severity."""
        return DESCRIPTORS[self]

    @classmethod
    def from_id(cls, rule_id: str) -> Rule:
        """Look up a rule by id, case-insensitive.

        Raises:
            ValueError: If no rule has this id
        """
        for rule in cls:
            if rule.value.lower() == rule_id.strip().lower():
                return rule
        raise ValueError(f"unknown rule id '{rule_id}'")


@dataclass(frozen=True, slots=True)
class RuleDescriptor:
    """Presentation data for a rule.

    Attributes:
        title: One-line rule title
        message_format: str.format template for diagnostic messages
        severity: Default severity
        category: Defect taxonomy bucket
    """

    title: str
    message_format: str
    severity: Severity
    category: RuleCategory

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.title:
            raise ValueError("title must not be empty")
        if not self.message_format:
            raise ValueError("message_format must not be empty")

    def format(self, *args: object) -> str:
        """Render the message template."""
        return self.message_format.format(*args)


DESCRIPTORS: MappingProxyType[Rule, RuleDescriptor] = MappingProxyType(
    {
        Rule.UNDISPOSED_SCOPE: RuleDescriptor(
            title="Service scope must be disposed",
            message_format="Scope created by '{0}' is not disposed on every path",
            severity=Severity.WARNING,
            category=RuleCategory.SCOPE,
        ),
        Rule.SCOPE_ESCAPE: RuleDescriptor(
            title="Scoped service escapes scope",
            message_format="Service '{0}' resolved from scope escapes via '{1}'",
            severity=Severity.WARNING,
            category=RuleCategory.SCOPE,
        ),
        Rule.CAPTIVE_DEPENDENCY: RuleDescriptor(
            title="Captive dependency detected",
            message_format="Service '{0}' captures {1} dependency '{2}'",
            severity=Severity.WARNING,
            category=RuleCategory.LIFETIME,
        ),
        Rule.USE_AFTER_DISPOSE: RuleDescriptor(
            title="Service used after scope disposed",
            message_format="Service '{0}' is used after its scope is disposed",
            severity=Severity.WARNING,
            category=RuleCategory.SCOPE,
        ),
        Rule.ASYNC_SCOPE_REQUIRED: RuleDescriptor(
            title="Use CreateAsyncScope in async methods",
            message_format="Use 'CreateAsyncScope' instead of 'CreateScope' in async method '{0}'",
            severity=Severity.WARNING,
            category=RuleCategory.SCOPE,
        ),
        Rule.STATIC_PROVIDER_CACHE: RuleDescriptor(
            title="Avoid caching IServiceProvider in static members",
            message_format="'{0}' should not be stored in static member '{1}'",
            severity=Severity.WARNING,
            category=RuleCategory.SCOPE,
        ),
        Rule.DISPOSABLE_TRANSIENT: RuleDescriptor(
            title="Transient service implements IDisposable",
            message_format=(
                "Transient service '{0}' implements {1} but the container will not "
                "track or dispose it"
            ),
            severity=Severity.WARNING,
            category=RuleCategory.LIFETIME,
        ),
        Rule.OPEN_GENERIC_CAPTIVE_DEPENDENCY: RuleDescriptor(
            title="Open generic captive dependency",
            message_format=(
                "Open generic {0} '{1}' captures {2} dependency '{3}' "
                "in every closing instantiation"
            ),
            severity=Severity.WARNING,
            category=RuleCategory.LIFETIME,
        ),
        Rule.TRY_ADD_IGNORED: RuleDescriptor(
            title="TryAdd registration will be ignored",
            message_format=(
                "TryAdd for '{0}' will be ignored because the service is already "
                "registered at {1}"
            ),
            severity=Severity.INFO,
            category=RuleCategory.STYLE,
        ),
        Rule.DUPLICATE_REGISTRATION: RuleDescriptor(
            title="Duplicate service registration",
            message_format=(
                "Service '{0}' is registered multiple times; this registration is "
                "overridden by the one at {1}"
            ),
            severity=Severity.INFO,
            category=RuleCategory.STYLE,
        ),
        Rule.IMPLEMENTATION_TYPE_MISMATCH: RuleDescriptor(
            title="Implementation type mismatch",
            message_format="Type '{0}' cannot be used as implementation for service '{1}'",
            severity=Severity.ERROR,
            category=RuleCategory.STRUCTURAL,
        ),
        Rule.ROOT_PROVIDER_NOT_DISPOSED: RuleDescriptor(
            title="Root service provider not disposed",
            message_format="The root service provider built in '{0}' should be disposed",
            severity=Severity.WARNING,
            category=RuleCategory.SCOPE,
        ),
        Rule.UNRESOLVABLE_DEPENDENCY: RuleDescriptor(
            title="Unresolvable dependency detected",
            message_format="Service '{0}' depends on unregistered service '{1}'",
            severity=Severity.WARNING,
            category=RuleCategory.STRUCTURAL,
        ),
    }
)
