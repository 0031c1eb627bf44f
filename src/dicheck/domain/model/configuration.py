"""Check configuration (user config).

Immutable configuration passed explicitly into every analysis call.
None = feature disabled or default, value = feature enabled with that config.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dicheck.domain.model.rule import Rule

DEFAULT_FRAMEWORK_SERVICES: frozenset[str] = frozenset(
    {
        "IConfiguration",
        "ILoggerFactory",
        "ILogger",
        "IHostEnvironment",
        "IWebHostEnvironment",
        "IHostApplicationLifetime",
        "IOptions",
        "IOptionsSnapshot",
        "IOptionsMonitor",
    }
)

CONTAINER_SERVICES: frozenset[str] = frozenset(
    {
        "IServiceProvider",
        "IServiceScopeFactory",
        "IKeyedServiceProvider",
    }
)


@dataclass(frozen=True, slots=True)
class CheckConfig:
    """Analysis configuration DTO.

    Immutable configuration object with FAIL-FIRST validation.

    Attributes:
        # Resolvability
        assume_framework_services_registered: Treat host-provided framework
            services (logging, configuration, options) as registered.
        framework_services: Simple type names on the framework allow-list.
            Matched by simple name and generic definition (ILogger<T> matches
            "ILogger").
        max_resolution_depth: Traversal depth beyond which a path is treated
            as resolved.

        # Engine
        strict: Re-raise trace integrity errors instead of skipping the
            procedure.
        max_workers: Thread pool size. None = executor default.
        enabled_rules: Rules to report. None = all rules.
    """

    # Resolvability
    assume_framework_services_registered: bool = True
    framework_services: frozenset[str] = field(default=DEFAULT_FRAMEWORK_SERVICES)
    max_resolution_depth: int = 64

    # Engine
    strict: bool = False
    max_workers: int | None = None
    enabled_rules: frozenset[Rule] | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.max_resolution_depth < 1:
            raise ValueError(f"max_resolution_depth must be >= 1, got {self.max_resolution_depth}")

        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

        if not isinstance(self.framework_services, frozenset):
            raise TypeError("framework_services must be frozenset")

        if self.enabled_rules is not None:
            for rule in self.enabled_rules:
                if not isinstance(rule, Rule):
                    raise TypeError(f"enabled_rules must contain Rule, got {type(rule).__name__}")

    def rule_enabled(self, rule: Rule) -> bool:
        """Check if a rule is reported."""
        return self.enabled_rules is None or rule in self.enabled_rules

    def any_enabled(self, *rules: Rule) -> bool:
        """Check if at least one of the rules is reported."""
        return any(self.rule_enabled(rule) for rule in rules)

    def is_framework_service(self, simple_name: str) -> bool:
        """Check if a simple type name is on the active framework allow-list."""
        return self.assume_framework_services_registered and simple_name in self.framework_services
