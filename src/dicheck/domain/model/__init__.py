"""Domain model entities."""

# Analysis
from dicheck.domain.model.analysis_context import AnalysisContext

# Results
from dicheck.domain.model.check_result import CheckResult
from dicheck.domain.model.check_stats import CheckStats

# Configuration
from dicheck.domain.model.configuration import CONTAINER_SERVICES, DEFAULT_FRAMEWORK_SERVICES, CheckConfig

# Graphs
from dicheck.domain.model.dependency_graph import DependencyEdge, DependencyGraph, DependencyNode
from dicheck.domain.model.diagnostic import Diagnostic
from dicheck.domain.model.enums import (
    EscapeSink,
    HandleKind,
    HandleState,
    Lifetime,
    ProviderType,
    RuleCategory,
    Severity,
)
from dicheck.domain.model.fact_set import FactSet
from dicheck.domain.model.location import Location

# Registrations
from dicheck.domain.model.registration import (
    FactoryImplementation,
    Implementation,
    InstanceImplementation,
    Registration,
    TypeImplementation,
)
from dicheck.domain.model.registration_graph import RegistrationConflict, RegistrationGraph
from dicheck.domain.model.rule import DESCRIPTORS, Rule, RuleDescriptor

# Scope traces
from dicheck.domain.model.scope_event import (
    BasicBlock,
    Create,
    Dispose,
    Escape,
    ProcedureTrace,
    Resolve,
    ScopeEvent,
    Use,
)
from dicheck.domain.model.service_identity import ServiceIdentity, ServiceKey
from dicheck.domain.model.storage import StorageFact
from dicheck.domain.model.type_ref import TypeRef
from dicheck.domain.model.type_shape import ParameterDependency, TypeShape

__all__ = [
    # Enums
    "Lifetime",
    "Severity",
    "RuleCategory",
    "HandleKind",
    "HandleState",
    "EscapeSink",
    "ProviderType",
    # Value objects
    "Location",
    "TypeRef",
    "ServiceIdentity",
    "ServiceKey",
    "ParameterDependency",
    "TypeShape",
    "StorageFact",
    # Registrations
    "Registration",
    "Implementation",
    "TypeImplementation",
    "FactoryImplementation",
    "InstanceImplementation",
    # Scope traces
    "ScopeEvent",
    "Create",
    "Dispose",
    "Resolve",
    "Escape",
    "Use",
    "BasicBlock",
    "ProcedureTrace",
    # Facts
    "FactSet",
    # Graphs
    "RegistrationGraph",
    "RegistrationConflict",
    "DependencyNode",
    "DependencyEdge",
    "DependencyGraph",
    # Rules
    "Rule",
    "RuleDescriptor",
    "DESCRIPTORS",
    "Diagnostic",
    # Configuration
    "CheckConfig",
    "DEFAULT_FRAMEWORK_SERVICES",
    "CONTAINER_SERVICES",
    # Analysis
    "AnalysisContext",
    # Results
    "CheckStats",
    "CheckResult",
]
