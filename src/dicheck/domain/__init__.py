"""dicheck domain layer.

Pure domain logic with no external dependencies.
Only imports: typing, dataclasses, enum, pathlib, types, collections.abc
"""

from dicheck.domain.exceptions import (
    AnalysisCancelled,
    DiagnosticsFoundError,
    DICheckError,
    DICheckSignal,
    FactFormatError,
    FactValidationError,
    TraceIntegrityError,
)
from dicheck.domain.model import (
    CheckConfig,
    CheckResult,
    Diagnostic,
    FactSet,
    Lifetime,
    Location,
    Registration,
    Rule,
    RuleCategory,
    ServiceIdentity,
    Severity,
    TypeRef,
    TypeShape,
)
from dicheck.domain.ports import AnalyzerProtocol, CancellationProtocol, ReporterProtocol

__all__ = [
    # Exceptions
    "DICheckError",
    "DICheckSignal",
    "AnalysisCancelled",
    "FactValidationError",
    "FactFormatError",
    "TraceIntegrityError",
    "DiagnosticsFoundError",
    # Enums
    "Lifetime",
    "Severity",
    "RuleCategory",
    # Value objects
    "Location",
    "TypeRef",
    "ServiceIdentity",
    "TypeShape",
    # Entities
    "Registration",
    "FactSet",
    "Rule",
    "Diagnostic",
    # Configuration and results
    "CheckConfig",
    "CheckResult",
    # Ports
    "AnalyzerProtocol",
    "ReporterProtocol",
    "CancellationProtocol",
]
