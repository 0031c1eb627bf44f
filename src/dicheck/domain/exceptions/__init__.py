"""Domain exceptions."""

from dicheck.domain.exceptions.base import AnalysisCancelled, DICheckError, DICheckSignal
from dicheck.domain.exceptions.facts import (
    FactFormatError,
    FactValidationError,
    TraceIntegrityError,
)
from dicheck.domain.exceptions.violation import DiagnosticsFoundError

__all__ = [
    "DICheckError",
    "DICheckSignal",
    "AnalysisCancelled",
    "FactValidationError",
    "FactFormatError",
    "TraceIntegrityError",
    "DiagnosticsFoundError",
]
