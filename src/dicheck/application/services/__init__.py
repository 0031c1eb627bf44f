"""Application services."""

from dicheck.application.services.engine import DICheckEngine
from dicheck.application.services.sink import DiagnosticSink

__all__ = [
    "DICheckEngine",
    "DiagnosticSink",
]
