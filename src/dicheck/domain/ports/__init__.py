"""Domain ports (interfaces/protocols)."""

from dicheck.domain.ports.analyzer import AnalyzerProtocol
from dicheck.domain.ports.cancellation import CancellationProtocol
from dicheck.domain.ports.reporter import ReporterProtocol

__all__ = [
    "AnalyzerProtocol",
    "CancellationProtocol",
    "ReporterProtocol",
]
