"""dicheck application layer.

Graph construction, analyzers, the engine facade and reporters.
"""

from dicheck.application.analyzers import analyzers_from_config, default_analyzers
from dicheck.application.graph import build_dependency_graph, build_registration_graph
from dicheck.application.reporters import ConsoleReporter, JSONReporter, PlainTextReporter
from dicheck.application.services import DiagnosticSink, DICheckEngine

__all__ = [
    "DICheckEngine",
    "DiagnosticSink",
    "build_registration_graph",
    "build_dependency_graph",
    "default_analyzers",
    "analyzers_from_config",
    "PlainTextReporter",
    "JSONReporter",
    "ConsoleReporter",
]
