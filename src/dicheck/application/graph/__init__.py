"""Registration and dependency graph construction."""

from dicheck.application.graph.builder import build_registration_graph
from dicheck.application.graph.dependencies import DependencyResolver, build_dependency_graph

__all__ = [
    "build_registration_graph",
    "build_dependency_graph",
    "DependencyResolver",
]
