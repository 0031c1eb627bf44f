"""dicheck - static analysis of dependency-injection lifetime and disposal defects."""

__version__ = "0.1.0"

from dicheck.application.services import DICheckEngine
from dicheck.domain.model import CheckConfig, CheckResult, Diagnostic, FactSet, Rule, Severity
from dicheck.infrastructure.fact_loader import load_facts, load_facts_file

__all__ = [
    "CheckConfig",
    "CheckResult",
    "DICheckEngine",
    "Diagnostic",
    "FactSet",
    "Rule",
    "Severity",
    "__version__",
    "load_facts",
    "load_facts_file",
]
