"""Infrastructure adapters: fact loading, type parsing, cancellation, logging."""

from dicheck.infrastructure.cancellation import CancellationToken
from dicheck.infrastructure.fact_loader import load_facts, load_facts_file
from dicheck.infrastructure.log_config import configure_logging
from dicheck.infrastructure.type_parser import parse_type

__all__ = [
    "CancellationToken",
    "configure_logging",
    "load_facts",
    "load_facts_file",
    "parse_type",
]
