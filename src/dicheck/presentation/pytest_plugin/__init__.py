"""pytest plugin for dicheck.

Provides fixtures for DI checks in a test suite:
    dicheck_config: Check configuration (override in conftest.py)
    dicheck_facts: FactSet loaded from the configured fact document
    dicheck_engine: DICheckEngine built from dicheck_config
    dicheck_result: CheckResult of running the engine on dicheck_facts

Configuration (pytest.ini or pyproject.toml):
    dicheck_facts_file: Fact document to analyze, relative to rootdir
"""

from __future__ import annotations

from typing import TYPE_CHECKING

# Register fixtures from fixtures module
from dicheck.presentation.pytest_plugin.fixtures import (
    dicheck_config,
    dicheck_engine,
    dicheck_facts,
    dicheck_result,
)

if TYPE_CHECKING:
    import pytest

# Export fixtures for pytest discovery
__all__ = [
    "dicheck_config",
    "dicheck_engine",
    "dicheck_facts",
    "dicheck_result",
]


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register ini options."""
    parser.addini("dicheck_facts_file", help="Fact document analyzed by the dicheck fixtures", default="")


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest plugin with markers."""
    config.addinivalue_line(
        "markers",
        "dicheck: mark test as DI check",
    )
