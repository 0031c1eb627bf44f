"""pytest fixtures for DI checks.

User overrides dicheck_config in their conftest.py.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from dicheck.application.services import DICheckEngine
from dicheck.domain.model.check_result import CheckResult
from dicheck.domain.model.configuration import CheckConfig
from dicheck.domain.model.fact_set import FactSet
from dicheck.infrastructure.fact_loader import load_facts_file


def _get_ini_value(config: pytest.Config, name: str, default: str) -> str:
    """Get ini value from pytest config with fallback.

    Args:
        config: pytest Config object
        name: ini option name
        default: default value if not set

    Returns:
        String value of ini option
    """
    value = config.getini(name)
    if value:
        return str(value)
    return default


@pytest.fixture(scope="session")
def dicheck_config() -> CheckConfig:
    """Default check configuration.

    Override in conftest.py for custom settings.

    Returns:
        CheckConfig with defaults
    """
    return CheckConfig()


@pytest.fixture(scope="session")
def dicheck_facts(request: pytest.FixtureRequest) -> FactSet:
    """Load the fact document configured by dicheck_facts_file.

    Relative paths are resolved against the pytest rootdir.

    Returns:
        Parsed FactSet
    """
    root_dir = Path(str(getattr(request.config, "rootdir", ".")))
    facts_file = _get_ini_value(request.config, "dicheck_facts_file", "")
    if not facts_file:
        raise pytest.UsageError("dicheck_facts_file is not configured in pytest.ini or pyproject.toml")

    path = root_dir / facts_file
    if not path.exists():
        raise FileNotFoundError(
            f"dicheck_facts_file '{path}' does not exist. "
            f"Configure dicheck_facts_file in pytest.ini or pyproject.toml."
        )
    return load_facts_file(path)


@pytest.fixture(scope="session")
def dicheck_engine(dicheck_config: CheckConfig) -> DICheckEngine:
    """Engine with the analyzers enabled by dicheck_config.

    Returns:
        DICheckEngine without reporter
    """
    return DICheckEngine.from_config(dicheck_config)


@pytest.fixture(scope="session")
def dicheck_result(
    dicheck_engine: DICheckEngine,
    dicheck_facts: FactSet,
    dicheck_config: CheckConfig,
) -> CheckResult:
    """Check result for the configured fact document.

    Use result.assert_clean() in a test to fail on diagnostics.

    Returns:
        CheckResult of one engine run
    """
    return dicheck_engine.check(dicheck_facts, dicheck_config)
