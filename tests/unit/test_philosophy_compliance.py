"""Compliance tests for the FAIL-FIRST, immutability and error-hierarchy rules.

- FAIL-FIRST: invalid values raise at construction, never fall back
- Immutability: domain objects are frozen
- Hierarchy: errors derive from DICheckError, control signals from DICheckSignal
"""

from __future__ import annotations

from pathlib import Path

import pytest

from dicheck.domain.exceptions import (
    AnalysisCancelled,
    DiagnosticsFoundError,
    DICheckError,
    DICheckSignal,
    FactFormatError,
    FactValidationError,
    TraceIntegrityError,
)
from dicheck.domain.model.configuration import CheckConfig
from dicheck.domain.model.enums import EscapeSink, Lifetime
from dicheck.domain.model.fact_set import FactSet
from dicheck.domain.model.location import Location
from dicheck.domain.model.registration import Registration, TypeImplementation
from dicheck.domain.model.scope_event import BasicBlock, Create, Escape, ProcedureTrace
from dicheck.domain.model.type_ref import TypeRef
from tests.factories import make_diagnostic, make_identity, make_location, make_registration, make_shape

# =============================================================================
# FAIL-FIRST validation
# =============================================================================


class TestFailFirstValidation:
    """Invalid construction raises immediately."""

    def test_location_zero_line_raises(self) -> None:
        with pytest.raises(ValueError, match="line"):
            Location(file=Path("a.cs"), line=0)

    def test_location_negative_column_raises(self) -> None:
        with pytest.raises(ValueError, match="column"):
            Location(file=Path("a.cs"), line=1, column=-1)

    def test_registration_negative_index_raises(self) -> None:
        with pytest.raises(ValueError, match="insertion_index"):
            Registration(
                service=make_identity("IFoo"),
                implementation=TypeImplementation(type=TypeRef("Foo")),
                lifetime=Lifetime.SINGLETON,
                location=make_location(),
                insertion_index=-1,
            )

    def test_registration_lifetime_type_raises(self) -> None:
        with pytest.raises(TypeError, match="lifetime"):
            Registration(
                service=make_identity("IFoo"),
                implementation=TypeImplementation(type=TypeRef("Foo")),
                lifetime="singleton",  # type: ignore[arg-type]
                location=make_location(),
                insertion_index=0,
            )

    def test_empty_handle_raises(self) -> None:
        with pytest.raises(ValueError, match="handle"):
            Create(handle="", location=make_location())

    def test_empty_escape_value_raises(self) -> None:
        with pytest.raises(ValueError, match="value"):
            Escape(value="", sink=EscapeSink.RETURN, location=make_location())

    def test_trace_without_blocks_raises(self) -> None:
        with pytest.raises(ValueError, match="at least one block"):
            ProcedureTrace(name="Run", blocks=())

    def test_trace_duplicate_blocks_raises(self) -> None:
        with pytest.raises(ValueError, match="duplicate"):
            ProcedureTrace(name="Run", blocks=(BasicBlock(id="b"), BasicBlock(id="b")))

    def test_config_depth_raises(self) -> None:
        with pytest.raises(ValueError, match="max_resolution_depth"):
            CheckConfig(max_resolution_depth=0)

    def test_config_workers_raises(self) -> None:
        with pytest.raises(ValueError, match="max_workers"):
            CheckConfig(max_workers=0)

    def test_config_rules_type_raises(self) -> None:
        with pytest.raises(TypeError, match="enabled_rules"):
            CheckConfig(enabled_rules=frozenset({"DI003"}))  # type: ignore[arg-type]

    def test_fact_set_duplicate_shape_raises(self) -> None:
        with pytest.raises(FactValidationError, match="Foo"):
            FactSet(shapes=(make_shape("Foo"), make_shape("Foo", disposable=True)))

    def test_diagnostics_found_requires_diagnostics(self) -> None:
        with pytest.raises(ValueError, match="at least one"):
            DiagnosticsFoundError(())


# =============================================================================
# Immutability
# =============================================================================


class TestImmutability:
    """Domain objects cannot be mutated after construction."""

    def test_registration_frozen(self) -> None:
        reg = make_registration("IFoo")
        with pytest.raises(AttributeError):
            reg.lifetime = Lifetime.SCOPED  # type: ignore[misc]

    def test_shape_frozen(self) -> None:
        shape = make_shape("Foo")
        with pytest.raises(AttributeError):
            shape.is_disposable = True  # type: ignore[misc]

    def test_config_frozen(self) -> None:
        config = CheckConfig()
        with pytest.raises(AttributeError):
            config.strict = True  # type: ignore[misc]

    def test_diagnostic_properties_read_only(self) -> None:
        diagnostic = make_diagnostic()
        with pytest.raises(TypeError):
            diagnostic.properties["path"] = "x"  # type: ignore[index]


# =============================================================================
# Exception hierarchy
# =============================================================================


class TestExceptionHierarchy:
    """Errors and signals stay in separate trees."""

    @pytest.mark.parametrize(
        "error",
        [
            FactValidationError("registration", "bad"),
            FactFormatError("registrations[0]", "bad"),
            TraceIntegrityError("Run", "scope", "bad"),
            DiagnosticsFoundError((make_diagnostic(),)),
        ],
    )
    def test_errors_are_dicheck_errors(self, error: Exception) -> None:
        assert isinstance(error, DICheckError)
        assert not isinstance(error, DICheckSignal)

    def test_cancelled_is_signal(self) -> None:
        signal = AnalysisCancelled("timeout")
        assert isinstance(signal, DICheckSignal)
        assert not isinstance(signal, DICheckError)
