"""Tests for domain exceptions."""

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
from tests.factories import make_diagnostic


class TestHierarchy:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        "error",
        [
            FactValidationError("registration", "bad"),
            FactFormatError("registrations[0]", "bad"),
            TraceIntegrityError("Run", "scope", "no Create"),
            DiagnosticsFoundError((make_diagnostic(),)),
        ],
    )
    def test_errors_share_root(self, error: Exception) -> None:
        assert isinstance(error, DICheckError)

    def test_cancelled_is_signal_not_error(self) -> None:
        signal = AnalysisCancelled("timeout")
        assert isinstance(signal, DICheckSignal)
        assert not isinstance(signal, DICheckError)
        assert signal.reason == "timeout"

    def test_fact_validation_is_value_error(self) -> None:
        assert isinstance(FactValidationError("x", "y"), ValueError)


class TestFailFirst:
    """Exceptions validate their own arguments."""

    def test_format_error_requires_path(self) -> None:
        with pytest.raises(ValueError, match="path"):
            FactFormatError("", "bad")

    def test_integrity_error_requires_handle(self) -> None:
        with pytest.raises(ValueError, match="handle"):
            TraceIntegrityError("Run", "", "bad")

    def test_cancelled_requires_reason(self) -> None:
        with pytest.raises(ValueError, match="reason"):
            AnalysisCancelled("")

    def test_diagnostics_found_requires_diagnostics(self) -> None:
        with pytest.raises(ValueError, match="at least one"):
            DiagnosticsFoundError(())


class TestMessages:
    """Tests for exception messages and attributes."""

    def test_format_error_message(self) -> None:
        error = FactFormatError("registrations[2].lifetime", "unknown lifetime 'x'")
        assert "registrations[2].lifetime" in str(error)
        assert error.reason == "unknown lifetime 'x'"

    def test_integrity_error_attributes(self) -> None:
        error = TraceIntegrityError("Handle", "s1", "no Create event for handle")
        assert error.procedure == "Handle"
        assert error.handle == "s1"
        assert "'Handle'" in str(error)

    def test_diagnostics_found_lists_diagnostics(self) -> None:
        error = DiagnosticsFoundError((make_diagnostic(),))
        assert "Found 1 DI diagnostic(s)" in str(error)
        assert "DI003" in str(error)
