"""Tests for domain/model/enums.py."""

import typing

import pytest

from dicheck.domain.model.enums import Lifetime, Severity


class TestModuleImport:
    """Forward references in enum methods resolve."""

    def test_annotations_resolve(self) -> None:
        hints = typing.get_type_hints(Lifetime.outlives)
        assert hints["other"] is Lifetime
        assert typing.get_type_hints(Severity.at_least)["threshold"] is Severity


class TestLifetime:
    """Tests for Lifetime ordering and parsing."""

    def test_singleton_outlives_scoped(self) -> None:
        assert Lifetime.SINGLETON.outlives(Lifetime.SCOPED)
        assert not Lifetime.TRANSIENT.outlives(Lifetime.SCOPED)
        assert not Lifetime.SCOPED.outlives(Lifetime.SCOPED)

    def test_parse_case_insensitive(self) -> None:
        assert Lifetime.parse(" Scoped ") is Lifetime.SCOPED

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError, match="unknown lifetime 'forever'"):
            Lifetime.parse("forever")


class TestSeverity:
    """Tests for Severity.at_least."""

    def test_error_is_at_least_warning(self) -> None:
        assert Severity.ERROR.at_least(Severity.WARNING)
        assert not Severity.INFO.at_least(Severity.WARNING)
