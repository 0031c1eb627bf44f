"""Tests for reporters/console.py."""

import io

import pytest
from rich.text import Text

from dicheck.application.reporters.console import ConsoleConfig, ConsoleReporter
from dicheck.application.reporters.strategies import ByFileStrategy
from dicheck.domain.model.check_result import CheckResult
from dicheck.domain.model.check_stats import CheckStats
from dicheck.domain.model.dependency_graph import DependencyGraph
from dicheck.domain.model.diagnostic import Diagnostic
from dicheck.domain.model.enums import Severity
from dicheck.domain.model.rule import Rule
from tests.factories import make_diagnostic


def _result(*diagnostics: Diagnostic) -> CheckResult:
    return CheckResult(diagnostics=diagnostics, graph=DependencyGraph.empty(), stats=CheckStats.empty())


def _plain(rendered: str) -> str:
    """Rendered output without ANSI styling."""
    return Text.from_ansi(rendered).plain


class TestConsoleConfig:
    """Tests for ConsoleConfig."""

    def test_defaults(self) -> None:
        config = ConsoleConfig()
        assert config.max_diagnostics is None
        assert config.group_by is None
        assert config.width == 120

    def test_narrow_width_raises(self) -> None:
        with pytest.raises(ValueError, match="width"):
            ConsoleConfig(width=39)

    def test_negative_max_raises(self) -> None:
        with pytest.raises(ValueError, match="max_diagnostics"):
            ConsoleConfig(max_diagnostics=-1)


class TestConsoleReporter:
    """Tests for ConsoleReporter."""

    def test_render_empty(self) -> None:
        """Empty result renders header and PASSED."""
        text = _plain(ConsoleReporter().render(CheckResult.empty()))

        assert "DI CHECK RESULT" in text
        assert "Services:" in text
        assert "Diagnostics:" in text
        assert "PASSED" in text

    def test_render_diagnostics_by_rule(self) -> None:
        """Default grouping shows rule id and message."""
        text = _plain(ConsoleReporter().render(_result(make_diagnostic(line=3))))

        assert "DI003" in text
        assert "Captive dependency detected" in text
        assert "FAILED" in text

    def test_group_by_file(self) -> None:
        """ByFileStrategy shows the file path."""
        reporter = ConsoleReporter(ConsoleConfig(group_by=ByFileStrategy()))

        text = _plain(reporter.render(_result(make_diagnostic(line=3))))

        assert "Startup.cs" in text
        assert "DI003" in text

    def test_min_severity_hides(self) -> None:
        """Diagnostics below min_severity are hidden and counted."""
        error = make_diagnostic(Rule.IMPLEMENTATION_TYPE_MISMATCH, 2, "Impl", "IService")
        reporter = ConsoleReporter(ConsoleConfig(min_severity=Severity.ERROR))

        text = _plain(reporter.render(_result(error, make_diagnostic(line=5))))

        assert "DI013" in text
        assert "1 diagnostic(s) hidden" in text

    def test_max_diagnostics_hides(self) -> None:
        """max_diagnostics truncates output."""
        reporter = ConsoleReporter(ConsoleConfig(max_diagnostics=1))

        text = _plain(reporter.render(_result(make_diagnostic(line=1), make_diagnostic(line=2))))

        assert "1 diagnostic(s) hidden" in text

    def test_report_writes_render(self) -> None:
        """report() writes rendered text to output."""
        output = io.StringIO()
        ConsoleReporter(output=output).report(CheckResult.empty())

        assert "PASSED" in _plain(output.getvalue())
