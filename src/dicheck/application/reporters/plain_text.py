"""Plain text reporter using print().

Stdlib-only reporter for simple text output.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from dicheck.application.reporters._base import BaseReporter

if TYPE_CHECKING:
    from dicheck.domain.model.check_result import CheckResult
    from dicheck.domain.model.diagnostic import Diagnostic


class PlainTextReporter(BaseReporter):
    """Plain text reporter using print().

    Outputs to stdout by default, can be configured for any TextIO.
    """

    def __init__(self, output: TextIO | None = None) -> None:
        """Initialize reporter.

        Args:
            output: Output stream (default: sys.stdout)
        """
        self._output = output if output is not None else sys.stdout

    def report(self, result: CheckResult) -> None:
        """Report check results as plain text.

        Args:
            result: Complete check result
        """
        self._report_header()
        self._report_summary(result)

        if result.diagnostics:
            self._report_diagnostics(result.diagnostics)

        self._report_footer(result)

    def _write(self, text: str = "") -> None:
        """Write line to output."""
        print(text, file=self._output)

    def _report_header(self) -> None:
        """Print report header."""
        self._write("=" * 70)
        self._write("DI Check Results")
        self._write("=" * 70)

    def _report_summary(self, result: CheckResult) -> None:
        """Print summary section."""
        self._write()
        self._write("Summary:")
        self._write(f"  Services: {result.stats.services_resolved}")
        self._write(f"  Procedures: {result.stats.procedures_analyzed}")
        if result.stats.procedures_skipped:
            self._write(f"    Skipped: {result.stats.procedures_skipped}")
        self._write(f"  Diagnostics: {result.diagnostic_count}")
        self._write(f"    Errors: {result.error_count}")
        self._write(f"    Warnings: {result.warning_count}")
        self._write(f"    Info: {result.info_count}")
        self._write(f"  Status: {'PASS' if result.passed else 'FAIL'}")

    def _report_diagnostics(self, diagnostics: tuple[Diagnostic, ...]) -> None:
        """Print diagnostics section."""
        self._write()
        self._write("-" * 70)
        self._write(f"Diagnostics ({len(diagnostics)}):")
        self._write("-" * 70)

        for i, diagnostic in enumerate(diagnostics, start=1):
            self._write()
            self._write(f"{i}. [{diagnostic.severity.name}] {diagnostic.rule.id} {diagnostic.rule.descriptor.title}")
            self._write(f"   {diagnostic.message}")
            self._write(f"   At: {diagnostic.location}")
            for related in diagnostic.related_locations:
                self._write(f"   See: {related}")
            path = diagnostic.properties.get("path")
            if path:
                self._write(f"   Path: {path}")

    def _report_footer(self, result: CheckResult) -> None:
        """Print report footer."""
        self._write()
        self._write("=" * 70)
        status = "PASSED" if result.passed else "FAILED"
        self._write(f"Result: {status}")
        self._write("=" * 70)
