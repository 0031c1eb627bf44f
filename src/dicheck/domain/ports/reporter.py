"""Reporter protocol for output formatting.

Users extend dicheck by implementing this Protocol.
NOT rich-specific - users can adapt to any output format.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from dicheck.domain.model.check_result import CheckResult


class ReporterProtocol(Protocol):
    """Contract for reporters.

    dicheck provides PlainTextReporter, JSONReporter and ConsoleReporter.

    Example:
        class GitHubAnnotationsReporter:
            def report(self, result: CheckResult) -> None:
                for d in result.diagnostics:
                    loc = d.location
                    print(f"::warning file={loc.file},line={loc.line}::{d.message}")
    """

    def report(self, result: CheckResult) -> None:
        """Report check results.

        Args:
            result: Complete check result with diagnostics and stats
        """
        ...
