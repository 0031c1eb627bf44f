"""JSON reporter for machine-readable output.

Stdlib-only reporter for JSON output.
"""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, TextIO

from dicheck.application.reporters._base import BaseReporter

if TYPE_CHECKING:
    from dicheck.domain.model.check_result import CheckResult
    from dicheck.domain.model.diagnostic import Diagnostic
    from dicheck.domain.model.location import Location


class JSONReporter(BaseReporter):
    """JSON reporter for machine-readable output.

    Outputs check results as JSON for CI/CD integration or editor
    front ends that turn diagnostics back into annotations.
    """

    def __init__(
        self,
        output: TextIO | None = None,
        *,
        indent: int | None = 2,
        include_graph: bool = False,
    ) -> None:
        """Initialize reporter.

        Args:
            output: Output stream (default: sys.stdout)
            indent: JSON indentation (default: 2, None for compact)
            include_graph: Also emit the dependency graph
        """
        self._output = output if output is not None else sys.stdout
        self._indent = indent
        self._include_graph = include_graph

    def report(self, result: CheckResult) -> None:
        """Report check results as JSON.

        Args:
            result: Complete check result
        """
        data = self._result_to_dict(result)
        json.dump(data, self._output, indent=self._indent)
        self._output.write("\n")

    def _result_to_dict(self, result: CheckResult) -> dict[str, object]:
        """Convert CheckResult to JSON-serializable dict.

        Args:
            result: Check result to convert

        Returns:
            Dictionary suitable for json.dump()
        """
        data: dict[str, object] = {
            "passed": result.passed,
            "summary": {
                "diagnostic_count": result.diagnostic_count,
                "error_count": result.error_count,
                "warning_count": result.warning_count,
                "info_count": result.info_count,
            },
            "diagnostics": [self._diagnostic_to_dict(d) for d in result.diagnostics],
            "stats": {
                "registrations_analyzed": result.stats.registrations_analyzed,
                "services_resolved": result.stats.services_resolved,
                "edges_analyzed": result.stats.edges_analyzed,
                "procedures_analyzed": result.stats.procedures_analyzed,
                "procedures_skipped": result.stats.procedures_skipped,
                "analyzers_run": result.stats.analyzers_run,
                "analysis_time_ms": result.stats.analysis_time_ms,
            },
        }
        if self._include_graph:
            data["graph"] = result.graph.to_dict()
        return data

    def _diagnostic_to_dict(self, diagnostic: Diagnostic) -> dict[str, object]:
        """Convert Diagnostic to JSON-serializable dict.

        Args:
            diagnostic: Diagnostic to convert

        Returns:
            Dictionary suitable for json.dump()
        """
        return {
            "rule_id": diagnostic.rule.id,
            "title": diagnostic.rule.descriptor.title,
            "message": diagnostic.message,
            "severity": diagnostic.severity.name,
            "category": diagnostic.category.name,
            "location": self._location_to_dict(diagnostic.location),
            "related_locations": [self._location_to_dict(loc) for loc in diagnostic.related_locations],
            "properties": dict(diagnostic.properties),
        }

    def _location_to_dict(self, location: Location) -> dict[str, object]:
        return {
            "file": str(location.file),
            "line": location.line,
            "column": location.column,
        }
