"""Diagnostics-found exception."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dicheck.domain.exceptions.base import DICheckError

if TYPE_CHECKING:
    from dicheck.domain.model.diagnostic import Diagnostic


class DiagnosticsFoundError(DICheckError):
    """DI defects found.

    Raised by CheckResult.assert_clean() when diagnostics reach the threshold.

    Attributes:
        diagnostics: All offending diagnostics
    """

    def __init__(self, diagnostics: tuple[Diagnostic, ...]) -> None:
        if not diagnostics:
            raise ValueError("DiagnosticsFoundError requires at least one diagnostic")

        self.diagnostics = diagnostics

        msg_parts = [f"Found {len(diagnostics)} DI diagnostic(s):"]
        for d in diagnostics:
            msg_parts.append(str(d))

        super().__init__("\n".join(msg_parts))
