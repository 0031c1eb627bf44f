"""Registration conflict analyzer (ignored TryAdd, duplicate Add)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dicheck.application.analyzers._base import BaseAnalyzer
from dicheck.domain.model.diagnostic import Diagnostic
from dicheck.domain.model.enums import RuleCategory
from dicheck.domain.model.rule import Rule

if TYPE_CHECKING:
    from dicheck.domain.model.analysis_context import AnalysisContext


class RegistrationConflictAnalyzer(BaseAnalyzer):
    """Reports every registration the graph builder nullified.

    The primary location is the nullified registration; the related
    location is the registration that nullifies it.

    Diagnostic severity: INFO (stylistic signal).
    """

    category = RuleCategory.STYLE
    rules = (Rule.TRY_ADD_IGNORED, Rule.DUPLICATE_REGISTRATION)

    def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
        """Convert registration conflicts into diagnostics."""
        diagnostics: list[Diagnostic] = []

        for conflict in context.registrations.conflicts:
            nullified = conflict.registration
            blocker = conflict.blocker
            diagnostics.append(
                Diagnostic.create(
                    conflict.rule,
                    nullified.location,
                    nullified.service.display(),
                    blocker.location,
                    related_locations=(blocker.location,),
                    properties={
                        "service": nullified.service.display(),
                        "effective": blocker.describe(),
                    },
                )
            )

        return tuple(diagnostics)
