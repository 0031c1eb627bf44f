"""Static provider cache analyzer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dicheck.application.analyzers._base import BaseAnalyzer
from dicheck.domain.model.diagnostic import Diagnostic
from dicheck.domain.model.enums import RuleCategory
from dicheck.domain.model.rule import Rule

if TYPE_CHECKING:
    from dicheck.domain.model.analysis_context import AnalysisContext


class StaticProviderCacheAnalyzer(BaseAnalyzer):
    """Flags providers and scope factories held in static storage.

    Not a flow machine: a static field or property of a provider type
    outlives every scope, so the declaration itself is reported.

    Diagnostic severity: WARNING.
    """

    category = RuleCategory.SCOPE
    rules = (Rule.STATIC_PROVIDER_CACHE,)

    def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
        """Report static provider storages in declaration order."""
        return tuple(
            Diagnostic.create(
                Rule.STATIC_PROVIDER_CACHE,
                storage.location,
                storage.display_type,
                storage.member,
                properties={"member": storage.member, "type": storage.display_type},
            )
            for storage in context.facts.storages
            if storage.is_static and storage.value_type.is_provider
        )
