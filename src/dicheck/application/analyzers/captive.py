"""Captive dependency analyzer.

A longer-lived service that holds a shorter-lived dependency keeps it alive
beyond its intended lifetime (a singleton holding a scoped DbContext).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dicheck.application.analyzers._base import BaseAnalyzer
from dicheck.application.graph.dependencies import DependencyResolver
from dicheck.domain.model.diagnostic import Diagnostic
from dicheck.domain.model.enums import RuleCategory
from dicheck.domain.model.rule import Rule

if TYPE_CHECKING:
    from dicheck.domain.model.analysis_context import AnalysisContext
    from dicheck.domain.model.registration import Registration
    from dicheck.domain.model.type_shape import ParameterDependency

logger = logging.getLogger(__name__)


class CaptiveDependencyAnalyzer(BaseAnalyzer):
    """Checks every dependency graph edge for lifetime inversion.

    An edge (consumer, dependency) is captive when the consumer is strictly
    longer-lived. Edges of open-generic registrations are reported with the
    open-generic rule, since every closing instantiation inherits them.

    Skipped:
    - dependencies with no registration (resolvability reports those)
    - opaque factories (no edges)

    Enumerable dependencies compare against the shortest-lived active
    registration of the element service.

    Diagnostic severity: WARNING.
    """

    category = RuleCategory.LIFETIME
    rules = (Rule.CAPTIVE_DEPENDENCY, Rule.OPEN_GENERIC_CAPTIVE_DEPENDENCY)

    def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
        """Report captive edges in graph order."""
        resolver = DependencyResolver.from_context(context)
        registrations = context.registrations
        diagnostics: list[Diagnostic] = []

        for edge in context.dependencies.edges:
            context.checkpoint()
            consumer = registrations.effective[edge.consumer]
            target = self._target(resolver, edge.dependency)
            if target is None:
                continue
            if not consumer.lifetime.outlives(target.lifetime):
                continue
            diagnostics.append(self._make_diagnostic(consumer, edge.dependency, target))

        logger.debug("Captive check: %d edges, %d captive", context.dependencies.edge_count, len(diagnostics))
        return tuple(diagnostics)

    def _target(self, resolver: DependencyResolver, dependency: ParameterDependency) -> Registration | None:
        """Registration the dependency binds to, None if unknown."""
        if dependency.is_enumerable:
            entries = resolver.registrations.lookup_all(dependency.required)
            if not entries:
                return None
            # shortest-lived entry decides
            return max(entries, key=lambda r: (r.lifetime.rank, -r.insertion_index))

        match = resolver.request(dependency.required)
        if match is None:
            return None
        return match[0]

    def _make_diagnostic(
        self,
        consumer: Registration,
        dependency: ParameterDependency,
        target: Registration,
    ) -> Diagnostic:
        """Build captive diagnostic for one edge."""
        properties = {
            "consumer": consumer.service.display(),
            "consumer_lifetime": consumer.lifetime.word,
            "dependency": dependency.display(),
            "dependency_lifetime": target.lifetime.word,
        }

        if consumer.is_open_generic:
            return Diagnostic.create(
                Rule.OPEN_GENERIC_CAPTIVE_DEPENDENCY,
                consumer.location,
                consumer.lifetime.word,
                consumer.service.display(),
                target.lifetime.word,
                dependency.display(),
                related_locations=(target.location,),
                properties=properties,
            )

        return Diagnostic.create(
            Rule.CAPTIVE_DEPENDENCY,
            consumer.location,
            consumer.service.display(),
            target.lifetime.word,
            dependency.display(),
            related_locations=(target.location,),
            properties=properties,
        )
