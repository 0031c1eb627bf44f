"""Disposable transient analyzer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dicheck.application.analyzers._base import BaseAnalyzer
from dicheck.domain.model.diagnostic import Diagnostic
from dicheck.domain.model.enums import Lifetime, RuleCategory
from dicheck.domain.model.rule import Rule

if TYPE_CHECKING:
    from dicheck.domain.model.analysis_context import AnalysisContext


class DisposableTransientAnalyzer(BaseAnalyzer):
    """Flags transient registrations whose implementation is disposable.

    Every registration call is checked, not only the effective one.
    Factory and instance registrations are skipped: the factory owns the
    instance it creates.

    Diagnostic severity: WARNING.
    """

    category = RuleCategory.LIFETIME
    rules = (Rule.DISPOSABLE_TRANSIENT,)

    def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
        """Report disposable transients in registration order."""
        diagnostics: list[Diagnostic] = []

        for registration in context.registrations.all_registrations():
            context.checkpoint()
            if registration.lifetime is not Lifetime.TRANSIENT:
                continue
            impl_type = registration.implementation_type
            if impl_type is None:
                continue
            shape = context.shape_for(impl_type)
            if shape is None or shape.disposal_interface is None:
                continue

            diagnostics.append(
                Diagnostic.create(
                    Rule.DISPOSABLE_TRANSIENT,
                    registration.location,
                    impl_type.display(),
                    shape.disposal_interface,
                    properties={
                        "service": registration.service.display(),
                        "implementation": impl_type.display(),
                        "interface": shape.disposal_interface,
                    },
                )
            )

        return tuple(diagnostics)
