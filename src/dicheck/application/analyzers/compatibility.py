"""Implementation compatibility analyzer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dicheck.application.analyzers._base import BaseAnalyzer
from dicheck.domain.model.diagnostic import Diagnostic
from dicheck.domain.model.enums import RuleCategory
from dicheck.domain.model.registration import TypeImplementation
from dicheck.domain.model.rule import Rule

if TYPE_CHECKING:
    from dicheck.domain.model.analysis_context import AnalysisContext
    from dicheck.domain.model.registration import Registration
    from dicheck.domain.model.type_shape import TypeShape


def is_checked(registration: Registration) -> bool:
    """True for explicit-types registrations the host compiler does not verify."""
    match registration.implementation:
        case TypeImplementation(explicit_types=True):
            return not registration.is_self_registration
        case _:
            return False


def implementation_satisfies(registration: Registration, shape: TypeShape) -> bool:
    """Check the implementation provides the registered service.

    Open services are closed over the implementation's own type parameters
    (IRepo<T> + Repository<TEntity> → IRepo<TEntity>), positionally. Closed
    generic implementations close the shape's capabilities over their
    arguments (Repository<Order> provides IRepo<Order>).

    Args:
        registration: Type-form registration
        shape: Shape of its implementation type

    Returns:
        True if the service is among the shape's capabilities
    """
    service = registration.service.type
    impl_type = registration.implementation_type
    if impl_type is None:
        return True

    if service.is_open:
        if not shape.identity.is_generic_definition or not impl_type.is_generic_definition:
            return False
        service_params = list(dict.fromkeys(service.parameters()))
        if len(service_params) != shape.identity.arity:
            return False
        mapping = dict(zip(service_params, shape.identity.arguments, strict=True))
        return shape.has_capability(service.substitute(mapping))

    closing = shape.closing_map(impl_type.arguments)
    if not closing:
        return shape.has_capability(service)
    return any(service == capability.substitute(closing) for capability in (shape.identity, *shape.capabilities))


class ImplementationCompatibilityAnalyzer(BaseAnalyzer):
    """Validates explicit-types registrations against implementation capabilities.

    Checks typeof(IService), typeof(Impl) registrations, which the host
    compiler does not type-check. Generic, factory and instance forms are
    skipped (compiler-enforced), as are implementations without a shape.

    Diagnostic severity: ERROR (guaranteed activation failure).
    """

    category = RuleCategory.STRUCTURAL
    rules = (Rule.IMPLEMENTATION_TYPE_MISMATCH,)

    def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
        """Report mismatched effective registrations in registration order."""
        diagnostics: list[Diagnostic] = []

        for registration in context.registrations.effective_registrations():
            context.checkpoint()
            if not is_checked(registration):
                continue
            impl_type = registration.implementation_type
            shape = context.shape_for(impl_type) if impl_type is not None else None
            if impl_type is None or shape is None:
                continue
            if implementation_satisfies(registration, shape):
                continue

            diagnostics.append(
                Diagnostic.create(
                    Rule.IMPLEMENTATION_TYPE_MISMATCH,
                    registration.location,
                    impl_type.display(),
                    registration.service.display(),
                    properties={
                        "service": registration.service.display(),
                        "implementation": impl_type.display(),
                    },
                )
            )

        return tuple(diagnostics)
