"""Transitive resolvability analyzer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dicheck.application.analyzers._base import BaseAnalyzer
from dicheck.application.analyzers.compatibility import implementation_satisfies, is_checked
from dicheck.application.graph.dependencies import DependencyResolver
from dicheck.domain.model.configuration import CONTAINER_SERVICES
from dicheck.domain.model.diagnostic import Diagnostic
from dicheck.domain.model.enums import RuleCategory
from dicheck.domain.model.rule import Rule

if TYPE_CHECKING:
    from dicheck.domain.model.analysis_context import AnalysisContext
    from dicheck.domain.model.configuration import CheckConfig
    from dicheck.domain.model.registration import Registration
    from dicheck.domain.model.service_identity import ServiceIdentity
    from dicheck.domain.model.type_ref import TypeRef
    from dicheck.domain.model.type_shape import ParameterDependency

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UnresolvedPath:
    """Chain of requests from a service down to the first missing one.

    Attributes:
        services: Requested identities, root first, missing service last
        registrations: Registrations along the chain (root first)
    """

    services: tuple[ServiceIdentity, ...]
    registrations: tuple[Registration, ...]

    @property
    def missing(self) -> ServiceIdentity:
        """The unregistered service."""
        return self.services[-1]

    def prepend(self, service: ServiceIdentity, registration: Registration) -> UnresolvedPath:
        """Path one level up."""
        return UnresolvedPath(
            services=(service, *self.services),
            registrations=(registration, *self.registrations),
        )

    def display(self) -> str:
        """Format as IFoo -> IBar -> IMissing."""
        return " -> ".join(service.display() for service in self.services)


@dataclass(frozen=True, slots=True)
class _Outcome:
    """Result of expanding one request.

    Attributes:
        path: First unresolved path below the request, None if resolved
        exact: False if a cycle or the depth bound cut the walk short, in
            which case a "resolved" outcome must not be memoized
    """

    path: UnresolvedPath | None
    exact: bool


_RESOLVED = _Outcome(path=None, exact=True)


class _Walk:
    """Bounded depth-first walk sharing memoized outcomes across roots."""

    def __init__(self, resolver: DependencyResolver, config: CheckConfig) -> None:
        self._resolver = resolver
        self._config = config
        # keyed by normalized identity; paths keep the requested spelling
        self._memo: dict[ServiceIdentity, _Outcome] = {}
        self._on_path: set[ServiceIdentity] = set()

    def check_root(self, registration: Registration) -> UnresolvedPath | None:
        """First unresolved path below a root registration."""
        self._on_path = {registration.service.normalized()}
        outcome = self._expand(registration, (), depth=0)
        if outcome.path is None:
            return None
        return outcome.path.prepend(registration.service, registration)

    def _expand(
        self,
        registration: Registration,
        arguments: tuple[TypeRef, ...],
        depth: int,
    ) -> _Outcome:
        """Walk dependencies of one registration in parameter order."""
        if self._resolver.is_opaque(registration):
            return _RESOLVED

        exact = True
        for dependency in self._resolver.dependencies_of(registration, arguments):
            outcome = self._check(dependency, depth + 1)
            if outcome.path is not None:
                return outcome
            exact = exact and outcome.exact
        return _Outcome(path=None, exact=exact)

    def _check(self, dependency: ParameterDependency, depth: int) -> _Outcome:
        """Decide one dependency: resolved, unresolved, or expand."""
        required = dependency.required
        simple_name = required.type.simple_name

        if dependency.has_default_or_optional:
            return _RESOLVED
        if required.type.is_parameter:
            return _RESOLVED
        if dependency.is_enumerable:
            if self._resolver.registrations.lookup_all(required):
                return _RESOLVED
            return _Outcome(path=UnresolvedPath(services=(required,), registrations=()), exact=True)
        if simple_name in CONTAINER_SERVICES:
            return _RESOLVED

        match = self._resolver.request(required)
        if match is None:
            if self._config.is_framework_service(simple_name):
                return _RESOLVED
            return _Outcome(path=UnresolvedPath(services=(required,), registrations=()), exact=True)

        registration, arguments = match
        key = required.normalized()

        if key in self._on_path:
            # cycle: resolved without expansion
            return _Outcome(path=None, exact=False)
        if depth > self._config.max_resolution_depth:
            return _Outcome(path=None, exact=False)

        cached = self._memo.get(key)
        if cached is not None:
            return cached

        self._on_path.add(key)
        try:
            outcome = self._expand(registration, arguments, depth)
        finally:
            self._on_path.discard(key)

        if outcome.path is not None:
            outcome = _Outcome(path=outcome.path.prepend(required, registration), exact=True)
            self._memo[key] = outcome
        elif outcome.exact:
            self._memo[key] = outcome
        return outcome


class ResolvabilityAnalyzer(BaseAnalyzer):
    """Reports services whose dependency chain reaches an unregistered service.

    A dependency is resolved if it has an effective registration (exact or
    via the open-generic definition), is provided by the container itself,
    is on the framework allow-list, is enumerable with at least one
    registration, or has a default value.

    Policies:
    - cycles are resolved (never reported)
    - factories and instances are resolved leaves
    - walks deeper than max_resolution_depth are resolved
    - roots failing the compatibility check are skipped

    One diagnostic per root: the first unresolved service in parameter
    declaration order, with its path.

    Diagnostic severity: WARNING.
    """

    category = RuleCategory.STRUCTURAL
    rules = (Rule.UNRESOLVABLE_DEPENDENCY,)

    def analyze(self, context: AnalysisContext) -> tuple[Diagnostic, ...]:
        """Walk every effective registration in registration order."""
        resolver = DependencyResolver.from_context(context)
        walk = _Walk(resolver, context.config)
        diagnostics: list[Diagnostic] = []

        for registration in context.registrations.effective_registrations():
            context.checkpoint()
            if self._is_incompatible(context, registration):
                logger.debug("Skipping incompatible root %s", registration.describe())
                continue

            path = walk.check_root(registration)
            if path is None:
                continue

            diagnostics.append(
                Diagnostic.create(
                    Rule.UNRESOLVABLE_DEPENDENCY,
                    registration.location,
                    registration.service.display(),
                    path.missing.display(),
                    related_locations=tuple(r.location for r in path.registrations[1:]),
                    properties={
                        "service": registration.service.display(),
                        "missing": path.missing.display(),
                        "path": path.display(),
                    },
                )
            )

        return tuple(diagnostics)

    def _is_incompatible(self, context: AnalysisContext, registration: Registration) -> bool:
        """True if the root would fail activation before resolution."""
        if not is_checked(registration):
            return False
        impl_type = registration.implementation_type
        shape = context.shape_for(impl_type) if impl_type is not None else None
        if shape is None:
            return False
        return not implementation_satisfies(registration, shape)
