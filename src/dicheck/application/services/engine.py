"""Main facade for DI checking.

DICheckEngine is the primary entry point for running the analysis.
Composition-based: accepts analyzers and reporter.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import TYPE_CHECKING, Self

from dicheck.application.analyzers import BaseAnalyzer, analyzers_from_config, default_analyzers
from dicheck.application.analyzers.scope_lifecycle import ScopeLifecycleAnalyzer
from dicheck.application.graph import DependencyResolver, build_dependency_graph, build_registration_graph
from dicheck.application.services.sink import DiagnosticSink
from dicheck.domain.exceptions.facts import TraceIntegrityError
from dicheck.domain.model.analysis_context import AnalysisContext
from dicheck.domain.model.check_result import CheckResult
from dicheck.domain.model.check_stats import CheckStats
from dicheck.domain.model.configuration import CheckConfig

if TYPE_CHECKING:
    from dicheck.application.analyzers import WorkUnit
    from dicheck.domain.model.fact_set import FactSet
    from dicheck.domain.model.type_shape import TypeShape
    from dicheck.domain.ports.analyzer import AnalyzerProtocol
    from dicheck.domain.ports.cancellation import CancellationProtocol
    from dicheck.domain.ports.reporter import ReporterProtocol

logger = logging.getLogger(__name__)


class DICheckEngine:
    """Main facade for DI checking.

    Composition-based: accepts analyzers and reporter as dependencies.
    Builds the registration and dependency graphs once per run, then runs
    every analyzer's work units on a thread pool.

    Factory methods:
    - with_defaults(): All analyzers
    - from_config(): Analyzers enabled by CheckConfig

    Example:
        facts = load_facts_file(Path("facts.json"))
        engine = DICheckEngine.with_defaults()
        result = engine.check(facts)
        if not result.passed:
            print(f"Diagnostics: {result.diagnostic_count}")
    """

    def __init__(
        self,
        *,
        analyzers: Sequence[AnalyzerProtocol] = (),
        reporter: ReporterProtocol | None = None,
    ) -> None:
        """Initialize engine with dependencies.

        Args:
            analyzers: Analyzers to run
            reporter: Optional reporter for output
        """
        self._analyzers = tuple(analyzers)
        self._reporter = reporter

    @classmethod
    def with_defaults(cls, *, reporter: ReporterProtocol | None = None) -> Self:
        """Create engine with every built-in analyzer.

        Args:
            reporter: Optional reporter

        Returns:
            DICheckEngine with default analyzers
        """
        return cls(analyzers=default_analyzers(), reporter=reporter)

    @classmethod
    def from_config(cls, config: CheckConfig, *, reporter: ReporterProtocol | None = None) -> Self:
        """Create engine with analyzers enabled by config.

        Args:
            config: Check configuration
            reporter: Optional reporter

        Returns:
            DICheckEngine with config-based analyzers
        """
        return cls(analyzers=analyzers_from_config(config), reporter=reporter)

    @property
    def analyzer_count(self) -> int:
        """Number of configured analyzers."""
        return len(self._analyzers)

    def check(
        self,
        facts: FactSet,
        config: CheckConfig | None = None,
        token: CancellationProtocol | None = None,
    ) -> CheckResult:
        """Run every analyzer over the facts and return the result.

        Nothing is reported when the run is cancelled or fails.

        Args:
            facts: Facts of one compilation unit
            config: Optional config (uses defaults if None)
            token: Optional cancellation token

        Returns:
            CheckResult with sorted diagnostics, dependency graph and stats

        Raises:
            AnalysisCancelled: If the token was cancelled during the run
            TraceIntegrityError: If a trace is inconsistent and config.strict
        """
        if facts is None:
            raise TypeError("facts must not be None")

        start_time = time.perf_counter()
        config = config or CheckConfig()

        context = self._build_context(facts, config, token)
        context.checkpoint()

        sink = DiagnosticSink()
        skipped = self._run_analyzers(context, sink)
        diagnostics = sink.freeze()

        end_time = time.perf_counter()
        result = CheckResult(
            diagnostics=diagnostics,
            graph=context.dependencies,
            stats=self._build_stats(context, skipped, end_time - start_time),
        )

        logger.info(
            "Checked %d registrations, %d procedures: %d diagnostics",
            result.stats.registrations_analyzed,
            result.stats.procedures_analyzed,
            result.diagnostic_count,
        )

        if self._reporter is not None:
            self._reporter.report(result)

        return result

    def _build_context(
        self,
        facts: FactSet,
        config: CheckConfig,
        token: CancellationProtocol | None,
    ) -> AnalysisContext:
        """Build graphs and the shared read-only context."""
        shapes: dict[tuple[str, int], TypeShape] = {}
        for shape in facts.shapes:
            if shape.definition_key in shapes:
                logger.debug("Duplicate shape for %s ignored", shape.identity)
                continue
            shapes[shape.definition_key] = shape

        registrations = build_registration_graph(facts.registrations)
        dependencies = build_dependency_graph(DependencyResolver(registrations, shapes))

        return AnalysisContext(
            facts=facts,
            config=config,
            registrations=registrations,
            dependencies=dependencies,
            shapes=shapes,
            token=token,
        )

    def _work_units(self, context: AnalysisContext) -> list[tuple[AnalyzerProtocol, WorkUnit]]:
        """Collect work units of all analyzers in registry order."""
        units: list[tuple[AnalyzerProtocol, WorkUnit]] = []
        for analyzer in self._analyzers:
            if isinstance(analyzer, BaseAnalyzer):
                units.extend((analyzer, unit) for unit in analyzer.work_units(context))
            else:
                units.append((analyzer, partial(analyzer.analyze, context)))
        return units

    def _run_analyzers(self, context: AnalysisContext, sink: DiagnosticSink) -> int:
        """Run all work units on the thread pool.

        Args:
            context: Shared analysis context
            sink: Sink receiving diagnostics

        Returns:
            Number of procedures skipped on trace integrity errors
        """
        units = self._work_units(context)
        if not units:
            return 0

        with ThreadPoolExecutor(max_workers=context.config.max_workers, thread_name_prefix="dicheck") as executor:
            futures: list[Future[bool]] = []
            try:
                for analyzer, unit in units:
                    context.checkpoint()
                    futures.append(executor.submit(self._run_unit, analyzer, unit, context, sink))
                completed = [future.result() for future in futures]
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

        return sum(1 for ok in completed if not ok)

    def _run_unit(
        self,
        analyzer: AnalyzerProtocol,
        unit: WorkUnit,
        context: AnalysisContext,
        sink: DiagnosticSink,
    ) -> bool:
        """Run one unit and publish its diagnostics.

        Returns:
            False if the unit was a procedure skipped on an integrity error
        """
        context.checkpoint()
        try:
            diagnostics = unit()
        except TraceIntegrityError as exc:
            if context.config.strict or not isinstance(analyzer, ScopeLifecycleAnalyzer):
                raise
            logger.warning("Skipping procedure '%s': %s", exc.procedure, exc)
            return False

        sink.extend(d for d in diagnostics if context.config.rule_enabled(d.rule))
        return True

    def _build_stats(self, context: AnalysisContext, skipped: int, analysis_time_s: float) -> CheckStats:
        """Build check statistics.

        Args:
            context: Analysis context of the run
            skipped: Procedures skipped on integrity errors
            analysis_time_s: Analysis time in seconds

        Returns:
            CheckStats with analysis metrics
        """
        scope_enabled = any(isinstance(a, ScopeLifecycleAnalyzer) for a in self._analyzers)
        traces = len(context.facts.traces) if scope_enabled else 0
        return CheckStats(
            registrations_analyzed=len(context.facts.registrations),
            services_resolved=context.dependencies.node_count,
            edges_analyzed=context.dependencies.edge_count,
            procedures_analyzed=traces - skipped,
            procedures_skipped=skipped,
            analyzers_run=len(self._analyzers),
            analysis_time_ms=analysis_time_s * 1000,
        )
