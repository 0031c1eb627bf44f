"""dicheck command line: analyze a fact document and report DI defects."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from dicheck.application.reporters import ConsoleReporter, JSONReporter, PlainTextReporter
from dicheck.application.reporters._base import BaseReporter
from dicheck.application.services import DICheckEngine
from dicheck.domain.exceptions import FactFormatError, TraceIntegrityError
from dicheck.domain.model.configuration import CheckConfig
from dicheck.domain.model.enums import Severity
from dicheck.domain.model.rule import Rule
from dicheck.infrastructure.fact_loader import load_facts_file
from dicheck.infrastructure.log_config import configure_logging

logger = logging.getLogger(__name__)

app = typer.Typer(help="dicheck: static checks for dependency-injection lifetime and disposal defects.")

EXIT_DIAGNOSTICS = 1
EXIT_BAD_INPUT = 2


class OutputFormat(str, Enum):
    """Report format."""

    TEXT = "text"
    JSON = "json"
    CONSOLE = "console"


class FailOn(str, Enum):
    """Least severe diagnostic that fails the run."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def severity(self) -> Severity:
        return Severity[self.name]


def _reporter(output_format: OutputFormat, include_graph: bool) -> BaseReporter:
    match output_format:
        case OutputFormat.JSON:
            return JSONReporter(include_graph=include_graph)
        case OutputFormat.CONSOLE:
            return ConsoleReporter()
        case _:
            return PlainTextReporter()


def _parse_rules(values: list[str] | None) -> frozenset[Rule] | None:
    if not values:
        return None
    try:
        return frozenset(Rule.from_id(value) for value in values)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--rule") from e


@app.command()
def check(
    facts: Annotated[Path, typer.Argument(help="Fact document (JSON) written by the front end.")],
    output_format: Annotated[OutputFormat, typer.Option("--format", "-f", help="Report format.")] = OutputFormat.TEXT,
    fail_on: Annotated[FailOn, typer.Option(help="Least severe diagnostic that fails the run.")] = FailOn.WARNING,
    rule: Annotated[list[str] | None, typer.Option("--rule", "-r", help="Report only these rule ids.")] = None,
    no_framework_services: Annotated[
        bool, typer.Option("--no-framework-services", help="Do not assume host services are registered.")
    ] = False,
    max_depth: Annotated[int, typer.Option(help="Resolution depth treated as resolved.")] = 64,
    strict: Annotated[bool, typer.Option(help="Fail on inconsistent procedure traces.")] = False,
    workers: Annotated[int | None, typer.Option(help="Analysis threads.")] = None,
    include_graph: Annotated[bool, typer.Option(help="Emit the dependency graph (json format).")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging.")] = False,
) -> None:
    """Check FACTS and report diagnostics."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        config = CheckConfig(
            assume_framework_services_registered=not no_framework_services,
            max_resolution_depth=max_depth,
            strict=strict,
            max_workers=workers,
            enabled_rules=_parse_rules(rule),
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    try:
        fact_set = load_facts_file(facts)
    except FactFormatError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_BAD_INPUT) from e

    engine = DICheckEngine.from_config(config, reporter=_reporter(output_format, include_graph))
    try:
        result = engine.check(fact_set, config)
    except TraceIntegrityError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_BAD_INPUT) from e

    if result.at_least(fail_on.severity):
        logger.debug("Failing: diagnostics at or above %s", fail_on.value)
        raise typer.Exit(EXIT_DIAGNOSTICS)


@app.command()
def rules() -> None:
    """List the rules and their default severity."""
    for item in Rule:
        descriptor = item.descriptor
        typer.echo(f"{item.id:<7} {descriptor.severity.name:<8} {descriptor.title}")


def main() -> None:
    """Console script entry point."""
    app()
