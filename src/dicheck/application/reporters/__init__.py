"""Reporters for DI check results.

PlainTextReporter and JSONReporter use stdlib only.
ConsoleReporter renders with rich.
"""

from dicheck.application.reporters._base import BaseReporter
from dicheck.application.reporters.console import ConsoleConfig, ConsoleReporter
from dicheck.application.reporters.json_reporter import JSONReporter
from dicheck.application.reporters.plain_text import PlainTextReporter
from dicheck.application.reporters.strategies import ByFileStrategy, ByRuleStrategy, GroupStrategy

__all__ = [
    "BaseReporter",
    "PlainTextReporter",
    "JSONReporter",
    "ConsoleReporter",
    "ConsoleConfig",
    "GroupStrategy",
    "ByRuleStrategy",
    "ByFileStrategy",
]
