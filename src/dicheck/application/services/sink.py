"""Thread-safe diagnostic sink."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dicheck.domain.model.diagnostic import Diagnostic


@dataclass
class DiagnosticSink:
    """Collects diagnostics from concurrent work units.

    NOT frozen because it's a mutable collector.
    Thread-safety via Lock. Deduplicates by (rule, location, message);
    freeze() returns a deterministic order independent of arrival order.
    """

    _diagnostics: dict[tuple[str, str, str], Diagnostic] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def append(self, diagnostic: Diagnostic) -> None:
        """Add one diagnostic. Thread-safe."""
        with self._lock:
            self._diagnostics.setdefault(diagnostic.key, diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        """Add many diagnostics under one lock acquisition. Thread-safe."""
        batch = tuple(diagnostics)
        with self._lock:
            for diagnostic in batch:
                self._diagnostics.setdefault(diagnostic.key, diagnostic)

    def freeze(self) -> tuple[Diagnostic, ...]:
        """Sorted snapshot: (file, line, column, rule), then message. Thread-safe."""
        with self._lock:
            items = tuple(self._diagnostics.values())
        return tuple(sorted(items, key=lambda d: (d.sort_key, d.message)))

    def __len__(self) -> int:
        """Current number of unique diagnostics. Thread-safe."""
        with self._lock:
            return len(self._diagnostics)
