"""Cancellation protocol checked between units of work."""

from typing import Protocol


class CancellationProtocol(Protocol):
    """Cooperative cancellation signal."""

    @property
    def is_cancelled(self) -> bool:
        """True once cancellation was requested."""
        ...

    def raise_if_cancelled(self) -> None:
        """Raise AnalysisCancelled if cancellation was requested."""
        ...
