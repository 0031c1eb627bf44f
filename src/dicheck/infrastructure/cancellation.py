"""Cooperative cancellation token."""

from __future__ import annotations

import threading

from dicheck.domain.exceptions.base import AnalysisCancelled


class CancellationToken:
    """threading.Event-backed cancellation signal.

    Implements CancellationProtocol. Safe to cancel from any thread; the
    engine checks it between units of work.

    Example:
        token = CancellationToken()
        timer = threading.Timer(5.0, token.cancel, kwargs={"reason": "timeout"})
        timer.start()
        result = engine.check(facts, token=token)
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason = "cancelled"
        self._lock = threading.Lock()

    @property
    def is_cancelled(self) -> bool:
        """True once cancel() was called."""
        return self._event.is_set()

    @property
    def reason(self) -> str:
        """Reason given to the first cancel() call."""
        with self._lock:
            return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        """Request cancellation. Only the first reason is kept."""
        if not reason:
            raise ValueError("reason must not be empty")
        with self._lock:
            if not self._event.is_set():
                self._reason = reason
                self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise AnalysisCancelled if cancellation was requested.

        Raises:
            AnalysisCancelled: If cancelled
        """
        if self._event.is_set():
            raise AnalysisCancelled(self.reason)
