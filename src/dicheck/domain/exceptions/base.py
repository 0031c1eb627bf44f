"""Base exceptions for dicheck domain."""


class DICheckError(Exception):
    """Root exception for all dicheck errors.

    All domain exceptions inherit from this.
    Allows catching all dicheck-specific errors.
    """


# N818: Signals are NOT errors, no "Error" suffix per PEP 8.
class DICheckSignal(Exception):  # noqa: N818
    """Base for all dicheck signal exceptions (flow control, not errors).

    Like StopIteration, GeneratorExit.
    Allows: except DICheckSignal to catch all library signals.
    """


class AnalysisCancelled(DICheckSignal):
    """Analysis run was cancelled through its CancellationToken.

    Raised between units of work. No partial diagnostics are published.

    Attributes:
        reason: Why the run was cancelled
    """

    def __init__(self, reason: str = "cancelled") -> None:
        if not reason:
            raise ValueError("reason must not be empty")
        self.reason = reason
        super().__init__(f"Analysis cancelled: {reason}")
