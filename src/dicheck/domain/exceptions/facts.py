"""Fact exceptions.

Raised when the front end hands the core facts that break model invariants.
"""

from __future__ import annotations

from dicheck.domain.exceptions.base import DICheckError


class FactValidationError(DICheckError, ValueError):
    """Fact violates a structural invariant.

    Inherits ValueError for semantic correctness (bad value).

    Attributes:
        fact: Short description of the offending fact
        reason: Why the fact is invalid
    """

    def __init__(self, fact: str, reason: str) -> None:
        if not fact:
            raise ValueError("fact must not be empty")
        if not reason:
            raise ValueError("reason must not be empty")

        self.fact = fact
        self.reason = reason
        super().__init__(f"Invalid fact {fact}: {reason}")


class FactFormatError(DICheckError):
    """Serialized fact document is malformed.

    Attributes:
        path: Dotted path inside the document (e.g. "registrations[2].lifetime")
        reason: Why the entry could not be read
    """

    def __init__(self, path: str, reason: str) -> None:
        if not path:
            raise ValueError("path must not be empty")
        if not reason:
            raise ValueError("reason must not be empty")

        self.path = path
        self.reason = reason
        super().__init__(f"Malformed facts at {path}: {reason}")


class TraceIntegrityError(DICheckError):
    """Procedure trace references a handle that was never created.

    A programming error in the front end. The engine converts it into a
    skipped procedure unless strict mode is enabled.

    Attributes:
        procedure: Procedure name
        handle: Dangling handle or value identifier
    """

    def __init__(self, procedure: str, handle: str, reason: str) -> None:
        if not procedure:
            raise ValueError("procedure must not be empty")
        if not handle:
            raise ValueError("handle must not be empty")

        self.procedure = procedure
        self.handle = handle
        self.reason = reason
        super().__init__(f"Trace of '{procedure}' is inconsistent at '{handle}': {reason}")
