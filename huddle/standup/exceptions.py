"""Engine exception hierarchy.

External collaborator failures never surface as these; they are
degraded at the call site. These signal programming errors.
"""


class HuddleError(Exception):
    """Base exception for huddle."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvariantViolationError(HuddleError):
    """Raised when the single-active-session invariant is broken."""


class RunStateError(HuddleError):
    """Raised when an operation is invalid for the run's current phase."""
