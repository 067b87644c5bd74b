"""Tracker error types."""

from huddle.standup.exceptions import HuddleError


class TrackerError(HuddleError):
    """The tracker could not be reached or answered unexpectedly."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
