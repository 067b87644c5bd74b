"""Interfaces of the external collaborators a run consumes.

Concrete implementations live under huddle.providers.
"""

from abc import ABC, abstractmethod

from huddle.standup.models import Classification, RunSummary, TrackerResult, WorkItem


class TicketTracker(ABC):
    """Work-item tracker holding each participant's open items."""

    @abstractmethod
    async def list_open_items(self, contact: str) -> list[WorkItem]:
        """List open items assigned to the participant with this contact."""
        pass

    @abstractmethod
    async def transition_status(self, item_id: str, target_status: str) -> TrackerResult:
        """Move an item to the target status.

        "No valid transition" and "item not found" are reported as a
        failed result, not raised.
        """
        pass

    @abstractmethod
    async def append_note(self, item_id: str, text: str) -> TrackerResult:
        """Append a progress comment to an item."""
        pass


class ResponseClassifier(ABC):
    """Extracts structured updates from a free-text reply."""

    @abstractmethod
    async def classify(self, reply_text: str, open_items: list[WorkItem]) -> Classification:
        """Classify a reply against the items it is expected to cover."""
        pass


class ChatTransport(ABC):
    """Posts messages into the shared standup thread."""

    @abstractmethod
    async def open_thread(self, text: str) -> str | None:
        """Post the thread's root message and return the thread id."""
        pass

    @abstractmethod
    async def post_to_thread(self, thread_id: str, text: str) -> str | None:
        """Post a reply in the thread and return its message id."""
        pass


class StandupNarrator(ABC):
    """Writes the free-form texts of a run: off-topic redirects and the closing summary.

    Optional. Runs without a narrator use fixed templates, and a failing
    narrator call falls back to them.
    """

    @abstractmethod
    async def redirect(self, reason: str | None, reply_text: str) -> str:
        """A short message steering an off-topic reply back to status."""
        pass

    @abstractmethod
    async def summarize(self, summary: RunSummary) -> str:
        """A brief narrative of the team's progress and blockers."""
        pass
