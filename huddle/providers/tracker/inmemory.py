"""In-memory ticket tracker for testing and local runs."""

from huddle.standup.collaborators import TicketTracker
from huddle.standup.models import TrackerResult, WorkItem


class InMemoryTicketTracker(TicketTracker):
    """Ticket tracker backed by dicts.

    Items are assigned per contact. Every item accepts any target
    status unless `allowed_statuses` restricts it.
    """

    def __init__(self) -> None:
        self._items: dict[str, WorkItem] = {}
        self._assignments: dict[str, list[str]] = {}
        self._allowed: dict[str, set[str]] = {}
        self.notes: dict[str, list[str]] = {}
        self.transitions: list[tuple[str, str]] = []

    def assign(
        self,
        contact: str,
        item: WorkItem,
        allowed_statuses: list[str] | None = None,
    ) -> None:
        """Assign an item to a contact."""
        self._items[item.item_id] = item
        self._assignments.setdefault(contact, []).append(item.item_id)
        if allowed_statuses is not None:
            self._allowed[item.item_id] = {s.lower() for s in allowed_statuses}

    def get_item(self, item_id: str) -> WorkItem | None:
        return self._items.get(item_id)

    async def list_open_items(self, contact: str) -> list[WorkItem]:
        return [
            self._items[item_id]
            for item_id in self._assignments.get(contact, [])
            if self._items[item_id].status.lower() != "done"
        ]

    async def transition_status(self, item_id: str, target_status: str) -> TrackerResult:
        item = self._items.get(item_id)
        if item is None:
            return TrackerResult(success=False, error=f"Issue {item_id} not found")

        allowed = self._allowed.get(item_id)
        if allowed is not None and target_status.lower() not in allowed:
            return TrackerResult(
                success=False,
                error=f"No transition to '{target_status}' for {item_id}",
            )

        self._items[item_id] = item.model_copy(update={"status": target_status})
        self.transitions.append((item_id, target_status))
        return TrackerResult(success=True)

    async def append_note(self, item_id: str, text: str) -> TrackerResult:
        if item_id not in self._items:
            return TrackerResult(success=False, error=f"Issue {item_id} not found")
        self.notes.setdefault(item_id, []).append(text)
        return TrackerResult(success=True)
