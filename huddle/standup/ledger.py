"""Cross-participant blocker registry for a single run."""

from huddle.observability.logging import get_logger
from huddle.standup.matching import name_variants
from huddle.standup.models import BlockerNotice, Participant

logger = get_logger(__name__)


class BlockerLedger:
    """Pending blocker notices keyed by the name of the blocking participant.

    Entries are read, never removed, when the named participant's turn
    arrives. The ledger lives for one run and is cleared when a run starts.
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[BlockerNotice]] = {}

    def __len__(self) -> int:
        return sum(len(notices) for notices in self._entries.values())

    def clear(self) -> None:
        self._entries.clear()

    def record(self, blocking_name: str, notice: BlockerNotice) -> bool:
        """Add a notice against `blocking_name`.

        Returns:
            False if an identical (blocked participant, description) notice
            is already recorded for that name.
        """
        notices = self._entries.setdefault(blocking_name, [])
        for existing in notices:
            if (
                existing.blocked_participant_id == notice.blocked_participant_id
                and existing.description == notice.description
            ):
                return False

        notices.append(notice)
        logger.info(
            "blocker_recorded",
            blocking=blocking_name,
            blocked=notice.blocked_participant,
        )
        return True

    def notices_for(self, participant: Participant) -> list[BlockerNotice]:
        """All notices whose key names this participant, in recording order."""
        variants = name_variants(participant)
        found: list[BlockerNotice] = []
        for key, notices in self._entries.items():
            if key.strip().lower() in variants:
                found.extend(notices)
        return sorted(found, key=lambda n: n.timestamp)

    def entries(self) -> dict[str, list[BlockerNotice]]:
        """Snapshot of the ledger."""
        return {key: list(notices) for key, notices in self._entries.items()}
