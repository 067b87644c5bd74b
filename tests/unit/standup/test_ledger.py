"""Tests for BlockerLedger."""

from datetime import UTC, datetime, timedelta

from huddle.standup.ledger import BlockerLedger
from huddle.standup.models import BlockerNotice
from tests.factories import ParticipantFactory


def _notice(description: str, blocked_id: str = "U1", offset: int = 0) -> BlockerNotice:
    return BlockerNotice(
        blocked_participant_id=blocked_id,
        blocked_participant="Alice Smith",
        description=description,
        timestamp=datetime(2024, 5, 6, 9, 0, tzinfo=UTC) + timedelta(seconds=offset),
    )


class TestBlockerLedger:
    """Tests for recording and reading blocker notices."""

    def test_record_and_read(self) -> None:
        """Notices recorded against a name are returned for that participant."""
        ledger = BlockerLedger()
        bob = ParticipantFactory.create(name="Bob Jones", contact="bob@example.com")

        assert ledger.record("Bob Jones", _notice("API review")) is True
        assert [n.description for n in ledger.notices_for(bob)] == ["API review"]
        assert len(ledger) == 1

    def test_duplicate_is_ignored(self) -> None:
        """The same blocked participant and description is recorded once."""
        ledger = BlockerLedger()

        assert ledger.record("Bob Jones", _notice("API review")) is True
        assert ledger.record("Bob Jones", _notice("API review")) is False
        assert ledger.record("Bob Jones", _notice("API review", blocked_id="U3")) is True
        assert len(ledger) == 2

    def test_matches_any_name_variant(self) -> None:
        """Keys by first name or contact local part also match."""
        ledger = BlockerLedger()
        bob = ParticipantFactory.create(name="Bob Jones", contact="bjones@example.com")
        ledger.record("bob", _notice("first", offset=2))
        ledger.record("BJones", _notice("second", offset=1))
        ledger.record("Carol", _notice("other"))

        assert [n.description for n in ledger.notices_for(bob)] == ["second", "first"]

    def test_reading_does_not_consume(self) -> None:
        """Notices stay in the ledger after being read."""
        ledger = BlockerLedger()
        bob = ParticipantFactory.create(name="Bob Jones")
        ledger.record("Bob Jones", _notice("API review"))

        ledger.notices_for(bob)

        assert len(ledger.notices_for(bob)) == 1

    def test_clear(self) -> None:
        ledger = BlockerLedger()
        ledger.record("Bob Jones", _notice("API review"))

        ledger.clear()

        assert len(ledger) == 0
        assert ledger.entries() == {}
