"""Tests for the ParticipantSession state machine."""

import pytest

from huddle.config.models.standup import StandupConfig
from huddle.standup.exceptions import InvariantViolationError
from huddle.standup.models import InterviewPhase, SessionState
from huddle.standup.session import ParticipantSession, ReplyOutcome
from tests.factories import ParticipantFactory, WorkItemFactory


@pytest.fixture
def config() -> StandupConfig:
    return StandupConfig()


@pytest.fixture
def session() -> ParticipantSession:
    return ParticipantSession(participant=ParticipantFactory.create(name="Alice Smith"))


def _items(in_progress: int, todo: int) -> list:
    return [WorkItemFactory.create(status="In Progress") for _ in range(in_progress)] + [
        WorkItemFactory.create(status="To Do") for _ in range(todo)
    ]


class TestActivate:
    """Tests for ParticipantSession.activate."""

    def test_enters_phase_a(self, session: ParticipantSession, config: StandupConfig) -> None:
        """Activation loads items and starts Phase A."""
        session.activate(_items(1, 1), config)

        assert session.state == SessionState.ASKING_PHASE_A
        assert len(session.phase_a_tasks) == 1
        assert len(session.phase_b_tasks) == 1
        assert session.phase_b_eligible is True
        assert session.awaiting_reply is True
        assert session.started_at is not None

    def test_many_in_progress_skips_phase_b(
        self, session: ParticipantSession, config: StandupConfig
    ) -> None:
        """More than phase_b_max_phase_a_items in-progress items rules out Phase B."""
        session.activate(_items(3, 2), config)

        assert session.phase_b_skipped is True
        assert session.phase_b_eligible is False

    def test_cannot_activate_twice(self, session: ParticipantSession, config: StandupConfig) -> None:
        """A session is activated exactly once."""
        session.activate([], config)

        with pytest.raises(InvariantViolationError):
            session.activate([], config)


class TestConcludeReply:
    """Tests for exchange counting and phase transitions."""

    def test_satisfactory_without_phase_b_completes(
        self, session: ParticipantSession, config: StandupConfig
    ) -> None:
        session.activate(_items(1, 0), config)
        session.record_exchange()

        outcome = session.conclude_reply(True, config)

        assert outcome == ReplyOutcome.COMPLETED
        assert session.state == SessionState.COMPLETED
        assert session.finished_at is not None

    def test_satisfactory_with_phase_b_moves_on(
        self, session: ParticipantSession, config: StandupConfig
    ) -> None:
        session.activate(_items(1, 2), config)
        session.record_exchange()

        outcome = session.conclude_reply(True, config)

        assert outcome == ReplyOutcome.PHASE_B_STARTED
        assert session.state == SessionState.ASKING_PHASE_B
        assert session.current_items == session.phase_b_tasks

    def test_unsatisfactory_asks_follow_up(
        self, session: ParticipantSession, config: StandupConfig
    ) -> None:
        session.activate(_items(1, 0), config)
        session.record_exchange()

        outcome = session.conclude_reply(False, config, reason="vague")

        assert outcome == ReplyOutcome.FOLLOW_UP
        assert session.state == SessionState.PHASE_A_FOLLOWUP
        assert session.unsatisfactory_reasons == []

    def test_exchange_bound_forces_close(
        self, session: ParticipantSession, config: StandupConfig
    ) -> None:
        """The third unsatisfactory reply force-closes the phase as NEEDS_FOLLOWUP."""
        session.activate(_items(1, 0), config)
        outcomes = []
        for _ in range(config.max_exchanges):
            session.record_exchange()
            outcomes.append(session.conclude_reply(False, config, reason="vague"))

        assert outcomes == [
            ReplyOutcome.FOLLOW_UP,
            ReplyOutcome.FOLLOW_UP,
            ReplyOutcome.NEEDS_FOLLOWUP,
        ]
        assert session.state == SessionState.NEEDS_FOLLOWUP
        assert session.exchange_count[InterviewPhase.A] == config.max_exchanges
        assert session.unsatisfactory_reasons == ["vague"]

    def test_forced_close_skips_phase_b_by_default(
        self, session: ParticipantSession, config: StandupConfig
    ) -> None:
        config = StandupConfig(max_exchanges=1)
        session.activate(_items(1, 1), config)
        session.record_exchange()

        assert session.conclude_reply(False, config) == ReplyOutcome.NEEDS_FOLLOWUP

    def test_forced_close_can_continue_to_phase_b(self, session: ParticipantSession) -> None:
        """continue_after_forced_close carries on into Phase B, keeping the reason."""
        config = StandupConfig(max_exchanges=1, continue_after_forced_close=True)
        session.activate(_items(1, 1), config)
        session.record_exchange()

        assert session.conclude_reply(False, config, reason="vague") == ReplyOutcome.PHASE_B_STARTED

        session.record_exchange()
        assert session.conclude_reply(True, config) == ReplyOutcome.NEEDS_FOLLOWUP
        assert session.unsatisfactory_reasons == ["vague"]

    def test_phases_count_separately(self, session: ParticipantSession, config: StandupConfig) -> None:
        session.activate(_items(1, 1), config)
        session.record_exchange()
        session.conclude_reply(False, config)
        session.record_exchange()
        session.conclude_reply(True, config)
        session.record_exchange()

        assert session.exchange_count == {InterviewPhase.A: 2, InterviewPhase.B: 1}

    def test_require_phase(self, session: ParticipantSession, config: StandupConfig) -> None:
        with pytest.raises(InvariantViolationError, match="not awaiting a reply"):
            session.require_phase()

        session.activate([], config)

        assert session.require_phase() == InterviewPhase.A

    def test_record_exchange_requires_active_phase(
        self, session: ParticipantSession
    ) -> None:
        with pytest.raises(InvariantViolationError):
            session.record_exchange()


class TestFinish:
    """Tests for terminal transitions."""

    def test_skip_records_reason(self, session: ParticipantSession, config: StandupConfig) -> None:
        session.activate([], config)

        session.finish(SessionState.SKIPPED, reason="No response")

        assert session.state == SessionState.SKIPPED
        assert session.skip_reason == "No response"
        assert session.awaiting_reply is False

    def test_rejects_non_terminal_state(self, session: ParticipantSession) -> None:
        with pytest.raises(InvariantViolationError):
            session.finish(SessionState.ASKING_PHASE_B)

    def test_terminal_states_are_final(self, session: ParticipantSession) -> None:
        """A finished session cannot be finished again."""
        session.finish(SessionState.SKIPPED)

        with pytest.raises(InvariantViolationError):
            session.finish(SessionState.COMPLETED)
