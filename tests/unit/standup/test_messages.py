"""Tests for chat message composition."""

from datetime import date

from huddle.config.models.standup import StandupConfig
from huddle.standup import messages
from huddle.standup.models import (
    AbsentParticipant,
    BlockerEntry,
    BlockerNotice,
    Classification,
    CompletedEntry,
    FollowUpEntry,
    RunSummary,
)
from huddle.standup.session import ParticipantSession
from tests.factories import ParticipantFactory, WorkItemFactory


def _session(*items) -> ParticipantSession:
    session = ParticipantSession(participant=ParticipantFactory.create(name="Bob Jones"))
    session.activate(list(items), StandupConfig())
    return session


class TestPrompts:
    """Tests for interview prompts."""

    def test_header_is_dated(self) -> None:
        header = messages.standup_header(date(2024, 5, 6))

        assert "Monday, May 06, 2024" in header

    def test_on_leave_notice(self) -> None:
        notice = messages.on_leave_notice(
            [AbsentParticipant(name="Dana"), AbsentParticipant(name="Eli", reason="Sick")]
        )

        assert notice.splitlines() == ["*Team members on leave today:*", "- Dana", "- Eli (Sick)"]

    def test_blocker_notices_lead_phase_a_prompt(self) -> None:
        session = _session(WorkItemFactory.create(item_id="ENG-9", title="Search index"))
        notice = BlockerNotice(
            blocked_participant_id="U1",
            blocked_participant="Alice Smith",
            description="Need review from Bob",
        )

        prompt = messages.phase_a_prompt(session, [notice])

        assert prompt.startswith('You are blocking Alice Smith on: "Need review from Bob"')
        assert "1. Search index (In Progress)" in prompt
        assert "ENG-9" not in prompt

    def test_generic_prompt_without_items(self) -> None:
        prompt = messages.phase_a_prompt(_session(), [])

        assert prompt == (
            "Bob Jones, you're up! What are you working on today, and is anything blocking you?"
        )

    def test_phase_b_prompt(self) -> None:
        session = _session(
            WorkItemFactory.create(status="In Progress"),
            WorkItemFactory.create(title="Rate limiter", status="To Do"),
        )

        assert "1. Rate limiter (To Do)" in messages.phase_b_prompt(session)


class TestFollowUpQuestion:
    """Tests for follow-up question selection."""

    def test_classifier_question_when_nothing_said(self) -> None:
        session = _session(WorkItemFactory.create(title="Search index"))
        classification = Classification(follow_up_questions=["Which environment is failing?"])

        assert messages.follow_up_question(session, classification) == "Which environment is failing?"

    def test_classifier_question_uses_titles(self) -> None:
        session = _session(WorkItemFactory.create(item_id="ENG-77", title="Search index"))
        classification = Classification(follow_up_questions=["When will ENG-77 be done?"])

        assert messages.follow_up_question(session, classification) == (
            "When will Search index be done?"
        )

    def test_off_topic_reason_uses_titles(self) -> None:
        session = _session(WorkItemFactory.create(item_id="ENG-77", title="Search index"))
        classification = Classification(is_off_topic=True, off_topic_reason="redesign of eng-77")

        question = messages.follow_up_question(session, classification)

        assert "(redesign of Search index)" in question
        assert "77" not in question

    def test_blocker_detail(self) -> None:
        session = _session()
        classification = Classification(blockers=["something external"])

        assert "Who or what exactly is blocking you" in messages.follow_up_question(
            session, classification
        )

    def test_generic(self) -> None:
        assert "a bit more detail" in messages.follow_up_question(_session(), Classification())


class TestSummaryMessage:
    """Tests for the run summary post."""

    def test_sections(self) -> None:
        summary = RunSummary(
            completed=[CompletedEntry(name="Alice Smith", summary="Retries done.")],
            skipped=["Carol White"],
            needs_follow_up=[FollowUpEntry(name="Bob Jones", reasons=["No timelines given"])],
            blockers=[BlockerEntry(from_participant="Alice Smith", text="Blocked on Bob")],
        )

        text = messages.summary_message(summary)

        assert "- *Alice Smith*: Retries done." in text
        assert "*Skipped:* Carol White" in text
        assert "- *Bob Jones*: No timelines given" in text
        assert "- *Alice Smith*: Blocked on Bob" in text

    def test_empty(self) -> None:
        assert "No one was interviewed today." in messages.summary_message(RunSummary())

    def test_narrative_leads(self) -> None:
        summary = RunSummary(
            narrative="Payments are on track.",
            completed=[CompletedEntry(name="Alice Smith", summary="Retries done.")],
        )

        lines = messages.summary_message(summary).splitlines()

        assert lines[:3] == ["*Standup Summary*", "", "Payments are on track."]


class TestScrubItemIds:
    """Tests for replacing work-item identifiers with titles."""

    def test_replaces_known_ids(self) -> None:
        items = [
            WorkItemFactory.create(item_id="ENG-7", title="Search index"),
            WorkItemFactory.create(item_id="ENG-77", title="Rate limiter"),
        ]

        text = messages.scrub_item_ids("ENG-7 is done, eng-77 next.", items)

        assert text == "Search index is done, Rate limiter next."

    def test_leaves_longer_ids_alone(self) -> None:
        items = [WorkItemFactory.create(item_id="ENG-7", title="Search index")]

        assert messages.scrub_item_ids("See ENG-71", items) == "See ENG-71"

    def test_unknown_ids_untouched(self) -> None:
        assert messages.scrub_item_ids("OPS-3 is down", []) == "OPS-3 is down"
