"""Turns a participant reply into session progress.

The Interviewer owns every external call made on behalf of the active
session: loading work items, classifying replies, pushing updates to the
tracker, and recording blockers in the ledger. Each call is bounded by a
timeout and degraded to a neutral result on failure so that one
participant's broken integration never stalls the run.
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from pydantic import BaseModel

from huddle.config.models.standup import StandupConfig
from huddle.observability.logging import get_logger
from huddle.observability.metrics import EXTERNAL_CALL_FAILURES, PHASE_EXCHANGES, TRACKER_UPDATES
from huddle.standup import messages
from huddle.standup.collaborators import ResponseClassifier, StandupNarrator, TicketTracker
from huddle.standup.ledger import BlockerLedger
from huddle.standup.matching import extract_raw_blockers, match_participant_name
from huddle.standup.models import (
    BlockerNotice,
    Classification,
    InterviewPhase,
    Participant,
    TaskUpdate,
    TrackerResult,
    WorkItem,
)
from huddle.standup.session import ParticipantSession, ReplyOutcome

logger = get_logger(__name__)

T = TypeVar("T")

_PHASE_LABELS = {
    InterviewPhase.A: "in-progress items",
    InterviewPhase.B: "not-started items",
}


class TurnResult(BaseModel):
    """What consuming one reply produced."""

    outcome: ReplyOutcome
    message: str
    classification: Classification


def is_satisfactory(classification: Classification, config: StandupConfig) -> bool:
    """Whether a reply carries enough structure to close its phase.

    At least one update with a progress note or timeline, or a detailed
    summary the classifier did not flag as needing clarification.
    """
    if classification.is_off_topic:
        return False
    if any(update.is_informative for update in classification.updates):
        return True
    return (
        len(classification.summary.strip()) >= config.min_summary_chars
        and not classification.needs_clarification
    )


def _unsatisfactory_reason(phase: InterviewPhase, classification: Classification) -> str:
    label = _PHASE_LABELS[phase]
    if classification.is_off_topic:
        detail = classification.off_topic_reason or "replies were off-topic"
        return f"Update on {label} stayed off-topic ({detail})"
    if classification.needs_clarification:
        return f"Update on {label} still needs clarification"
    return f"No progress notes or timelines given for {label}"


class Interviewer:
    """Drives a ParticipantSession through its phases."""

    def __init__(
        self,
        tracker: TicketTracker,
        classifier: ResponseClassifier,
        ledger: BlockerLedger,
        config: StandupConfig,
        narrator: StandupNarrator | None = None,
    ) -> None:
        self._tracker = tracker
        self._classifier = classifier
        self._ledger = ledger
        self._config = config
        self._narrator = narrator

    async def open_interview(self, session: ParticipantSession) -> str:
        """Activate the session and build its Phase A prompt.

        Pending blocker notices raised against this participant lead the
        prompt.
        """
        items = await self._load_items(session.participant)
        session.activate(items, self._config)
        notices = self._ledger.notices_for(session.participant)

        logger.info(
            "session_activated",
            participant_id=session.participant_id,
            phase_a_items=len(session.phase_a_tasks),
            phase_b_items=len(session.phase_b_tasks),
            phase_b_skipped=session.phase_b_skipped,
            blocker_notices=len(notices),
        )
        return messages.phase_a_prompt(session, notices)

    async def consume(
        self,
        session: ParticipantSession,
        text: str,
        roster: list[Participant],
    ) -> TurnResult:
        """Consume one reply from the session's participant.

        Args:
            session: The run's active session
            text: Raw reply text
            roster: Other participants in the run, for blocker attribution

        Returns:
            TurnResult with the reply outcome and the message to post
        """
        phase = session.require_phase()
        exchanges = session.record_exchange()

        classification = await self._classify(text, session.current_items or session.open_items)

        if not classification.is_off_topic:
            await self._apply_updates(session, classification.updates)
            self._collect_blockers(session, classification, text, roster)
            if classification.summary:
                session.summaries.append(
                    messages.scrub_item_ids(classification.summary, session.open_items)
                )

        satisfactory = is_satisfactory(classification, self._config)
        outcome = session.conclude_reply(
            satisfactory,
            self._config,
            reason=_unsatisfactory_reason(phase, classification),
        )

        logger.info(
            "reply_consumed",
            participant_id=session.participant_id,
            phase=phase.value,
            exchange=exchanges,
            satisfactory=satisfactory,
            outcome=outcome.value,
            state=session.state.value,
        )
        if outcome is not ReplyOutcome.FOLLOW_UP:
            PHASE_EXCHANGES.labels(phase=phase.value).observe(exchanges)

        if outcome is ReplyOutcome.FOLLOW_UP and classification.is_off_topic:
            message = await self._redirect(session, classification, text)
        elif outcome is ReplyOutcome.FOLLOW_UP:
            message = messages.follow_up_question(session, classification)
        elif outcome is ReplyOutcome.PHASE_B_STARTED:
            message = messages.phase_b_prompt(session)
        elif outcome is ReplyOutcome.COMPLETED:
            message = messages.completion_message(session)
        else:
            message = messages.needs_followup_message(session)

        return TurnResult(outcome=outcome, message=message, classification=classification)

    async def _bounded(self, call: Awaitable[T], timeout: float) -> T:
        return await asyncio.wait_for(call, timeout=timeout)

    async def _redirect(
        self, session: ParticipantSession, classification: Classification, text: str
    ) -> str:
        fallback = messages.follow_up_question(session, classification)
        if self._narrator is None:
            return fallback

        try:
            redirect = await self._bounded(
                self._narrator.redirect(classification.off_topic_reason, text),
                self._config.narrator_timeout_seconds,
            )
        except Exception as e:
            EXTERNAL_CALL_FAILURES.labels(collaborator="narrator", operation="redirect").inc()
            logger.warning("redirect_generation_failed", error=str(e), error_type=type(e).__name__)
            return fallback

        redirect = redirect.strip() if isinstance(redirect, str) else ""
        if not redirect:
            return fallback
        return messages.scrub_item_ids(redirect, session.open_items)

    async def _load_items(self, participant: Participant) -> list[WorkItem]:
        try:
            return await self._bounded(
                self._tracker.list_open_items(participant.contact),
                self._config.tracker_timeout_seconds,
            )
        except Exception as e:
            EXTERNAL_CALL_FAILURES.labels(collaborator="tracker", operation="list_open_items").inc()
            logger.warning(
                "work_items_unavailable",
                participant_id=participant.participant_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

    async def _classify(self, text: str, items: list[WorkItem]) -> Classification:
        try:
            result = await self._bounded(
                self._classifier.classify(text, items),
                self._config.classifier_timeout_seconds,
            )
        except Exception as e:
            EXTERNAL_CALL_FAILURES.labels(collaborator="classifier", operation="classify").inc()
            logger.warning("classification_failed", error=str(e), error_type=type(e).__name__)
            return Classification.neutral()

        if not isinstance(result, Classification):
            EXTERNAL_CALL_FAILURES.labels(collaborator="classifier", operation="classify").inc()
            logger.warning("classification_malformed", result_type=type(result).__name__)
            return Classification.neutral()
        return result

    async def _tracker_call(
        self,
        operation: str,
        item_id: str,
        call: Awaitable[TrackerResult],
    ) -> TrackerResult:
        try:
            result = await self._bounded(call, self._config.tracker_timeout_seconds)
        except Exception as e:
            EXTERNAL_CALL_FAILURES.labels(collaborator="tracker", operation=operation).inc()
            result = TrackerResult(success=False, error=str(e) or type(e).__name__)

        TRACKER_UPDATES.labels(
            operation=operation,
            outcome="success" if result.success else "failure",
        ).inc()
        if not result.success:
            logger.warning("tracker_update_failed", operation=operation, item_id=item_id, error=result.error)
        return result

    async def _apply_updates(self, session: ParticipantSession, updates: list[TaskUpdate]) -> None:
        known = {item.item_id for item in session.open_items}
        for update in updates:
            if update.item_id not in known:
                logger.debug("update_for_unknown_item", item_id=update.item_id)
                continue

            session.updates.append(update)
            if update.target_status:
                await self._tracker_call(
                    "transition_status",
                    update.item_id,
                    self._tracker.transition_status(update.item_id, update.target_status),
                )
            if update.note:
                await self._tracker_call(
                    "append_note",
                    update.item_id,
                    self._tracker.append_note(update.item_id, f"[Standup Update] {update.note}"),
                )
            if update.timeline:
                await self._tracker_call(
                    "append_note",
                    update.item_id,
                    self._tracker.append_note(
                        update.item_id, f"[Standup Update] Timeline: {update.timeline}"
                    ),
                )

    def _collect_blockers(
        self,
        session: ParticipantSession,
        classification: Classification,
        text: str,
        roster: list[Participant],
    ) -> None:
        others = [p for p in roster if p.participant_id != session.participant_id]
        attributed: set[str] = set()

        for raw_description in classification.blockers:
            description = messages.scrub_item_ids(raw_description, session.open_items)
            if description not in session.blockers:
                session.blockers.append(description)
            blocker = match_participant_name(description, others)
            if blocker is not None:
                attributed.add(blocker.participant_id)
                self._record(session, blocker, description)

        # The classifier can drop names that a plain phrase match still catches.
        for blocker, raw_sentence in extract_raw_blockers(text, others):
            sentence = messages.scrub_item_ids(raw_sentence, session.open_items)
            if blocker.participant_id not in attributed and sentence not in session.blockers:
                session.blockers.append(sentence)
            self._record(session, blocker, sentence)

    def _record(self, session: ParticipantSession, blocker: Participant, description: str) -> None:
        self._ledger.record(
            blocker.name,
            BlockerNotice(
                blocked_participant_id=session.participant_id,
                blocked_participant=session.name,
                description=description,
            ),
        )
