"""StandupRun - the queue driver for one standup.

Interviews eligible participants one at a time in a single shared thread.
Every state change happens while holding the run's lock, triggered by an
inbound message, a timer firing, or an explicit skip. Whichever of these
is handled first for the active session cancels the others: replies
clear the armed timer, and timers re-check their generation under the
lock before acting.
"""

import asyncio
from collections import deque
from datetime import date
from functools import partial
from uuid import uuid4

import structlog

from huddle.config.models.standup import StandupConfig
from huddle.observability.logging import get_logger
from huddle.observability.metrics import (
    ACTIVE_RUNS,
    EXTERNAL_CALL_FAILURES,
    RUNS_COMPLETED,
    RUNS_STARTED,
    SESSIONS_FINISHED,
    TIMEOUTS,
)
from huddle.standup import messages
from huddle.standup.collaborators import (
    ChatTransport,
    ResponseClassifier,
    StandupNarrator,
    TicketTracker,
)
from huddle.standup.exceptions import InvariantViolationError, RunStateError
from huddle.standup.interviewer import Interviewer
from huddle.standup.ledger import BlockerLedger
from huddle.standup.matching import is_absence_report
from huddle.standup.models import (
    AbsentParticipant,
    BlockerEntry,
    CompletedEntry,
    FollowUpEntry,
    Participant,
    RunPhase,
    RunSummary,
    SessionState,
    TimeoutStage,
)
from huddle.standup.session import ParticipantSession
from huddle.standup.timers import SessionTimer

logger = get_logger(__name__)


class StandupRun:
    """One standup, from opening the thread to posting the summary.

    Runs share no mutable state with each other; each owns its queue,
    sessions, ledger, timers and lock.
    """

    def __init__(
        self,
        tracker: TicketTracker,
        classifier: ResponseClassifier,
        transport: ChatTransport,
        config: StandupConfig | None = None,
        run_id: str | None = None,
        narrator: StandupNarrator | None = None,
    ) -> None:
        """Initialize a run.

        Args:
            tracker: Work-item tracker
            classifier: Reply classifier
            transport: Chat transport hosting the thread
            config: Interview limits and timeout windows
            run_id: Identifier for logs (generated if omitted)
            narrator: Writes redirects and the closing summary; templates
                are used when omitted
        """
        self._config = config or StandupConfig()
        self._transport = transport
        self._ledger = BlockerLedger()
        self._interviewer = Interviewer(
            tracker=tracker,
            classifier=classifier,
            ledger=self._ledger,
            config=self._config,
            narrator=narrator,
        )
        self._narrator = narrator
        self.run_id = run_id or str(uuid4())

        self._phase = RunPhase.NOT_STARTED
        self._thread_id: str | None = None
        self._sessions: dict[str, ParticipantSession] = {}
        self._queue: deque[ParticipantSession] = deque()
        self._active: ParticipantSession | None = None
        self._unavailable: set[str] = set()
        self._summary: RunSummary | None = None
        self._lock = asyncio.Lock()

    @property
    def phase(self) -> RunPhase:
        return self._phase

    @property
    def thread_id(self) -> str | None:
        return self._thread_id

    @property
    def active(self) -> ParticipantSession | None:
        return self._active

    @property
    def sessions(self) -> list[ParticipantSession]:
        """All sessions in queue order."""
        return list(self._sessions.values())

    @property
    def unavailable(self) -> frozenset[str]:
        return frozenset(self._unavailable)

    @property
    def ledger(self) -> BlockerLedger:
        return self._ledger

    @property
    def summary(self) -> RunSummary | None:
        return self._summary

    @property
    def config(self) -> StandupConfig:
        return self._config

    def get_session(self, participant_id: str) -> ParticipantSession | None:
        return self._sessions.get(participant_id)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def start(
        self,
        participants: list[Participant],
        on_leave: list[AbsentParticipant] | None = None,
        day: date | None = None,
    ) -> bool:
        """Open the thread and interview the first participant.

        Args:
            participants: Eligible participants in interview order, already
                filtered for leave and exclusions upstream
            on_leave: Members to announce as on leave
            day: Date shown in the header (defaults to today)

        Returns:
            False if the thread could not be opened; the run then stays
            NOT_STARTED.
        """
        async with self._lock:
            if self._phase is not RunPhase.NOT_STARTED:
                raise RunStateError(f"Run {self.run_id} already started")

            self._ledger.clear()
            self._sessions.clear()
            self._queue.clear()
            for participant in participants:
                if participant.participant_id in self._sessions:
                    logger.warning("duplicate_participant_ignored", participant_id=participant.participant_id)
                    continue
                session = ParticipantSession(participant=participant)
                session.attach_timer(
                    SessionTimer(
                        on_fire=partial(self._on_timer, participant.participant_id),
                        name=participant.participant_id,
                    )
                )
                self._sessions[participant.participant_id] = session
                self._queue.append(session)

            try:
                thread_id = await self._transport.open_thread(
                    messages.standup_header(day or date.today())
                )
            except Exception as e:
                EXTERNAL_CALL_FAILURES.labels(collaborator="transport", operation="open_thread").inc()
                logger.error("thread_open_failed", run_id=self.run_id, error=str(e))
                thread_id = None

            if not thread_id:
                logger.error("run_not_started", run_id=self.run_id)
                return False

            self._thread_id = thread_id
            self._phase = RunPhase.IN_PROGRESS
            RUNS_STARTED.inc()
            ACTIVE_RUNS.inc()

            with structlog.contextvars.bound_contextvars(thread_id=thread_id, run_id=self.run_id):
                logger.info(
                    "run_started",
                    participants=len(self._sessions),
                    on_leave=len(on_leave or []),
                )
                if on_leave:
                    await self._post(messages.on_leave_notice(on_leave))
                await self._advance()
            return True

    async def advance(self) -> None:
        """Activate the next queued session, or complete the run.

        A no-op while a session is active.
        """
        async with self._lock:
            with structlog.contextvars.bound_contextvars(thread_id=self._thread_id, run_id=self.run_id):
                await self._advance()

    async def handle_inbound_text(self, sender_id: str, text: str, thread_id: str) -> str | None:
        """Route a chat message posted in the run's thread.

        Returns:
            The message posted in response, or None if the message was
            ignored.
        """
        if thread_id != self._thread_id:
            return None

        async with self._lock:
            with structlog.contextvars.bound_contextvars(thread_id=thread_id, run_id=self.run_id):
                return await self._handle_inbound(sender_id, text)

    async def mark_unavailable(self, participant_id: str, reason: str = "Marked unavailable") -> bool:
        """Exclude a participant for the rest of the run.

        An active participant is skipped immediately; a queued one is
        skipped when the queue reaches them.

        Returns:
            False if the participant is not part of this run.
        """
        async with self._lock:
            session = self._sessions.get(participant_id)
            if session is None:
                return False

            with structlog.contextvars.bound_contextvars(thread_id=self._thread_id, run_id=self.run_id):
                self._unavailable.add(participant_id)
                logger.info("participant_marked_unavailable", participant_id=participant_id, reason=reason)
                if session is self._active:
                    await self._finish_active(
                        SessionState.SKIPPED,
                        messages.absence_acknowledgement(session),
                        reason=reason,
                    )
            return True

    def close(self) -> None:
        """Cancel every armed timer, e.g. on shutdown."""
        for session in self._sessions.values():
            session.cancel_timers()

    # ------------------------------------------------------------------
    # Internals (callers hold self._lock)
    # ------------------------------------------------------------------

    async def _handle_inbound(self, sender_id: str, text: str) -> str | None:
        active = self._active

        if active is not None and sender_id == active.participant_id:
            active.cancel_timers()
            result = await self._interviewer.consume(active, text, self._roster())
            if active.is_terminal:
                self._record_finished(active)
                self._active = None
                await self._post(result.message)
                await self._advance()
            else:
                await self._post(result.message)
                active.reminded = False
                self._arm(active, TimeoutStage.INITIAL)
            return result.message

        if active is not None and is_absence_report(text, active.participant, self._roster()):
            reporter = self._sessions.get(sender_id)
            reason = f"Reported absent by {reporter.name if reporter else sender_id}"
            message = messages.absence_acknowledgement(active)
            await self._finish_active(SessionState.SKIPPED, message, reason=reason)
            return message

        session = self._sessions.get(sender_id)
        if session is None:
            logger.debug("message_from_non_participant_ignored", sender_id=sender_id)
            return None

        message = messages.courtesy_message(session, active)
        await self._post(message)
        return message

    async def _advance(self) -> None:
        if self._active is not None:
            logger.debug("advance_ignored_session_active", participant_id=self._active.participant_id)
            return
        if self._phase is not RunPhase.IN_PROGRESS:
            return

        while self._queue:
            session = self._queue.popleft()
            if session.participant_id in self._unavailable:
                session.finish(SessionState.SKIPPED, reason="Unavailable")
                self._record_finished(session)
                continue

            self._assert_no_session_awaiting()
            self._active = session
            prompt = await self._interviewer.open_interview(session)
            await self._post(prompt)
            self._arm(session, TimeoutStage.INITIAL)
            return

        await self._complete()

    async def _finish_active(
        self,
        state: SessionState,
        message: str,
        reason: str | None = None,
    ) -> None:
        session = self._active
        if session is None:
            raise InvariantViolationError("No active session to finish")

        session.finish(state, reason=reason)
        if state is SessionState.SKIPPED:
            self._unavailable.add(session.participant_id)
        self._record_finished(session)
        self._active = None
        await self._post(message)
        await self._advance()

    async def _on_timer(self, participant_id: str, stage: TimeoutStage, generation: int) -> None:
        async with self._lock:
            session = self._sessions.get(participant_id)
            timer = session.timer if session else None
            if (
                session is None
                or session is not self._active
                or session.is_terminal
                or timer is None
                or not timer.is_current(generation)
            ):
                logger.debug("stale_timer_ignored", participant_id=participant_id, stage=stage.value)
                return

            with structlog.contextvars.bound_contextvars(thread_id=self._thread_id, run_id=self.run_id):
                TIMEOUTS.labels(stage=stage.value).inc()
                if stage is TimeoutStage.INITIAL:
                    logger.info("reminder_sent", participant_id=participant_id)
                    session.reminded = True
                    await self._post(messages.reminder_message(session))
                    self._arm(session, TimeoutStage.FINAL)
                else:
                    logger.info("participant_timed_out", participant_id=participant_id)
                    await self._finish_active(
                        SessionState.SKIPPED,
                        messages.timed_out_message(session),
                        reason="No response",
                    )

    def _arm(self, session: ParticipantSession, stage: TimeoutStage) -> None:
        timer = session.timer
        if timer is None:
            raise InvariantViolationError(f"Session {session.participant_id} has no timer")
        delay = (
            self._config.initial_timeout_seconds
            if stage is TimeoutStage.INITIAL
            else self._config.final_timeout_seconds
        )
        timer.arm(stage, delay)

    async def _post(self, text: str) -> None:
        if self._thread_id is None:
            raise InvariantViolationError("Posting before the thread was opened")
        try:
            await self._transport.post_to_thread(self._thread_id, text)
        except Exception as e:
            EXTERNAL_CALL_FAILURES.labels(collaborator="transport", operation="post_to_thread").inc()
            logger.warning("post_failed", error=str(e), error_type=type(e).__name__)

    def _roster(self) -> list[Participant]:
        return [s.participant for s in self._sessions.values()]

    def _record_finished(self, session: ParticipantSession) -> None:
        SESSIONS_FINISHED.labels(state=session.state.value).inc()
        logger.info(
            "session_finished",
            participant_id=session.participant_id,
            state=session.state.value,
            updates=len(session.updates),
            blockers=len(session.blockers),
            reason=session.skip_reason,
        )

    def _assert_no_session_awaiting(self) -> None:
        awaiting = [s.participant_id for s in self._sessions.values() if s.awaiting_reply]
        if awaiting:
            raise InvariantViolationError(f"Sessions already awaiting a reply: {awaiting}")

    async def _complete(self) -> None:
        unfinished = [s.participant_id for s in self._sessions.values() if not s.is_terminal]
        if unfinished:
            raise InvariantViolationError(f"Completing run with unfinished sessions: {unfinished}")

        self._phase = RunPhase.COMPLETED
        self._summary = self.compile_summary()
        self._summary.narrative = await self._narrate(self._summary)
        RUNS_COMPLETED.inc()
        ACTIVE_RUNS.dec()
        logger.info(
            "run_completed",
            completed=len(self._summary.completed),
            skipped=len(self._summary.skipped),
            needs_follow_up=len(self._summary.needs_follow_up),
            blockers=len(self._summary.blockers),
        )
        await self._post(messages.summary_message(self._summary))

    async def _narrate(self, summary: RunSummary) -> str | None:
        if self._narrator is None:
            return None

        try:
            narrative = await asyncio.wait_for(
                self._narrator.summarize(summary),
                timeout=self._config.narrator_timeout_seconds,
            )
        except Exception as e:
            EXTERNAL_CALL_FAILURES.labels(collaborator="narrator", operation="summarize").inc()
            logger.warning("summary_generation_failed", error=str(e), error_type=type(e).__name__)
            return None

        narrative = narrative.strip() if isinstance(narrative, str) else ""
        if not narrative:
            return None
        items = [item for session in self._sessions.values() for item in session.open_items]
        return messages.scrub_item_ids(narrative, items)

    def compile_summary(self) -> RunSummary:
        """Digest of every session in queue order."""
        summary = RunSummary()
        for session in self._sessions.values():
            if session.state is SessionState.COMPLETED:
                summary.completed.append(
                    CompletedEntry(
                        name=session.name,
                        summary=" ".join(s for s in session.summaries if s),
                        updates=list(session.updates),
                        blockers=list(session.blockers),
                    )
                )
            elif session.state is SessionState.SKIPPED:
                summary.skipped.append(session.name)
            elif session.state is SessionState.NEEDS_FOLLOWUP:
                summary.needs_follow_up.append(
                    FollowUpEntry(name=session.name, reasons=list(session.unsatisfactory_reasons))
                )

            for blocker in session.blockers:
                summary.blockers.append(BlockerEntry(from_participant=session.name, text=blocker))
        return summary
