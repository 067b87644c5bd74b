"""Per-participant interview state machine.

A ParticipantSession only decides transitions; talking to the tracker,
the classifier and the chat thread is the Interviewer's job.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from huddle.config.models.standup import StandupConfig
from huddle.standup.exceptions import InvariantViolationError
from huddle.standup.models import (
    InterviewPhase,
    Participant,
    SessionState,
    TaskUpdate,
    WorkItem,
    utc_now,
)
from huddle.standup.timers import SessionTimer
from huddle.standup.worklist import split_work_items


class ReplyOutcome(str, Enum):
    """What the session did with a consumed reply."""

    FOLLOW_UP = "follow_up"
    PHASE_B_STARTED = "phase_b_started"
    COMPLETED = "completed"
    NEEDS_FOLLOWUP = "needs_followup"


_PHASE_OF_STATE: dict[SessionState, InterviewPhase] = {
    SessionState.ASKING_PHASE_A: InterviewPhase.A,
    SessionState.PHASE_A_FOLLOWUP: InterviewPhase.A,
    SessionState.ASKING_PHASE_B: InterviewPhase.B,
    SessionState.PHASE_B_FOLLOWUP: InterviewPhase.B,
}

_FOLLOWUP_STATE: dict[InterviewPhase, SessionState] = {
    InterviewPhase.A: SessionState.PHASE_A_FOLLOWUP,
    InterviewPhase.B: SessionState.PHASE_B_FOLLOWUP,
}


class ParticipantSession(BaseModel):
    """Interview state for one participant within one run.

    Created NOT_STARTED when the run starts, mutated only while it is the
    run's active session, and frozen once it reaches a terminal state.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    participant: Participant
    state: SessionState = Field(default=SessionState.NOT_STARTED)
    phase_a_tasks: list[WorkItem] = Field(default_factory=list)
    phase_b_tasks: list[WorkItem] = Field(default_factory=list)
    phase_b_skipped: bool = Field(
        default=False, description="Too many in-progress items to warrant Phase B"
    )
    open_items: list[WorkItem] = Field(default_factory=list)
    exchange_count: dict[InterviewPhase, int] = Field(
        default_factory=lambda: {InterviewPhase.A: 0, InterviewPhase.B: 0}
    )
    updates: list[TaskUpdate] = Field(default_factory=list)
    blockers: list[str] = Field(default_factory=list)
    unsatisfactory_reasons: list[str] = Field(default_factory=list)
    summaries: list[str] = Field(default_factory=list)
    skip_reason: str | None = None
    reminded: bool = False
    started_at: datetime | None = None
    finished_at: datetime | None = None

    _timer: SessionTimer | None = PrivateAttr(default=None)

    @property
    def participant_id(self) -> str:
        return self.participant.participant_id

    @property
    def name(self) -> str:
        return self.participant.name

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def awaiting_reply(self) -> bool:
        """Activated and not yet terminal."""
        return self.state in _PHASE_OF_STATE

    @property
    def current_phase(self) -> InterviewPhase | None:
        return _PHASE_OF_STATE.get(self.state)

    @property
    def current_items(self) -> list[WorkItem]:
        if self.current_phase is InterviewPhase.B:
            return self.phase_b_tasks
        return self.phase_a_tasks

    @property
    def phase_b_eligible(self) -> bool:
        return bool(self.phase_b_tasks) and not self.phase_b_skipped

    @property
    def timer(self) -> SessionTimer | None:
        return self._timer

    def attach_timer(self, timer: SessionTimer) -> None:
        self._timer = timer

    def cancel_timers(self) -> None:
        if self._timer is not None:
            self._timer.cancel()

    def activate(self, open_items: list[WorkItem], config: StandupConfig) -> None:
        """Load work items and enter Phase A."""
        if self.state is not SessionState.NOT_STARTED:
            raise InvariantViolationError(
                f"Cannot activate session for {self.participant_id} in state {self.state.value}"
            )

        phase_a, phase_b, in_progress_count = split_work_items(open_items, config)
        self.open_items = list(open_items)
        self.phase_a_tasks = phase_a
        self.phase_b_tasks = phase_b
        self.phase_b_skipped = in_progress_count > config.phase_b_max_phase_a_items
        self.state = SessionState.ASKING_PHASE_A
        self.started_at = utc_now()

    def require_phase(self) -> InterviewPhase:
        """The phase being asked, or InvariantViolationError if none is."""
        phase = self.current_phase
        if phase is None:
            raise InvariantViolationError(
                f"Session {self.participant_id} is not awaiting a reply ({self.state.value})"
            )
        return phase

    def record_exchange(self) -> int:
        """Count a consumed reply against the current phase."""
        phase = self.require_phase()
        self.exchange_count = {**self.exchange_count, phase: self.exchange_count[phase] + 1}
        return self.exchange_count[phase]

    def conclude_reply(
        self,
        satisfactory: bool,
        config: StandupConfig,
        reason: str | None = None,
    ) -> ReplyOutcome:
        """Apply the satisfaction verdict for the reply just recorded."""
        phase = self.current_phase
        if phase is None:
            raise InvariantViolationError(
                f"Session {self.participant_id} is not awaiting a reply ({self.state.value})"
            )

        if satisfactory:
            return self._close_phase(phase, config, satisfied=True)

        if self.exchange_count[phase] < config.max_exchanges:
            self.state = _FOLLOWUP_STATE[phase]
            return ReplyOutcome.FOLLOW_UP

        self.unsatisfactory_reasons = [
            *self.unsatisfactory_reasons,
            reason or f"No satisfactory answer for {phase.value} after {config.max_exchanges} exchanges",
        ]
        return self._close_phase(phase, config, satisfied=False)

    def _close_phase(
        self,
        phase: InterviewPhase,
        config: StandupConfig,
        satisfied: bool,
    ) -> ReplyOutcome:
        if phase is InterviewPhase.A and self.phase_b_eligible:
            if satisfied or config.continue_after_forced_close:
                self.state = SessionState.ASKING_PHASE_B
                self.reminded = False
                return ReplyOutcome.PHASE_B_STARTED

        if self.unsatisfactory_reasons:
            self.finish(SessionState.NEEDS_FOLLOWUP)
            return ReplyOutcome.NEEDS_FOLLOWUP

        self.finish(SessionState.COMPLETED)
        return ReplyOutcome.COMPLETED

    def finish(self, state: SessionState, reason: str | None = None) -> None:
        """Enter a terminal state and clear any armed timer."""
        if not state.is_terminal:
            raise InvariantViolationError(f"{state.value} is not a terminal state")
        if self.is_terminal:
            raise InvariantViolationError(
                f"Session {self.participant_id} already finished as {self.state.value}"
            )

        self.cancel_timers()
        if state is SessionState.SKIPPED:
            self.skip_reason = reason
        self.state = state
        self.finished_at = utc_now()
