"""Domain models for standup runs.

Contains the enums that drive the run and session state machines and
the pydantic models exchanged with external collaborators.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class SessionState(str, Enum):
    """Interview state of a single participant."""

    NOT_STARTED = "not_started"
    ASKING_PHASE_A = "asking_phase_a"
    PHASE_A_FOLLOWUP = "phase_a_followup"
    ASKING_PHASE_B = "asking_phase_b"
    PHASE_B_FOLLOWUP = "phase_b_followup"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    NEEDS_FOLLOWUP = "needs_followup"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES: frozenset[SessionState] = frozenset({
    SessionState.COMPLETED,
    SessionState.SKIPPED,
    SessionState.NEEDS_FOLLOWUP,
})


class InterviewPhase(str, Enum):
    """The two sub-interviews held with each participant."""

    A = "phase_a"
    B = "phase_b"


class RunPhase(str, Enum):
    """Run lifecycle. Transitions only move forward."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TimeoutStage(str, Enum):
    """Which window of the two-stage timeout is armed."""

    INITIAL = "initial"
    FINAL = "final"


class Participant(BaseModel):
    """An eligible participant, already filtered for leave upstream."""

    model_config = ConfigDict(frozen=True)

    participant_id: str = Field(..., description="Chat platform user id")
    name: str = Field(..., description="Display name")
    contact: str = Field(..., description="Tracker lookup key, usually an e-mail")

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else self.name


class AbsentParticipant(BaseModel):
    """A team member announced as on leave for the day."""

    name: str
    reason: str | None = None


class WorkItem(BaseModel):
    """An open work item assigned to a participant."""

    item_id: str = Field(..., description="Tracker identifier, e.g. ENG-42")
    title: str = Field(..., description="Short summary")
    status: str = Field(..., description="Tracker status name")
    priority: str | None = Field(default=None, description="Tracker priority name")


class TaskUpdate(BaseModel):
    """A status change or progress note extracted from a reply."""

    item_id: str
    target_status: str | None = None
    note: str | None = None
    timeline: str | None = None

    @property
    def is_informative(self) -> bool:
        return bool(self.note or self.timeline)


class Classification(BaseModel):
    """Structured extraction of a participant reply.

    An empty instance is the neutral result used whenever the
    classifier fails, times out or returns something unparseable.
    """

    updates: list[TaskUpdate] = Field(default_factory=list)
    blockers: list[str] = Field(default_factory=list)
    is_off_topic: bool = False
    off_topic_reason: str | None = None
    needs_clarification: bool = False
    follow_up_questions: list[str] = Field(default_factory=list)
    summary: str = ""

    @classmethod
    def neutral(cls) -> "Classification":
        return cls()


class BlockerNotice(BaseModel):
    """A blocker raised by one participant against another."""

    blocked_participant_id: str
    blocked_participant: str = Field(..., description="Name of who is blocked")
    description: str
    timestamp: datetime = Field(default_factory=utc_now)


class InboundMessage(BaseModel):
    """A chat message delivered by the transport."""

    sender_id: str
    text: str
    thread_id: str


class TrackerResult(BaseModel):
    """Outcome of a single tracker mutation."""

    success: bool
    error: str | None = None


class CompletedEntry(BaseModel):
    """Summary line for a participant who completed their interview."""

    name: str
    summary: str = ""
    updates: list[TaskUpdate] = Field(default_factory=list)
    blockers: list[str] = Field(default_factory=list)


class FollowUpEntry(BaseModel):
    """Participant whose interview closed without a satisfactory answer."""

    name: str
    reasons: list[str] = Field(default_factory=list)


class BlockerEntry(BaseModel):
    """A blocker raised during the run, attributed to who raised it."""

    from_participant: str
    text: str


class RunSummary(BaseModel):
    """Final digest of a run."""

    narrative: str | None = Field(default=None, description="Free-form overview of the run")
    completed: list[CompletedEntry] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    needs_follow_up: list[FollowUpEntry] = Field(default_factory=list)
    blockers: list[BlockerEntry] = Field(default_factory=list)
