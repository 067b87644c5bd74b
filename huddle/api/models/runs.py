"""Request and response models for run endpoints."""

from pydantic import BaseModel, Field

from huddle.standup.models import (
    AbsentParticipant,
    InterviewPhase,
    Participant,
    RunPhase,
    RunSummary,
    SessionState,
)
from huddle.standup.run import StandupRun
from huddle.standup.session import ParticipantSession


class StartRunRequest(BaseModel):
    """Start a standup for an already filtered eligibility list."""

    participants: list[Participant] = Field(..., min_length=1, description="Interview order")
    on_leave: list[AbsentParticipant] = Field(default_factory=list)


class SkipParticipantRequest(BaseModel):
    """Mark a participant unavailable for the rest of the run."""

    reason: str = Field(default="Marked unavailable", max_length=500)


class SessionView(BaseModel):
    """Public view of a participant session."""

    participant_id: str
    name: str
    state: SessionState
    phase_a_exchanges: int
    phase_b_exchanges: int
    updates: int
    blockers: list[str]
    skip_reason: str | None = None

    @classmethod
    def from_session(cls, session: ParticipantSession) -> "SessionView":
        return cls(
            participant_id=session.participant_id,
            name=session.name,
            state=session.state,
            phase_a_exchanges=session.exchange_count[InterviewPhase.A],
            phase_b_exchanges=session.exchange_count[InterviewPhase.B],
            updates=len(session.updates),
            blockers=list(session.blockers),
            skip_reason=session.skip_reason,
        )


class RunResponse(BaseModel):
    """Snapshot of a run."""

    run_id: str
    thread_id: str | None
    phase: RunPhase
    active_participant_id: str | None = None
    sessions: list[SessionView]
    summary: RunSummary | None = None

    @classmethod
    def from_run(cls, run: StandupRun) -> "RunResponse":
        return cls(
            run_id=run.run_id,
            thread_id=run.thread_id,
            phase=run.phase,
            active_participant_id=run.active.participant_id if run.active else None,
            sessions=[SessionView.from_session(s) for s in run.sessions],
            summary=run.summary,
        )


class MessageEventResponse(BaseModel):
    """Outcome of delivering an inbound chat message."""

    handled: bool = Field(..., description="Whether a run acted on the message")
    reply: str | None = Field(default=None, description="Message posted in response")
