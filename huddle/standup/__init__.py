"""Standup orchestration engine.

One StandupRun interviews eligible participants one at a time in a shared
chat thread. Each ParticipantSession moves through Phase A (in-progress
items) and optionally Phase B (not-started items), bounded by an exchange
cap and a two-stage timeout. Blockers naming other participants are kept
in a BlockerLedger and raised when the named participant's turn comes.
"""

from huddle.standup.collaborators import (
    ChatTransport,
    ResponseClassifier,
    StandupNarrator,
    TicketTracker,
)
from huddle.standup.exceptions import HuddleError, InvariantViolationError, RunStateError
from huddle.standup.interviewer import Interviewer, TurnResult, is_satisfactory
from huddle.standup.ledger import BlockerLedger
from huddle.standup.matching import (
    extract_raw_blockers,
    is_absence_report,
    match_participant_name,
)
from huddle.standup.models import (
    AbsentParticipant,
    BlockerNotice,
    Classification,
    InboundMessage,
    InterviewPhase,
    Participant,
    RunPhase,
    RunSummary,
    SessionState,
    TaskUpdate,
    TimeoutStage,
    TrackerResult,
    WorkItem,
)
from huddle.standup.registry import RunRegistry
from huddle.standup.run import StandupRun
from huddle.standup.session import ParticipantSession, ReplyOutcome
from huddle.standup.timers import SessionTimer

__all__ = [
    # Collaborators
    "ChatTransport",
    "ResponseClassifier",
    "StandupNarrator",
    "TicketTracker",
    # Errors
    "HuddleError",
    "InvariantViolationError",
    "RunStateError",
    # Engine
    "BlockerLedger",
    "Interviewer",
    "ParticipantSession",
    "ReplyOutcome",
    "RunRegistry",
    "SessionTimer",
    "StandupRun",
    "TurnResult",
    "is_satisfactory",
    # Heuristics
    "extract_raw_blockers",
    "is_absence_report",
    "match_participant_name",
    # Models
    "AbsentParticipant",
    "BlockerNotice",
    "Classification",
    "InboundMessage",
    "InterviewPhase",
    "Participant",
    "RunPhase",
    "RunSummary",
    "SessionState",
    "TaskUpdate",
    "TimeoutStage",
    "TrackerResult",
    "WorkItem",
]
