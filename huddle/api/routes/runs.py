"""Run management endpoints."""

from fastapi import APIRouter, status

from huddle.api.dependencies import RegistryDep
from huddle.api.exceptions import (
    InvalidRequestError,
    ParticipantNotFoundError,
    RunNotFoundError,
    RunStartError,
)
from huddle.api.models.runs import RunResponse, SkipParticipantRequest, StartRunRequest
from huddle.observability.logging import get_logger
from huddle.standup.exceptions import RunStateError
from huddle.standup.run import StandupRun

logger = get_logger(__name__)

router = APIRouter(prefix="/runs")


def _get_run(registry: RegistryDep, thread_id: str) -> StandupRun:
    run = registry.get(thread_id)
    if run is None:
        raise RunNotFoundError(f"No run for thread {thread_id}")
    return run


@router.post("", response_model=RunResponse, status_code=status.HTTP_201_CREATED)
async def start_run(request: StartRunRequest, registry: RegistryDep) -> RunResponse:
    """Open a standup thread and interview the first participant."""
    ids = [p.participant_id for p in request.participants]
    if len(set(ids)) != len(ids):
        raise InvalidRequestError("Participant ids must be unique")

    try:
        run = await registry.start_run(request.participants, on_leave=request.on_leave)
    except RunStateError as e:
        raise RunStartError(e.message) from e

    logger.info("run_start_requested", run_id=run.run_id, participants=len(request.participants))
    return RunResponse.from_run(run)


@router.get("", response_model=list[RunResponse])
async def list_runs(registry: RegistryDep) -> list[RunResponse]:
    """List every run held by this process."""
    return [RunResponse.from_run(run) for run in registry.runs()]


@router.get("/{thread_id}", response_model=RunResponse)
async def get_run(thread_id: str, registry: RegistryDep) -> RunResponse:
    """Get a run's phase, sessions and summary."""
    return RunResponse.from_run(_get_run(registry, thread_id))


@router.post("/{thread_id}/participants/{participant_id}/skip", response_model=RunResponse)
async def skip_participant(
    thread_id: str,
    participant_id: str,
    registry: RegistryDep,
    request: SkipParticipantRequest | None = None,
) -> RunResponse:
    """Mark a participant unavailable for the rest of the run."""
    run = _get_run(registry, thread_id)
    reason = request.reason if request else SkipParticipantRequest().reason
    if not await run.mark_unavailable(participant_id, reason=reason):
        raise ParticipantNotFoundError(f"Participant {participant_id} is not part of this run")
    return RunResponse.from_run(run)
