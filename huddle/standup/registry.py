"""Registry of concurrently running standups, keyed by thread id."""

from collections.abc import Callable

from huddle.config.models.standup import StandupConfig
from huddle.observability.logging import get_logger
from huddle.standup.collaborators import (
    ChatTransport,
    ResponseClassifier,
    StandupNarrator,
    TicketTracker,
)
from huddle.standup.exceptions import RunStateError
from huddle.standup.models import AbsentParticipant, InboundMessage, Participant
from huddle.standup.run import StandupRun

logger = get_logger(__name__)


class RunRegistry:
    """Creates runs and routes inbound messages to the run owning the thread.

    Each run is fully independent; the registry only maps thread ids to
    runs so one process can host standups for several channels.
    """

    def __init__(
        self,
        tracker: TicketTracker,
        classifier: ResponseClassifier,
        transport: ChatTransport,
        config: StandupConfig | None = None,
        run_factory: Callable[..., StandupRun] = StandupRun,
        narrator: StandupNarrator | None = None,
    ) -> None:
        self._tracker = tracker
        self._classifier = classifier
        self._transport = transport
        self._config = config or StandupConfig()
        self._run_factory = run_factory
        self._narrator = narrator
        self._runs: dict[str, StandupRun] = {}

    def __len__(self) -> int:
        return len(self._runs)

    async def start_run(
        self,
        participants: list[Participant],
        on_leave: list[AbsentParticipant] | None = None,
    ) -> StandupRun:
        """Start a new run and register it under its thread id.

        Raises:
            RunStateError: If the thread could not be opened
        """
        run = self._run_factory(
            tracker=self._tracker,
            classifier=self._classifier,
            transport=self._transport,
            config=self._config,
            narrator=self._narrator,
        )
        started = await run.start(participants, on_leave=on_leave)
        if not started or run.thread_id is None:
            raise RunStateError("Could not open a standup thread")

        self._runs[run.thread_id] = run
        logger.info("run_registered", run_id=run.run_id, thread_id=run.thread_id)
        return run

    def get(self, thread_id: str) -> StandupRun | None:
        return self._runs.get(thread_id)

    def runs(self) -> list[StandupRun]:
        return list(self._runs.values())

    def remove(self, thread_id: str) -> StandupRun | None:
        run = self._runs.pop(thread_id, None)
        if run is not None:
            run.close()
        return run

    async def dispatch(self, message: InboundMessage) -> str | None:
        """Deliver an inbound message to the run that owns its thread."""
        run = self._runs.get(message.thread_id)
        if run is None:
            logger.debug("message_for_unknown_thread", thread_id=message.thread_id)
            return None
        return await run.handle_inbound_text(message.sender_id, message.text, message.thread_id)

    def close(self) -> None:
        for run in self._runs.values():
            run.close()
