"""Cancellable timeout handles for participant sessions."""

import asyncio
from collections.abc import Awaitable, Callable

from huddle.observability.logging import get_logger
from huddle.standup.models import TimeoutStage

logger = get_logger(__name__)

TimerCallback = Callable[[TimeoutStage, int], Awaitable[None]]


class SessionTimer:
    """A single armed timeout window for one session.

    Every arm() or cancel() bumps the generation. A callback that fires
    carries the generation it was armed with, and the receiver must drop
    it unless `is_current(generation)` still holds. This is what keeps a
    timer that lost the race against a reply from acting on the session.
    """

    def __init__(self, on_fire: TimerCallback, name: str = "session") -> None:
        self._on_fire = on_fire
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._stage: TimeoutStage | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def stage(self) -> TimeoutStage | None:
        """Stage currently armed, or None."""
        return self._stage

    @property
    def armed(self) -> bool:
        return self._stage is not None

    def is_current(self, generation: int) -> bool:
        return self._stage is not None and generation == self._generation

    def arm(self, stage: TimeoutStage, delay: float) -> int:
        """Cancel any pending window and arm a new one.

        Returns:
            The generation the new window will fire with
        """
        self.cancel()
        self._stage = stage
        generation = self._generation
        self._task = asyncio.create_task(
            self._wait_and_fire(stage, delay, generation),
            name=f"timeout:{self._name}:{stage.value}:{generation}",
        )
        logger.debug("timer_armed", timer=self._name, stage=stage.value, delay=delay)
        return generation

    def cancel(self) -> None:
        """Invalidate the pending window, if any."""
        self._generation += 1
        self._stage = None
        task, self._task = self._task, None
        # A callback may cancel its own timer while running; let it finish.
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _wait_and_fire(self, stage: TimeoutStage, delay: float, generation: int) -> None:
        await asyncio.sleep(delay)
        try:
            await self._on_fire(stage, generation)
        except Exception as e:
            logger.exception(
                "timer_callback_failed",
                timer=self._name,
                stage=stage.value,
                error=str(e),
            )
