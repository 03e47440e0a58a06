"""Fixed-period timer that triggers sort passes."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from framesort.sorter import SortEngine

_logger = logging.getLogger(__name__)


class SortScheduler:
    """Start a sort pass every ``interval`` seconds unless one is running.

    Passes run as their own tasks so the timer keeps its period while a
    pass is moving the character around. :meth:`stop` only stops the
    timer; a pass already in flight runs to completion.
    """

    def __init__(self, engine: SortEngine, *, interval: float) -> None:
        self._engine = engine
        self._interval = interval
        self._timer: asyncio.Task[None] | None = None
        self._pass: asyncio.Task[object] | None = None

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._timer = asyncio.get_running_loop().create_task(self._tick_forever(), name="framesort-scheduler")

    async def stop(self) -> None:
        timer = self._timer
        self._timer = None
        if timer is None:
            return
        timer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await timer

    async def wait_idle(self) -> None:
        """Wait for the in-flight pass, if any."""
        current = self._pass
        if current is not None and not current.done():
            await asyncio.shield(current)

    def tick(self) -> bool:
        """Start a pass now unless the engine is busy; return whether one started."""
        if self._engine.is_sorting or (self._pass is not None and not self._pass.done()):
            _logger.debug("Sort pass still running; skipping tick")
            return False
        self._pass = asyncio.get_running_loop().create_task(self._engine.sort_inventory(), name="framesort-sort-pass")
        return True

    async def _tick_forever(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.tick()
