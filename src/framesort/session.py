"""Per-connection sorter lifecycle.

A :class:`SortSession` owns every piece of mutable sorter state: the tag
index, the target cache, the sort engine (with its in-progress flag) and
the scheduler. All of it is rebuilt from scratch on each ``spawn`` so a
reconnect never sees caches from a previous world.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from framesort.cache import TargetCache
from framesort.config import SorterConfig
from framesort.models.world import WorldEvent, WorldEventType
from framesort.scanner import TargetScanner
from framesort.scheduler import SortScheduler
from framesort.sorter import SortEngine
from framesort.tags import TagIndex
from framesort.world.base import World

_logger = logging.getLogger(__name__)


class SortSession:
    """Drive a :class:`World` through one connection: connect, sort, disconnect."""

    def __init__(
        self,
        world: World,
        config: SorterConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._world = world
        self._config = config
        self._clock = clock
        self.tag_index = TagIndex.empty()
        self.cache: TargetCache | None = None
        self.engine: SortEngine | None = None
        self.scheduler: SortScheduler | None = None

    async def run(self) -> None:
        """Connect and handle events until the world reports ``end``."""
        try:
            await self._world.connect(self._config.connect_options())
            async for event in self._world.events():
                await self.handle_event(event)
                if event.event == WorldEventType.END:
                    break
        finally:
            await self._shutdown()
            await self._world.close()

    async def handle_event(self, event: WorldEvent) -> None:
        if event.event == WorldEventType.SPAWN:
            await self._on_spawn()
        elif event.event == WorldEventType.END:
            _logger.info("Disconnected from server")
            await self._stop_scheduler()
        elif event.event == WorldEventType.KICKED:
            _logger.info("Kicked from server: %s", event.reason)
        elif event.event == WorldEventType.ERROR:
            _logger.error("Bot error: %s", event.message or event.reason)

    async def _on_spawn(self) -> None:
        # The previous pass must finish before a fresh engine can start another.
        await self._shutdown()

        registry = await self._world.item_registry()
        self.tag_index = TagIndex.from_registry(registry)
        scanner = TargetScanner(
            self._world,
            self.tag_index,
            sort_radius=self._config.sort_radius,
            search_radius=self._config.chest_search_radius,
            clock=self._clock,
        )
        self.cache = TargetCache(scanner.scan, scan_interval=self._config.scan_interval, clock=self._clock)
        self.engine = SortEngine(self._world, self.cache, self.tag_index)
        self.scheduler = SortScheduler(self.engine, interval=self._config.sort_interval)

        state = await self._world.bot_state()
        _logger.info("Connected as %s", state.username)
        self.scheduler.start()

    async def _stop_scheduler(self) -> None:
        if self.scheduler is not None:
            await self.scheduler.stop()

    async def _shutdown(self) -> None:
        if self.scheduler is None:
            return
        await self.scheduler.stop()
        await self.scheduler.wait_idle()
