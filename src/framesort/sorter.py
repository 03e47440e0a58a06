"""Sort engine: move held items into the containers their markers name."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from framesort._constants import CONTAINER_REACH
from framesort.cache import TargetCache
from framesort.models.geometry import BlockPos
from framesort.models.targets import TargetSnapshot
from framesort.tags import TagIndex
from framesort.world.base import World

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SortSummary:
    """Outcome of one :meth:`SortEngine.sort_inventory` call.

    ``ran`` is ``False`` when the call was skipped because another pass
    held the in-progress flag. ``unmatched`` lists items with no known
    destination; they stay in the inventory by design.
    """

    ran: bool = False
    deposited: list[str] = field(default_factory=list)
    undeposited: list[str] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)


class SortEngine:
    """Runs sort passes, at most one at a time."""

    def __init__(
        self,
        world: World,
        cache: TargetCache,
        tag_index: TagIndex,
        *,
        reach: int = CONTAINER_REACH,
    ) -> None:
        self._world = world
        self._cache = cache
        self._tag_index = tag_index
        self._reach = reach
        self._sorting = False

    @property
    def is_sorting(self) -> bool:
        return self._sorting

    @contextlib.contextmanager
    def _sorting_guard(self) -> Iterator[None]:
        self._sorting = True
        try:
            yield
        finally:
            self._sorting = False

    def resolve_targets(self, item_name: str, snapshot: TargetSnapshot) -> tuple[BlockPos, ...] | None:
        """Containers for *item_name*: exact match first, else the first tag with any."""
        exact = snapshot.targets.get(item_name)
        if exact:
            return exact
        for tag in self._tag_index.tags_of(item_name):
            by_tag = snapshot.categories.get(tag)
            if by_tag:
                return by_tag
        return None

    async def deposit_into_chest(self, position: BlockPos, item_name: str) -> bool:
        """Deposit every held stack named *item_name* into the container at *position*.

        Returns ``False`` without moving when no block is loaded there.
        """
        block = await self._world.block_at(position)
        if block is None:
            return False

        await self._world.goto_near(position, self._reach)
        deposited = False
        async with self._world.open_container(block) as container:
            stacks = [stack for stack in await self._world.inventory_items() if stack.name == item_name]
            for stack in stacks:
                await container.deposit(stack.type, None, stack.count)
                deposited = True
        return deposited

    async def deposit_into_targets(self, positions: Sequence[BlockPos], item_name: str) -> bool:
        for position in positions:
            try:
                if await self.deposit_into_chest(position, item_name):
                    return True
            except Exception:
                _logger.error("Deposit failed for %s.", item_name, exc_info=True)
        return False

    async def sort_inventory(self) -> SortSummary:
        """Run one sort pass unless one is already running.

        Never raises: a failing pass is logged and abandoned, and the next
        scheduled pass starts from scratch.
        """
        summary = SortSummary()
        # Checked and set before the first await, so overlapping callers bail out here.
        if self._sorting:
            return summary

        with self._sorting_guard():
            summary.ran = True
            try:
                await self._run_pass(summary)
            except Exception:
                _logger.error("Sorting error:", exc_info=True)

        _logger.debug(
            "Sort pass done: deposited=%s undeposited=%s unmatched=%s",
            summary.deposited,
            summary.undeposited,
            summary.unmatched,
        )
        return summary

    async def _run_pass(self, summary: SortSummary) -> None:
        items = await self._world.inventory_items()
        snapshot = await self._cache.ensure_targets()
        if not items or snapshot.is_empty:
            return

        for item in items:
            positions = self.resolve_targets(item.name, snapshot)
            if positions is None:
                summary.unmatched.append(item.name)
                continue
            if await self.deposit_into_targets(positions, item.name):
                summary.deposited.append(item.name)
            else:
                summary.undeposited.append(item.name)
