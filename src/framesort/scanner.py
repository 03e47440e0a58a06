"""Marker scan: derive sort destinations from item frames near containers."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from framesort._constants import CONTAINER_BLOCK_NAMES, MARKER_ENTITY_NAMES, MARKER_ITEM_SLOTS
from framesort.models.geometry import BlockPos
from framesort.models.targets import TargetSnapshot, freeze_table, merge_positions
from framesort.models.world import Entity, ItemStack
from framesort.tags import TagIndex
from framesort.world.base import World

_logger = logging.getLogger(__name__)


def displayed_item(frame: Entity) -> ItemStack | None:
    """Item shown by *frame*: slot 8, else slot 7, else nothing."""
    for slot in MARKER_ITEM_SLOTS:
        if slot >= len(frame.metadata):
            continue
        item = _coerce_item(frame.metadata[slot])
        if item is not None:
            return item
    return None


def _coerce_item(value: Any) -> ItemStack | None:
    if isinstance(value, ItemStack):
        return value
    if isinstance(value, dict) and value.get("name"):
        try:
            return ItemStack.model_validate(value)
        except ValidationError:
            _logger.debug("Ignoring malformed frame item: %s", value.get("name"))
    return None


class TargetScanner:
    """Build a fresh :class:`TargetSnapshot` from the current world state.

    Each call issues one ``block_at`` query per coordinate of the cube
    searched around every in-range frame, i.e.
    ``frames * (2 * search_radius + 1) ** 3`` lookups. The radii are
    small and clamped, so no spatial indexing is attempted.
    """

    def __init__(
        self,
        world: World,
        tag_index: TagIndex,
        *,
        sort_radius: float,
        search_radius: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._world = world
        self._tag_index = tag_index
        self._sort_radius = sort_radius
        self._search_radius = search_radius
        self._clock = clock

    async def find_containers_near(self, frame: Entity) -> list[BlockPos]:
        base = frame.position.floored()
        radius = self._search_radius
        found: list[BlockPos] = []
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                for dz in range(-radius, radius + 1):
                    block = await self._world.block_at(base.offset(dx, dy, dz))
                    if block is not None and block.name in CONTAINER_BLOCK_NAMES:
                        found.append(block.position)
        return found

    async def scan(self) -> TargetSnapshot:
        origin = await self._world.position()
        frames = [entity for entity in await self._world.entities() if entity.name in MARKER_ENTITY_NAMES]

        targets: dict[str, dict[BlockPos, None]] = {}
        categories: dict[str, dict[BlockPos, None]] = {}

        for frame in frames:
            if frame.position.distance_to(origin) > self._sort_radius:
                continue
            item = displayed_item(frame)
            if item is None:
                continue
            containers = await self.find_containers_near(frame)
            if not containers:
                continue
            merge_positions(targets, item.name, containers)
            for tag in self._tag_index.tags_of(item.name):
                merge_positions(categories, tag, containers)

        _logger.debug("Scanned %d frame(s) around %s", len(frames), origin)
        return TargetSnapshot(
            targets=freeze_table(targets),
            categories=freeze_table(categories),
            scanned_at=self._clock(),
        )
