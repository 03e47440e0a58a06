"""Structural interface to the game world.

The sort core only ever talks to a :class:`World`. Every method is a
coroutine, so each world call is a suspension point for the single
sort task. The production implementation is
:class:`framesort.world.bridge.BridgeWorld`; tests use in-memory doubles.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from framesort.models.geometry import BlockPos, Vec3
from framesort.models.world import Block, BotState, Entity, ItemRegistry, ItemStack, WorldEvent


class ContainerWindow(Protocol):
    """An open container. Valid only inside its ``open_container`` block."""

    async def deposit(self, item_type: int, metadata: int | None, count: int) -> None:
        ...


class World(Protocol):
    """Everything the sorter needs from the game client."""

    async def connect(self, options: Mapping[str, Any]) -> None:
        ...

    async def close(self) -> None:
        ...

    def events(self) -> AsyncIterator[WorldEvent]:
        ...

    async def bot_state(self) -> BotState:
        ...

    async def position(self) -> Vec3:
        ...

    async def entities(self) -> list[Entity]:
        ...

    async def block_at(self, position: BlockPos) -> Block | None:
        ...

    async def inventory_items(self) -> list[ItemStack]:
        ...

    async def item_registry(self) -> ItemRegistry:
        ...

    async def goto_near(self, position: BlockPos, reach: int) -> None:
        ...

    def open_container(self, block: Block) -> AbstractAsyncContextManager[ContainerWindow]:
        """Open *block*; the window is closed when the context exits, even on error."""
        ...
