"""World interface backed by a bridge sidecar that owns the game connection."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError

from framesort.config import SorterConfig
from framesort.exceptions import WorldError, WorldTransportError
from framesort.models.geometry import BlockPos, Vec3
from framesort.models.world import (
    Block,
    BotState,
    Entity,
    ItemRegistry,
    ItemStack,
    WorldEvent,
    WorldEventType,
)
from framesort.world._transport import BridgeTransport, Transport

_logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _pos_payload(position: BlockPos) -> dict[str, int]:
    return {"x": position.x, "y": position.y, "z": position.z}


def _as_list(endpoint: str, data: Any) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise WorldTransportError(f"Expected a list from {endpoint}, got {type(data).__name__}", endpoint=endpoint)
    return data


def _parse_entries(endpoint: str, data: Any, model: type[_ModelT]) -> list[_ModelT]:
    """Validate each list entry, dropping the ones that do not parse."""
    parsed: list[_ModelT] = []
    for entry in _as_list(endpoint, data):
        try:
            parsed.append(model.model_validate(entry))
        except ValidationError:
            _logger.debug("Skipping malformed entry from %s: %s", endpoint, entry)
    return parsed


class BridgeContainer:
    """Container window opened through the bridge."""

    def __init__(self, transport: Transport, window_id: int) -> None:
        self._transport = transport
        self.window_id = window_id

    async def deposit(self, item_type: int, metadata: int | None, count: int) -> None:
        await self._transport.post_json(
            "/container/deposit",
            {"windowId": self.window_id, "itemType": item_type, "metadata": metadata, "count": count},
        )

    async def close(self) -> None:
        await self._transport.post_json("/container/close", {"windowId": self.window_id})


class BridgeWorld:
    """Async :class:`~framesort.world.base.World` over the bridge protocol.

    Usage::

        async with BridgeWorld(config) as world:
            await world.connect(config.connect_options())
            async for event in world.events():
                ...
    """

    def __init__(
        self,
        config: SorterConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> BridgeWorld:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = BridgeTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise WorldError("World not initialized. Use 'async with BridgeWorld(...) as world:'")
        return self._transport

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    async def connect(self, options: Mapping[str, Any]) -> None:
        """Ask the bridge to join the game server described by *options*."""
        await self._require_transport().post_json("/bot/connect", options)

    async def close(self) -> None:
        """Disconnect from the game (best effort) and release HTTP resources."""
        transport = self._transport
        if transport is not None:
            try:
                await transport.post_json("/bot/disconnect")
            except WorldError:
                _logger.debug("Bridge disconnect failed", exc_info=True)
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    async def events(self) -> AsyncIterator[WorldEvent]:
        """Yield lifecycle events; a closed stream is reported as ``end``."""
        async for frame in self._require_transport().iter_events():
            try:
                event = WorldEvent.model_validate(frame)
            except ValidationError:
                _logger.debug("Ignoring unknown bridge event: %s", frame.get("event"))
                continue
            yield event
            if event.event == WorldEventType.END:
                return
        yield WorldEvent(event=WorldEventType.END, reason="event stream closed")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def bot_state(self) -> BotState:
        data = await self._require_transport().post_json("/bot/state")
        return BotState.model_validate(data)

    async def position(self) -> Vec3:
        return (await self.bot_state()).position

    async def entities(self) -> list[Entity]:
        data = await self._require_transport().post_json("/world/entities")
        return _parse_entries("/world/entities", data, Entity)

    async def block_at(self, position: BlockPos) -> Block | None:
        data = await self._require_transport().post_json("/world/block", _pos_payload(position))
        if data is None:
            return None
        return Block.model_validate(data)

    async def inventory_items(self) -> list[ItemStack]:
        data = await self._require_transport().post_json("/bot/inventory")
        return _parse_entries("/bot/inventory", data, ItemStack)

    async def item_registry(self) -> ItemRegistry:
        data = await self._require_transport().post_json("/registry/items")
        return ItemRegistry.model_validate(data or {})

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def goto_near(self, position: BlockPos, reach: int) -> None:
        """Walk until within *reach* blocks of *position*."""
        await self._require_transport().post_json("/bot/goto", {**_pos_payload(position), "range": reach})

    @contextlib.asynccontextmanager
    async def open_container(self, block: Block) -> AsyncIterator[BridgeContainer]:
        transport = self._require_transport()
        data = await transport.post_json("/container/open", _pos_payload(block.position))
        if not isinstance(data, dict) or "windowId" not in data:
            raise WorldTransportError("Missing 'windowId' from /container/open", endpoint="/container/open")
        window = BridgeContainer(transport, int(data["windowId"]))
        try:
            yield window
        finally:
            try:
                await window.close()
            except WorldError:
                # The server may already have closed the window; nothing left to release.
                _logger.debug("Closing container window %s failed", window.window_id, exc_info=True)
