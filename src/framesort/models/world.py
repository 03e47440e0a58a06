"""Snapshots of world state as reported by the world interface."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field

from framesort.models._base import FrameSortBaseModel
from framesort.models.geometry import BlockPos, Vec3


class ItemStack(FrameSortBaseModel):
    """A stack of items in an inventory slot or on display in a frame.

    Parameters
    ----------
    name : str
        Item identifier (e.g. ``"white_wool"``).
    type : int
        Numeric item id used by container deposit calls.
    count : int
        Number of items in the stack.
    metadata : int or None
        Damage / variant value on protocol versions that still use it.
    """

    name: str
    type: int = 0
    count: int = 1
    metadata: int | None = None


class Entity(FrameSortBaseModel):
    """An entity near the character. Only frames matter for sorting."""

    id: int | None = None
    name: str | None = None
    position: Vec3
    metadata: list[Any] = Field(default_factory=list)


class Block(FrameSortBaseModel):
    """A block resolved at a position."""

    name: str
    position: BlockPos


class ItemRegistry(FrameSortBaseModel):
    """Item data of the connected game version.

    Parameters
    ----------
    items_by_name : dict
        Item identifier to numeric item id.
    item_tags : dict
        Tag name (e.g. ``"wool"``) to the numeric ids of its member items,
        in tag-definition order.
    """

    items_by_name: dict[str, int] = Field(default_factory=dict)
    item_tags: dict[str, list[int]] = Field(default_factory=dict)


class BotState(FrameSortBaseModel):
    """Identity and location of the controlled character."""

    username: str
    version: str | None = None
    position: Vec3


class WorldEventType(StrEnum):
    SPAWN = "spawn"
    END = "end"
    KICKED = "kicked"
    ERROR = "error"


class WorldEvent(FrameSortBaseModel):
    """A connection lifecycle event pushed by the world interface."""

    event: WorldEventType
    reason: str | None = None
    message: str | None = None
