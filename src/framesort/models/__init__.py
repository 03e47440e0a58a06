"""Data models for world state and sort targets."""

from framesort.models._base import FrameSortBaseModel
from framesort.models.geometry import BlockPos, Vec3
from framesort.models.targets import TargetSnapshot, TargetTable, freeze_table, merge_positions
from framesort.models.world import (
    Block,
    BotState,
    Entity,
    ItemRegistry,
    ItemStack,
    WorldEvent,
    WorldEventType,
)

__all__ = [
    "Block",
    "BlockPos",
    "BotState",
    "Entity",
    "FrameSortBaseModel",
    "ItemRegistry",
    "ItemStack",
    "TargetSnapshot",
    "TargetTable",
    "Vec3",
    "WorldEvent",
    "WorldEventType",
    "freeze_table",
    "merge_positions",
]
