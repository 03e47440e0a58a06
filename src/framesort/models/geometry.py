"""World coordinate models."""

from __future__ import annotations

import math

from framesort.models._base import FrameSortBaseModel


class BlockPos(FrameSortBaseModel):
    """Integer block coordinate.

    Containers are identified by value through their ``BlockPos``; two
    positions with the same coordinates are the same container.
    """

    x: int
    y: int
    z: int

    def offset(self, dx: int, dy: int, dz: int) -> BlockPos:
        return BlockPos(x=self.x + dx, y=self.y + dy, z=self.z + dz)

    def to_vec3(self) -> Vec3:
        return Vec3(x=float(self.x), y=float(self.y), z=float(self.z))

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


class Vec3(FrameSortBaseModel):
    """Continuous world position (entities, the controlled character)."""

    x: float
    y: float
    z: float

    def floored(self) -> BlockPos:
        """Block coordinate containing this point."""
        return BlockPos(x=math.floor(self.x), y=math.floor(self.y), z=math.floor(self.z))

    def distance_to(self, other: Vec3) -> float:
        return math.dist((self.x, self.y, self.z), (other.x, other.y, other.z))
