"""Sort destination tables produced by a marker scan."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pydantic import Field

from framesort.models._base import FrameSortBaseModel
from framesort.models.geometry import BlockPos

TargetTable = Mapping[str, tuple[BlockPos, ...]]
"""Key (item name or tag) to the de-duplicated container positions for it."""


def merge_positions(
    table: dict[str, dict[BlockPos, None]],
    key: str,
    positions: Iterable[BlockPos],
) -> None:
    """Merge *positions* into ``table[key]``, keeping first-seen order."""
    bucket = table.setdefault(key, {})
    for pos in positions:
        bucket.setdefault(pos, None)


def freeze_table(table: Mapping[str, Mapping[BlockPos, None]]) -> dict[str, tuple[BlockPos, ...]]:
    return {key: tuple(bucket) for key, bucket in table.items() if bucket}


def _distinct_count(table: TargetTable) -> int:
    seen: set[BlockPos] = set()
    for positions in table.values():
        seen.update(positions)
    return len(seen)


class TargetSnapshot(FrameSortBaseModel):
    """Both target tables of one scan generation.

    The snapshot is replaced as a whole by the cache, so a reader can
    never pair the exact table of one scan with the category table of
    another.

    Parameters
    ----------
    targets : dict
        Item name to container positions, from markers displaying it.
    categories : dict
        Tag name to container positions, from markers displaying any
        item carrying that tag.
    scanned_at : float or None
        Clock reading when the scan completed; ``None`` for the empty
        pre-scan snapshot.
    """

    targets: dict[str, tuple[BlockPos, ...]] = Field(default_factory=dict)
    categories: dict[str, tuple[BlockPos, ...]] = Field(default_factory=dict)
    scanned_at: float | None = None

    @property
    def is_empty(self) -> bool:
        return not self.targets and not self.categories

    @property
    def container_count(self) -> int:
        """Distinct containers referenced by the exact table."""
        return _distinct_count(self.targets)

    @property
    def category_container_count(self) -> int:
        """Distinct containers referenced by the category table."""
        return _distinct_count(self.categories)
