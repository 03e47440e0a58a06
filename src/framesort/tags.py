"""Item → category tag index.

The index is built once per session from the connected game version's
item registry and is immutable afterwards. A new session builds a new
index; nothing is ever removed from an existing one.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from framesort.models.world import ItemRegistry


class TagIndex:
    """Lookup of the category tags an item belongs to.

    Tags for an item are kept in tag-definition order. That order is the
    documented tie-break when an item's tags point at different
    containers: the first defined tag with any containers wins.
    """

    __slots__ = ("_items_by_name", "_tags_by_id")

    def __init__(
        self,
        items_by_name: Mapping[str, int],
        tags_by_id: Mapping[int, tuple[str, ...]],
    ) -> None:
        self._items_by_name = dict(items_by_name)
        self._tags_by_id = dict(tags_by_id)

    @classmethod
    def empty(cls) -> TagIndex:
        """Index used before the first session has provided a registry."""
        return cls({}, {})

    @classmethod
    def build(
        cls,
        item_tags: Mapping[str, Iterable[int]],
        items_by_name: Mapping[str, int],
    ) -> TagIndex:
        """Invert *item_tags* (tag → item ids) into item id → tags."""
        collected: dict[int, dict[str, None]] = {}
        for tag_name, entries in item_tags.items():
            for item_id in entries:
                # Lazily created; dict keys keep definition order and de-duplicate.
                collected.setdefault(item_id, {})[tag_name] = None
        return cls(items_by_name, {item_id: tuple(tags) for item_id, tags in collected.items()})

    @classmethod
    def from_registry(cls, registry: ItemRegistry) -> TagIndex:
        return cls.build(registry.item_tags, registry.items_by_name)

    def tags_of(self, item_name: str) -> tuple[str, ...]:
        """Tags of *item_name*; empty for unknown items. Never raises."""
        item_id = self._items_by_name.get(item_name)
        if item_id is None:
            return ()
        return self._tags_by_id.get(item_id, ())

    def __len__(self) -> int:
        return len(self._tags_by_id)
