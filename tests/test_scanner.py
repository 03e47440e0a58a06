from __future__ import annotations

import pytest
from fakes import FakeClock, FakeWorld, pos

from framesort.models import Entity, Vec3
from framesort.scanner import TargetScanner, displayed_item
from framesort.tags import TagIndex


def _scanner(
    world: FakeWorld,
    tags: TagIndex | None = None,
    *,
    sort_radius: int = 16,
    search_radius: int = 1,
) -> TargetScanner:
    return TargetScanner(
        world,
        tags or TagIndex.empty(),
        sort_radius=sort_radius,
        search_radius=search_radius,
        clock=FakeClock(),
    )


@pytest.mark.asyncio
async def test_single_frame_next_to_chest(world: FakeWorld) -> None:
    world.add_frame("A", (0.5, 64.5, 0.03))
    world.add_chest(1, 64, 0)

    snapshot = await _scanner(world).scan()

    assert snapshot.targets == {"A": (pos(1, 64, 0),)}
    assert snapshot.categories == {}
    assert snapshot.scanned_at == 1000.0


@pytest.mark.asyncio
async def test_tagged_item_populates_category_table(world: FakeWorld) -> None:
    world.add_frame("white_wool", (0.5, 64.5, 0.03))
    chest = world.add_chest(1, 64, 0)
    tags = TagIndex.build({"wool": [35]}, {"white_wool": 35})

    snapshot = await _scanner(world, tags).scan()

    assert snapshot.categories == {"wool": (chest,)}
    assert snapshot.targets == {"white_wool": (chest,)}


@pytest.mark.asyncio
async def test_frames_outside_sort_radius_are_ignored(world: FakeWorld) -> None:
    world.add_frame("far", (20.5, 64.5, 0.5))
    world.add_chest(21, 64, 0)
    world.add_frame("near", (3.5, 64.5, 0.5))
    world.add_chest(4, 64, 0)

    snapshot = await _scanner(world, sort_radius=16).scan()

    assert set(snapshot.targets) == {"near"}


@pytest.mark.asyncio
async def test_frames_without_item_or_chest_are_skipped_silently(world: FakeWorld) -> None:
    world.add_frame(None, (0.5, 64.5, 0.5))
    world.add_chest(1, 64, 0)
    world.add_frame("lonely", (8.5, 64.5, 8.5))
    world.add_frame("B", (-4.5, 64.5, 0.5))
    world.add_chest(-6, 64, 0)

    snapshot = await _scanner(world).scan()

    assert snapshot.targets == {"B": (pos(-6, 64, 0),)}


@pytest.mark.asyncio
async def test_only_frames_and_chests_are_recognised(world: FakeWorld) -> None:
    world.add_frame("A", (0.5, 64.5, 0.5), entity_name="armor_stand")
    world.add_frame("B", (5.5, 64.5, 0.5), entity_name="glow_item_frame")
    world.add_chest(6, 64, 0, kind="trapped_chest")
    world.add_chest(5, 65, 0, kind="barrel")

    snapshot = await _scanner(world).scan()

    assert snapshot.targets == {"B": (pos(6, 64, 0),)}


@pytest.mark.asyncio
async def test_same_chest_from_two_frames_is_merged(world: FakeWorld) -> None:
    chest = world.add_chest(1, 64, 0)
    world.add_frame("A", (0.5, 64.5, 0.5))
    world.add_frame("A", (2.5, 64.5, 0.5))
    world.add_frame("C", (1.5, 65.5, 0.5))

    snapshot = await _scanner(world).scan()

    assert snapshot.targets["A"] == (chest,)
    # The same container may serve several items.
    assert snapshot.targets["C"] == (chest,)


@pytest.mark.asyncio
async def test_rescan_of_unchanged_world_is_identical(world: FakeWorld) -> None:
    tags = TagIndex.build({"wool": [1], "dyeable": [1, 2]}, {"white_wool": 1, "red_wool": 2})
    world.add_frame("white_wool", (0.5, 64.5, 0.5))
    world.add_frame("red_wool", (4.5, 64.5, 0.5))
    world.add_chest(1, 64, 0)
    world.add_chest(0, 63, 1)
    world.add_chest(5, 64, 0)
    scanner = _scanner(world, tags)

    first = await scanner.scan()
    second = await scanner.scan()

    assert first.targets.keys() == second.targets.keys()
    assert first.categories.keys() == second.categories.keys()
    for key in first.targets:
        assert set(first.targets[key]) == set(second.targets[key])
    for key in first.categories:
        assert set(first.categories[key]) == set(second.categories[key])


@pytest.mark.asyncio
async def test_every_reported_chest_is_near_a_matching_frame_in_range() -> None:
    world = FakeWorld(position=Vec3(x=0, y=64, z=0))
    for x in range(-12, 13, 3):
        world.add_frame(f"item_{x % 2}", (x + 0.5, 64.5, 0.5))
        world.add_chest(x + 1, 64, 0)
        world.add_chest(x + 2, 65, 2)
    radius, search = 9, 2

    snapshot = await _scanner(world, sort_radius=radius, search_radius=search).scan()

    origin = world.bot_position
    for item_name, positions in snapshot.targets.items():
        for chest in positions:
            assert any(
                displayed_item(frame) is not None
                and displayed_item(frame).name == item_name  # type: ignore[union-attr]
                and frame.position.distance_to(origin) <= radius
                and all(abs(a - b) <= search for a, b in zip(chest.as_tuple(), frame.position.floored().as_tuple()))
                for frame in world.frames
            )


@pytest.mark.asyncio
async def test_one_block_query_per_cube_cell(world: FakeWorld) -> None:
    world.add_frame("A", (0.5, 64.5, 0.5))
    world.add_frame("B", (3.5, 64.5, 0.5))

    await _scanner(world, search_radius=2).scan()

    assert world.block_queries == 2 * 5**3


class TestDisplayedItem:
    def _frame(self, metadata: list[object]) -> Entity:
        return Entity(name="item_frame", position=Vec3(x=0, y=0, z=0), metadata=metadata)

    def test_slot_8_wins(self) -> None:
        meta: list[object] = [None] * 9
        meta[7] = {"name": "old"}
        meta[8] = {"name": "new"}
        assert displayed_item(self._frame(meta)).name == "new"  # type: ignore[union-attr]

    def test_falls_back_to_slot_7(self) -> None:
        meta: list[object] = [None] * 8
        meta[7] = {"name": "old", "type": 5, "count": 1}
        assert displayed_item(self._frame(meta)).name == "old"  # type: ignore[union-attr]

    def test_nameless_or_missing_item_is_none(self) -> None:
        meta: list[object] = [None] * 9
        meta[8] = {"count": 1}
        assert displayed_item(self._frame(meta)) is None
        assert displayed_item(self._frame([])) is None


@pytest.mark.asyncio
async def test_malformed_frame_item_does_not_spoil_other_markers(world: FakeWorld) -> None:
    world.add_frame("A", (0.5, 64.5, 0.03))
    world.add_chest(1, 64, 0)
    metadata: list[object] = [None] * 9
    metadata[8] = {"name": "B", "count": "lots"}
    world.frames.append(Entity(id=99, name="item_frame", position=Vec3(x=6.5, y=64.5, z=0.03), metadata=metadata))
    world.add_chest(7, 64, 0)

    snapshot = await _scanner(world).scan()

    assert snapshot.targets == {"A": (pos(1, 64, 0),)}
