from __future__ import annotations

import asyncio
import logging

import pytest
from fakes import FakeClock, FakeWorld, registry

from framesort.config import SorterConfig
from framesort.models import WorldEvent, WorldEventType
from framesort.session import SortSession

_CONFIG = SorterConfig(username="SorterBot", sort_interval=3600, password="hunter2")


def _event(kind: WorldEventType, **kwargs: str) -> WorldEvent:
    return WorldEvent(event=kind, **kwargs)


@pytest.mark.asyncio
async def test_full_lifecycle_is_logged(world: FakeWorld, caplog: pytest.LogCaptureFixture) -> None:
    world.registry = registry({"white_wool": 1}, {"wool": [1]})
    world.scripted_events = [
        _event(WorldEventType.SPAWN),
        _event(WorldEventType.KICKED, reason="idle too long"),
        _event(WorldEventType.ERROR, message="socket hang up"),
        _event(WorldEventType.END, reason="socketClosed"),
        _event(WorldEventType.SPAWN),  # never reached
    ]
    session = SortSession(world, _CONFIG, clock=FakeClock())

    with caplog.at_level(logging.INFO, logger="framesort.session"):
        await session.run()

    assert [record.getMessage() for record in caplog.records] == [
        "Connected as SorterBot",
        "Kicked from server: idle too long",
        "Bot error: socket hang up",
        "Disconnected from server",
    ]
    assert caplog.records[2].levelno == logging.ERROR
    assert world.connected_with == _CONFIG.connect_options()
    assert world.is_closed
    assert session.scheduler is not None
    assert not session.scheduler.is_running
    assert session.tag_index.tags_of("white_wool") == ("wool",)


@pytest.mark.asyncio
async def test_spawn_starts_scheduler(world: FakeWorld) -> None:
    session = SortSession(world, _CONFIG)

    await session.handle_event(_event(WorldEventType.SPAWN))

    assert session.scheduler is not None
    assert session.scheduler.is_running
    await session.handle_event(_event(WorldEventType.END))
    assert not session.scheduler.is_running


@pytest.mark.asyncio
async def test_respawn_rebuilds_session_state(world: FakeWorld) -> None:
    session = SortSession(world, _CONFIG)
    await session.handle_event(_event(WorldEventType.SPAWN))
    first_scheduler = session.scheduler
    first_cache = session.cache
    first_engine = session.engine

    world.registry = registry({"oak_log": 5}, {"logs": [5]})
    await session.handle_event(_event(WorldEventType.SPAWN))

    assert session.cache is not first_cache
    assert session.engine is not first_engine
    assert first_scheduler is not None and not first_scheduler.is_running
    assert session.scheduler is not None and session.scheduler.is_running
    assert session.tag_index.tags_of("oak_log") == ("logs",)
    await session.handle_event(_event(WorldEventType.END))


@pytest.mark.asyncio
async def test_world_closed_when_event_stream_ends_without_end_event(world: FakeWorld) -> None:
    world.scripted_events = [_event(WorldEventType.SPAWN)]
    session = SortSession(world, _CONFIG)

    await session.run()

    assert world.is_closed
    assert session.scheduler is not None
    assert not session.scheduler.is_running


@pytest.mark.asyncio
async def test_spawned_session_sorts_on_tick(world: FakeWorld) -> None:
    world.add_frame("A", (0.5, 64.5, 0.5))
    chest = world.add_chest(1, 64, 0)
    world.give("A", item_type=7, count=5)
    session = SortSession(world, _CONFIG, clock=FakeClock())
    await session.handle_event(_event(WorldEventType.SPAWN))
    assert session.scheduler is not None

    session.scheduler.tick()
    await session.scheduler.wait_idle()

    assert world.deposits == [(chest, 7, 5)]
    await session.handle_event(_event(WorldEventType.END))


@pytest.mark.asyncio
async def test_respawn_waits_for_pass_in_flight(world: FakeWorld) -> None:
    world.add_frame("A", (0.5, 64.5, 0.5))
    chest = world.add_chest(1, 64, 0)
    world.give("A", item_type=7, count=5)
    world.goto_gate = asyncio.Event()
    session = SortSession(world, _CONFIG, clock=FakeClock())
    await session.handle_event(_event(WorldEventType.SPAWN))
    assert session.scheduler is not None and session.engine is not None
    first_engine = session.engine

    assert session.scheduler.tick()
    while not world.gotos:
        await asyncio.sleep(0)

    respawn = asyncio.create_task(session.handle_event(_event(WorldEventType.SPAWN)))
    for _ in range(5):
        await asyncio.sleep(0)
    assert not respawn.done()
    assert session.engine is first_engine
    assert first_engine.is_sorting

    world.goto_gate.set()
    await respawn

    assert not first_engine.is_sorting
    assert session.engine is not first_engine
    assert world.gotos == [chest]
    assert world.deposits == [(chest, 7, 5)]
    await session.handle_event(_event(WorldEventType.END))
