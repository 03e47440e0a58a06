#!/usr/bin/env python3
"""Dump the sort targets the bot currently sees.

This script connects through the world bridge, waits for the first
spawn, runs a single marker scan and prints both target tables, so
frame/chest layouts can be checked without letting the bot move.

Usage
-----
Start the bridge sidecar, set the usual environment variables and run::

    export MC_HOST="localhost"
    export MC_USERNAME="SorterBot"
    python scripts/dump_targets.py

Options::

    --json               Output as machine-readable JSON
    --radius N           Override SORT_RADIUS for this scan
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from framesort import BridgeWorld, SorterConfig, TagIndex, TargetScanner, TargetSnapshot  # noqa: E402
from framesort.models import WorldEventType  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _table_lines(table: dict[str, Any]) -> list[str]:
    if not table:
        return ["  (none)"]
    lines: list[str] = []
    for key in sorted(table):
        positions = ", ".join(str(pos) for pos in table[key])
        lines.append(f"  {key}: {positions}")
    return lines


def _as_json(snapshot: TargetSnapshot) -> dict[str, Any]:
    return {
        "targets": {key: [pos.as_tuple() for pos in value] for key, value in snapshot.targets.items()},
        "categories": {key: [pos.as_tuple() for pos in value] for key, value in snapshot.categories.items()},
    }


async def _scan_once(config: SorterConfig) -> TargetSnapshot:
    async with BridgeWorld(config) as world:
        await world.connect(config.connect_options())
        async for event in world.events():
            if event.event == WorldEventType.SPAWN:
                break
            if event.event == WorldEventType.END:
                raise SystemExit(f"Disconnected before spawn: {event.reason}")
        registry = await world.item_registry()
        scanner = TargetScanner(
            world,
            TagIndex.from_registry(registry),
            sort_radius=config.sort_radius,
            search_radius=config.chest_search_radius,
        )
        return await scanner.scan()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a report")
    parser.add_argument("--radius", type=int, help="Override SORT_RADIUS")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    overrides: dict[str, Any] = {}
    if args.radius is not None:
        overrides["sort_radius"] = args.radius
    config = SorterConfig.from_env(**overrides)

    snapshot = asyncio.run(_scan_once(config))

    if args.json:
        print(json.dumps(_as_json(snapshot), indent=2))
        return 0

    print(_section(f"Item targets ({len(snapshot.targets)})"))
    print("\n".join(_table_lines(snapshot.targets)))
    print(_section(f"Category targets ({len(snapshot.categories)})"))
    print("\n".join(_table_lines(snapshot.categories)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
