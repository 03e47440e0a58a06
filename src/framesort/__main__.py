"""Command-line entry point: ``framesort`` / ``python -m framesort``.

Connection and tuning settings come from the environment (see
:meth:`framesort.config.SorterConfig.from_env`); flags override them.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
from typing import Any

from framesort.config import SorterConfig
from framesort.exceptions import FrameSortError
from framesort.session import SortSession
from framesort.world.bridge import BridgeWorld

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="framesort",
        description="Sort the bot's inventory into chests labeled by nearby item frames.",
    )
    parser.add_argument("--bridge-url", help="World bridge base URL (default: $FRAMESORT_BRIDGE_URL)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser.parse_args(argv)


async def _run(config: SorterConfig) -> None:
    async with BridgeWorld(config) as world:
        await SortSession(world, config).run()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    overrides: dict[str, Any] = {}
    if args.bridge_url:
        overrides["bridge_url"] = args.bridge_url

    try:
        config = SorterConfig.from_env(**overrides)
    except FrameSortError as exc:
        logging.getLogger("framesort").error("Invalid configuration: %s", exc)
        return 2

    try:
        with contextlib.suppress(KeyboardInterrupt):
            asyncio.run(_run(config))
    except FrameSortError:
        logging.getLogger("framesort").error("Session failed", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
