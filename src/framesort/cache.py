"""Scan result cache with a staleness clock."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable

from framesort.models.targets import TargetSnapshot

_logger = logging.getLogger(__name__)


class TargetCache:
    """Hold the latest :class:`TargetSnapshot` and rescan when it goes stale.

    A snapshot is stale when more than ``scan_interval`` seconds have
    passed since it was taken, or when its exact-target table is empty.
    The snapshot is swapped in as a whole once the scan has finished,
    so a sort pass never observes a half-built result.
    """

    def __init__(
        self,
        scan: Callable[[], Awaitable[TargetSnapshot]],
        *,
        scan_interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._scan = scan
        self._scan_interval = scan_interval
        self._clock = clock
        self._snapshot = TargetSnapshot()
        self._last_scan: float | None = None

    @property
    def snapshot(self) -> TargetSnapshot:
        return self._snapshot

    @property
    def last_scan(self) -> float | None:
        """Clock reading of the last completed scan, ``None`` before the first."""
        return self._last_scan

    def is_stale(self, now: float | None = None) -> bool:
        if self._last_scan is None or not self._snapshot.targets:
            return True
        if now is None:
            now = self._clock()
        return now - self._last_scan > self._scan_interval

    def invalidate(self) -> None:
        """Force the next :meth:`ensure_targets` call to rescan."""
        self._last_scan = None

    async def ensure_targets(self) -> TargetSnapshot:
        now = self._clock()
        if not self.is_stale(now):
            return self._snapshot

        snapshot = await self._scan()
        self._snapshot = snapshot
        self._last_scan = now

        _logger.info(
            "Scan complete. Found %d item target(s) across %d chest(s).",
            len(snapshot.targets),
            snapshot.container_count,
        )
        if snapshot.categories:
            _logger.info(
                "Category targets active: %d category(ies) across %d chest(s).",
                len(snapshot.categories),
                snapshot.category_container_count,
            )
        return snapshot
