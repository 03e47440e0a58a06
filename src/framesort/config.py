"""Sorter configuration for framesort."""

from __future__ import annotations

import dataclasses
import math
import os
from typing import Any

from framesort._constants import (
    CHEST_SEARCH_RADIUS_BOUNDS,
    DEFAULT_BRIDGE_URL,
    DEFAULT_PORT,
    ENV_CONFIG_MAP,
    SCAN_INTERVAL_BOUNDS,
    SORT_INTERVAL_BOUNDS,
    SORT_RADIUS_BOUNDS,
)
from framesort.exceptions import FrameSortConfigError


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def clamp_number(value: Any, minimum: int, maximum: int, fallback: int) -> int:
    """Coerce *value* to an int within ``[minimum, maximum]``.

    Non-numeric and non-finite inputs yield *fallback* instead of raising,
    so a bad environment value never prevents startup.
    """
    number = _to_float(value)
    if number is None:
        return fallback
    return int(min(max(number, minimum), maximum))


def _optional_float(value: Any) -> float | None:
    number = _to_float(value)
    if number is None or number <= 0:
        return None
    return number


@dataclasses.dataclass(frozen=True)
class SorterConfig:
    """Sorter configuration.

    Parameters
    ----------
    host : str
        Game server address, passed through to the world interface.
    port : int
        Game server port.
    username : str
        Account / character name to connect as.
    password : str or None
        Optional credential for offline-mode servers. Never logged.
    version : str or None
        Protocol version; ``None`` lets the world interface negotiate.
    auth : str or None
        Authentication mode (e.g. ``"microsoft"``), passed through unchanged.
    sort_radius : int
        Maximum distance from the character for a marker to be considered.
        Clamped to ``[1, 128]``.
    sort_interval : int
        Seconds between scheduled sort passes. Clamped to ``[5, 3600]``.
    scan_interval : int
        Minimum seconds between marker re-scans. Clamped to ``[5, 3600]``.
    chest_search_radius : int
        Half-width of the cube searched around each marker for containers.
        Clamped to ``[1, 4]``.
    bridge_url : str
        Base URL of the world bridge sidecar.
    request_timeout : float or None
        Total timeout for a single bridge request in seconds. ``None``
        leaves timing entirely to the world interface.
    """

    host: str = "localhost"
    port: int = DEFAULT_PORT
    username: str = "MineflayerBot"
    password: str | None = dataclasses.field(default=None, repr=False)
    version: str | None = None
    auth: str | None = None
    sort_radius: int = SORT_RADIUS_BOUNDS[2]
    sort_interval: int = SORT_INTERVAL_BOUNDS[2]
    scan_interval: int = SCAN_INTERVAL_BOUNDS[2]
    chest_search_radius: int = CHEST_SEARCH_RADIUS_BOUNDS[2]
    bridge_url: str = DEFAULT_BRIDGE_URL
    request_timeout: float | None = None

    def __post_init__(self) -> None:
        # Frozen dataclass: normalise through object.__setattr__.
        object.__setattr__(self, "sort_radius", clamp_number(self.sort_radius, *SORT_RADIUS_BOUNDS))
        object.__setattr__(self, "sort_interval", clamp_number(self.sort_interval, *SORT_INTERVAL_BOUNDS))
        object.__setattr__(self, "scan_interval", clamp_number(self.scan_interval, *SCAN_INTERVAL_BOUNDS))
        object.__setattr__(
            self,
            "chest_search_radius",
            clamp_number(self.chest_search_radius, *CHEST_SEARCH_RADIUS_BOUNDS),
        )
        port = _to_float(self.port)
        object.__setattr__(self, "port", int(port) if port is not None else DEFAULT_PORT)
        object.__setattr__(self, "request_timeout", _optional_float(self.request_timeout))
        bridge_url = str(self.bridge_url).strip().rstrip("/")
        if not bridge_url.startswith(("http://", "https://")):
            raise FrameSortConfigError(f"bridge_url must be an http(s) URL, got {self.bridge_url!r}")
        object.__setattr__(self, "bridge_url", bridge_url)

    def connect_options(self) -> dict[str, Any]:
        """Connection fields handed to the world interface unchanged."""
        options: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "username": self.username,
            "version": self.version,
            "auth": self.auth,
        }
        if self.password is not None:
            options["password"] = self.password
        return options

    @classmethod
    def from_env(cls, **overrides: Any) -> SorterConfig:
        """Create configuration from environment variables.

        Reads ``MC_*`` connection variables, the ``SORT_*`` /
        ``CHEST_SEARCH_RADIUS`` tuning variables and the ``FRAMESORT_*``
        bridge variables. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SorterConfig
            Populated (and clamped) configuration.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and val != "":
                config_kwargs[field_name] = val

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
