"""Custom exception hierarchy for framesort."""

from __future__ import annotations


class FrameSortError(Exception):
    """Base exception for all framesort errors."""


class FrameSortConfigError(FrameSortError):
    """Invalid or missing configuration."""


class WorldError(FrameSortError):
    """Failure reported by (or while talking to) the world interface."""


class WorldTransportError(WorldError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class WorldApiError(WorldError):
    """Bridge answered with ``ok: false`` (application-level error)."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class WorldNotConnectedError(WorldApiError):
    """The bridge has no live game connection (code ``not_connected``)."""


class NavigationError(WorldApiError):
    """Pathfinding could not bring the character to its goal.

    Covers bridge codes ``goal_unreachable`` and ``path_stopped``.
    """


class ContainerError(WorldApiError):
    """A container could not be opened or its window went away mid-use."""
