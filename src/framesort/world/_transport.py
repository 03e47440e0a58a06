"""HTTP/WebSocket transport to the world bridge sidecar."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any, Protocol

import aiohttp

from framesort._constants import CONTAINER_CODES, NAVIGATION_CODES, NOT_CONNECTED_CODES, USER_AGENT
from framesort._redact import redact_for_log
from framesort.config import SorterConfig
from framesort.exceptions import (
    ContainerError,
    NavigationError,
    WorldApiError,
    WorldNotConnectedError,
    WorldTransportError,
)

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by :class:`BridgeWorld`.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`BridgeTransport`) concrete.
    """

    async def post_json(self, endpoint: str, payload: Mapping[str, Any] | None = None) -> Any:
        ...

    def iter_events(self) -> AsyncIterator[dict[str, Any]]:
        ...


def raise_for_error(endpoint: str, error: Any) -> None:
    """Map a bridge ``error`` object onto the exception hierarchy."""
    if isinstance(error, Mapping):
        code = str(error.get("code", ""))
        message = str(error.get("message", ""))
    else:
        code = ""
        message = str(error) if error is not None else ""

    text = f"{endpoint} failed: code={code} message={message}"
    if code in NOT_CONNECTED_CODES:
        raise WorldNotConnectedError(text, code=code, endpoint=endpoint)
    if code in NAVIGATION_CODES:
        raise NavigationError(text, code=code, endpoint=endpoint)
    if code in CONTAINER_CODES:
        raise ContainerError(text, code=code, endpoint=endpoint)
    raise WorldApiError(text, code=code, endpoint=endpoint)


def unwrap_envelope(endpoint: str, body: Any) -> Any:
    """Return ``data`` of an ``{"ok": ..., "data": ...}`` envelope or raise."""
    if not isinstance(body, dict) or "ok" not in body:
        raise WorldTransportError(
            f"Missing 'ok' field from {endpoint}",
            endpoint=endpoint,
        )
    if body["ok"] is not True:
        raise_for_error(endpoint, body.get("error"))
    return body.get("data")


class BridgeTransport:
    """JSON-over-HTTP transport with a WebSocket event stream."""

    def __init__(
        self,
        config: SorterConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any] | None = None) -> Any:
        """POST *payload* to ``{bridge_url}{endpoint}`` and unwrap the reply."""
        headers: dict[str, str] = {
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        url = f"{self._config.bridge_url}{endpoint}"
        body = json.dumps(dict(payload or {}), separators=(",", ":"))

        _logger.debug("POST %s %s", url, redact_for_log(dict(payload or {})))

        try:
            async with self._http.post(url, data=body, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise WorldTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except WorldTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise WorldTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body_json = json.loads(text)
        except json.JSONDecodeError as exc:
            raise WorldTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        data = unwrap_envelope(endpoint, body_json)
        _logger.debug("Reply from %s: %s", endpoint, redact_for_log(data, max_string=256))
        return data

    async def iter_events(self) -> AsyncIterator[dict[str, Any]]:
        """Yield decoded event frames from ``{bridge_url}/events`` until it closes."""
        url = f"{self._config.bridge_url}/events"
        try:
            async with self._http.ws_connect(url, headers={"user-agent": USER_AGENT}) as ws:
                async for msg in ws:
                    if msg.type == aiohttp.WSMsgType.TEXT:
                        try:
                            frame = json.loads(msg.data)
                        except json.JSONDecodeError:
                            _logger.debug("Ignoring non-JSON event frame: %s", msg.data[:200])
                            continue
                        if isinstance(frame, dict):
                            yield frame
                    elif msg.type == aiohttp.WSMsgType.ERROR:
                        raise WorldTransportError(
                            f"Event stream failed: {ws.exception()}",
                            endpoint="/events",
                        )
        except aiohttp.ClientError as exc:
            raise WorldTransportError(
                f"Event stream to {url} failed: {exc}",
                endpoint="/events",
            ) from exc
