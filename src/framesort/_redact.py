"""Helpers for safe debug logging of bridge traffic.

The connect call carries account credentials and some bridge replies
(entity lists, inventories, tag registries) are very large. This module
produces a log-friendly copy: secrets replaced, long strings cut, and
long sequences summarised.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "accesstoken",
        "refreshtoken",
        "sessiontoken",
        "clienttoken",
        "authorization",
        "cookie",
    }
)

_MAX_DEPTH = 12


def redact_for_log(
    value: Any,
    *,
    max_string: int = 512,
    max_items: int = 20,
    _depth: int = 0,
) -> Any:
    """Return a redacted, size-bounded copy of *value* for debug logs."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")

    kwargs = {"max_string": max_string, "max_items": max_items, "_depth": _depth + 1}

    if isinstance(value, Mapping):
        return {
            str(key): "<redacted>" if str(key).lower() in _SENSITIVE_KEYS else redact_for_log(item, **kwargs)
            for key, item in value.items()
        }

    if isinstance(value, Sequence):
        head = [redact_for_log(item, **kwargs) for item in value[:max_items]]
        if len(value) > max_items:
            head.append(f"<+{len(value) - max_items} more>")
        return head

    return repr(value)
