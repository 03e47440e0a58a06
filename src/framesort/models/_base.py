"""Base model for world-interface payloads.

Every framesort value model inherits from :class:`FrameSortBaseModel`,
which provides:

* ``alias_generator=to_camel`` so the bridge's camelCase keys map
  automatically to snake_case fields.
* ``frozen=True`` so values read from the world can be shared (and
  hashed) without defensive copies.
* ``extra="ignore"`` so bridge payloads may carry fields this library
  does not model yet.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FrameSortBaseModel(BaseModel):
    """Base for framesort value models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
