"""Base model for pyscout entities.

Every persisted entity inherits from :class:`ScoutBaseModel` which
provides:

* ``alias_generator=to_camel`` so snake_case attributes serialize to the
  camelCase keys used in storage and on the wire.
* ``populate_by_name`` so Python callers can use attribute names.
* ``extra="ignore"`` so unknown keys written by newer (or older) clients
  are tolerated.

Fields renamed since earlier versions of the storage format declare their
legacy keys through ``validation_alias=AliasChoices(...)``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ScoutBaseModel(BaseModel):
    """Frozen, alias-tolerant base for snapshot entities."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump as a JSON-compatible dict using the camelCase wire keys."""
        return self.model_dump(mode="json", by_alias=True)
