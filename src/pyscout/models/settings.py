"""Remote sync settings model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pyscout.models._base import ScoutBaseModel


class Settings(ScoutBaseModel):
    """Remote endpoint configuration.

    Parameters
    ----------
    remote_endpoint_url : str or None
        URL records are pushed to and pulled from. ``None`` disables
        remote sync: records are kept locally only.
    """

    remote_endpoint_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("remoteEndpointUrl", "remote_endpoint_url", "sheetUrl", "googleScriptUrl"),
    )

    @field_validator("remote_endpoint_url", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value
