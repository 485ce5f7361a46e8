"""
Request DTOs for the URL shortening endpoint.
"""

from __future__ import annotations

from typing import Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


class ShortenRequest(BaseModel):
    """Request body for creating a new short link.

    Accepts ``url`` / ``original_url`` as aliases for ``long_url`` and
    ``alias`` as an alias for ``code``.
    """

    model_config = ConfigDict(populate_by_name=True)

    long_url: str = Field(
        validation_alias=AliasChoices("long_url", "url", "original_url")
    )
    code: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("code", "alias")
    )
    title: Optional[str] = Field(default=None, max_length=200)
    expiration_days: Optional[int] = Field(default=None, gt=0)

    @field_validator("long_url", mode="after")
    @classmethod
    def _strip_url(cls, v: str) -> str:
        return v.strip()

    @field_validator("code", mode="after")
    @classmethod
    def _blank_code_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None
