"""User profile and preference schemas."""

from __future__ import annotations

from pydantic import ConfigDict, Field, field_validator

from pitchdeck.models.enums import UserRole
from pitchdeck.schemas.common import CamelModel


class ProfileUpdateRequest(CamelModel):
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    company_name: str | None = Field(default=None, max_length=200)
    role: UserRole | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _name_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("company_name")
    @classmethod
    def _strip(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v


class PreferencesUpdateRequest(CamelModel):
    """Top-level keys replace the stored values; anything else is kept."""

    model_config = ConfigDict(extra="allow")
