# app/schemas/profile.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# App-level roles. Anonymous visitors have no token, so no role row.
Role = Literal["user", "admin"]


class ProfileRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    full_name: str | None
    phone: str | None
    created_at: datetime


class ProfileUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=30)

    @field_validator("full_name", "phone")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class AdminProbe(SQLModel):
    """
    Advisory admin flag. The front end uses it to decide whether to
    render the admin view; the policy layer still enforces access.
    """

    is_admin: bool
