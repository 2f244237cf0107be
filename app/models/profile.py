# app/models/profile.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Profile(SQLModel, table=True):
    """
    Public profile mirrored from Supabase Auth.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    This table is *not* responsible for credentials. Supabase Auth
    stores them in its own schema. We only mirror the display name
    and phone.
    """

    __tablename__ = "profiles"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    full_name: str | None = Field(
        default=None,
        max_length=100,
        description="From sign-up metadata; first part of email by default",
    )

    phone: str | None = Field(default=None, max_length=30)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class UserRole(SQLModel, table=True):
    """
    Application role assignment ("admin" | "user").

    Every identity gets "user" on first sight; "admin" is granted
    out-of-band (grant_admin.py or SQL).
    """

    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role"),)

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    # auth.users(id) in the migration; profiles.id is its local mirror.
    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    role: str = Field(index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
