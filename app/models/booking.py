# app/models/booking.py
import uuid
from datetime import date, datetime, timezone

from sqlmodel import SQLModel, Field


class Booking(SQLModel, table=True):
    """
    Reservation of one car for a contiguous date range.

    total_price is computed once at creation
    (price_per_day x days) and never re-validated afterwards.
    """

    __tablename__ = "bookings"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # The migration points this at auth.users(id). profiles.id mirrors
    # auth.users 1:1, so the ORM key to profiles is the local stand-in
    # used by create_all() and the SQLite tests.
    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    car_id: uuid.UUID = Field(
        foreign_key="cars.id",
        ondelete="CASCADE",
        index=True,
    )

    start_date: date
    end_date: date = Field(description="Strictly after start_date")

    total_price: float = Field(
        description="price_per_day x rental days at creation time",
    )

    # pending | confirmed | active | completed | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Booking status lifecycle",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last update timestamp (UTC)",
    )
