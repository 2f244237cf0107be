# app/models/car.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlmodel import SQLModel, Field


class Car(SQLModel, table=True):
    """
    Rental fleet entry.

    Matches the `cars` table:
      - id, name, type, brand, model, year, price_per_day, image_url,
        status, seats, transmission, fuel_type, description, features,
        created_at, updated_at

    Only admins create or delete cars (RLS "Admins can manage cars").
    """

    __tablename__ = "cars"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(description="Display name shown in the catalog")

    # sedan | suv | luxury | sports | van | electric
    type: str = Field(index=True, description="Car category")

    brand: str
    model: str
    year: int

    price_per_day: float = Field(
        gt=0,
        description="Daily rental price",
    )

    image_url: str | None = Field(
        default=None,
        description="Public photo URL (Supabase Storage or external)",
    )

    # available | rented | maintenance
    status: str = Field(
        default="available",
        index=True,
        description="Fleet status; only 'available' cars appear in the catalog",
    )

    seats: int = Field(gt=0)
    transmission: str
    fuel_type: str

    description: str | None = None

    # TEXT[] on Postgres, JSON on sqlite
    features: list[str] | None = Field(
        default=None,
        sa_column=Column(ARRAY(String).with_variant(JSON(), "sqlite")),
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
