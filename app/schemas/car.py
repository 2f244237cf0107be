# app/schemas/car.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

CarType = Literal["sedan", "suv", "luxury", "sports", "van", "electric"]
CarStatus = Literal["available", "rented", "maintenance"]

CAR_TYPES: tuple[str, ...] = ("sedan", "suv", "luxury", "sports", "van", "electric")

# Catalog filter value that keeps every row.
ALL_TYPES = "all"


class CarCreate(SQLModel):
    """
    Admin payload for adding a car to the fleet.

    Backend derives:
      - id, created_at, updated_at
      - status = 'available'
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    type: CarType
    brand: str = Field(max_length=50)
    model: str = Field(max_length=50)
    year: int = Field(ge=1900, le=2100)
    price_per_day: float = Field(gt=0)
    image_url: str | None = None
    seats: int = Field(gt=0, le=60)
    transmission: str
    fuel_type: str
    description: str | None = None
    features: list[str] | None = None

    @field_validator("name", "brand", "model", "transmission", "fuel_type")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("image_url", "description")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator("features")
    @classmethod
    def normalize_features(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        cleaned = [f.strip() for f in v if f and f.strip()]
        return cleaned or None


class CarRead(SQLModel):
    """
    Car representation for catalog, detail and admin views.
    """

    id: uuid.UUID
    name: str
    type: CarType
    brand: str
    model: str
    year: int
    price_per_day: float
    image_url: str | None
    status: CarStatus
    seats: int
    transmission: str
    fuel_type: str
    description: str | None
    features: list[str] | None
    created_at: datetime


class CarSummary(SQLModel):
    """
    Car fields embedded in booking listings.
    """

    name: str
    brand: str
    model: str
    image_url: str | None = None
