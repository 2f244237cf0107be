# app/schemas/booking.py
import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.schemas.car import CarSummary

BookingStatus = Literal["pending", "confirmed", "active", "completed", "cancelled"]


class BookingCreate(SQLModel):
    """
    Payload for booking a car.

    Dates are optional at the schema level so that a missing date is
    reported with the same message the booking form shows.

    Backend derives:
      - user_id from token
      - status = 'pending'
      - total_price from the car's price_per_day
    """

    model_config = ConfigDict(extra="forbid")

    car_id: uuid.UUID
    start_date: date | None = None
    end_date: date | None = None


class BookingQuote(SQLModel):
    """
    Price preview for a date range.
    """

    car_id: uuid.UUID
    start_date: date
    end_date: date
    days: int
    price_per_day: float
    total_price: float


class BookingRead(SQLModel):
    """
    Booking row without joins.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    car_id: uuid.UUID
    start_date: date
    end_date: date
    total_price: float
    status: BookingStatus
    created_at: datetime


class BookingWithCarRead(BookingRead):
    """
    Entry in the signed-in user's booking list.
    """

    car: CarSummary | None = None


class AdminBookingRead(BookingWithCarRead):
    """
    Entry in the admin booking list; adds the customer's name.
    """

    customer_name: str | None = None


class BookingStatusUpdate(SQLModel):
    """
    Admin payload to change booking status.
    """

    model_config = ConfigDict(extra="forbid")

    status: BookingStatus
