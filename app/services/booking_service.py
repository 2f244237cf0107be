# app/services/booking_service.py
import math
import uuid
from datetime import date, datetime, time, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.booking import Booking
from app.models.car import Car
from app.models.profile import Profile
from app.repositories.booking_repo import BookingRepository
from app.repositories.car_repo import CarRepository
from app.schemas.booking import (
    AdminBookingRead,
    BookingCreate,
    BookingQuote,
    BookingStatusUpdate,
    BookingWithCarRead,
)
from app.schemas.car import CarSummary

SECONDS_PER_DAY = 24 * 60 * 60

# Intended lifecycle. Only enforced when ENFORCE_BOOKING_TRANSITIONS is on.
BOOKING_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"active", "cancelled"},
    "active": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}


def _as_datetime(value: date | datetime) -> datetime:
    """Naive UTC datetime; plain dates start at midnight."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return datetime.combine(value, time.min)


def validate_date_range(
    start: date | datetime | None,
    end: date | datetime | None,
) -> None:
    """
    Reject missing dates and ranges where end <= start.

    Raises:
        HTTPException(400)
    """
    if start is None or end is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please select start and end dates",
        )
    if _as_datetime(start) >= _as_datetime(end):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date must be after start date",
        )


def rental_days(start: date | datetime, end: date | datetime) -> int:
    """
    Number of billable days: partial days round up.
    """
    validate_date_range(start, end)
    span = _as_datetime(end) - _as_datetime(start)
    return math.ceil(span.total_seconds() / SECONDS_PER_DAY)


def calculate_total_price(
    price_per_day: float,
    start: date | datetime,
    end: date | datetime,
) -> float:
    """
    total = price_per_day x ceil((end - start) in days), rounded to cents.
    """
    return round(price_per_day * rental_days(start, end), 2)


def is_allowed_transition(current: str, new: str) -> bool:
    return new in BOOKING_TRANSITIONS.get(current, set())


class BookingService:
    """
    Business logic for bookings.

    Responsibilities:
      - quote and create bookings (status 'pending', server-side price)
      - list the signed-in user's bookings
      - admin listing and status changes
    """

    def __init__(
        self,
        booking_repo: BookingRepository,
        car_repo: CarRepository,
        enforce_transitions: bool = False,
    ):
        self.booking_repo = booking_repo
        self.car_repo = car_repo
        self.enforce_transitions = enforce_transitions

    # -------- Helpers --------

    def _get_car(self, session: Session, car_id: uuid.UUID) -> Car:
        car = self.car_repo.get_by_id(session, car_id)
        if not car:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Car not found",
            )
        return car

    @staticmethod
    def _car_summary(car: Car | None) -> CarSummary | None:
        if car is None:
            return None
        return CarSummary(
            name=car.name,
            brand=car.brand,
            model=car.model,
            image_url=car.image_url,
        )

    # -------- User-facing operations --------

    def quote(
        self,
        session: Session,
        car_id: uuid.UUID,
        start_date: date | None,
        end_date: date | None,
    ) -> BookingQuote:
        """
        Price preview shown on the detail page before booking.
        """
        validate_date_range(start_date, end_date)
        car = self._get_car(session, car_id)
        return BookingQuote(
            car_id=car.id,
            start_date=start_date,
            end_date=end_date,
            days=rental_days(start_date, end_date),
            price_per_day=car.price_per_day,
            total_price=calculate_total_price(car.price_per_day, start_date, end_date),
        )

    def create_booking(
        self,
        session: Session,
        current_user: Profile | None,
        payload: BookingCreate,
    ) -> Booking:
        """
        Create a pending booking for the signed-in user.

        Checks, in order, before anything is written:
          1. a session exists (401)
          2. both dates are present (400)
          3. end date is after start date (400)
          4. the car exists (404)
        """
        if current_user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Please sign in to book a car",
            )

        validate_date_range(payload.start_date, payload.end_date)
        car = self._get_car(session, payload.car_id)

        booking = Booking(
            user_id=current_user.id,
            car_id=car.id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            total_price=calculate_total_price(
                car.price_per_day, payload.start_date, payload.end_date
            ),
            status="pending",
        )
        return self.booking_repo.create(session, booking)

    def list_user_bookings(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> list[BookingWithCarRead]:
        rows = self.booking_repo.list_for_user(session, user_id)
        return [
            BookingWithCarRead(
                **booking.model_dump(), car=self._car_summary(car)
            )
            for booking, car in rows
        ]

    # -------- Admin operations --------

    def list_all_bookings(self, session: Session) -> list[AdminBookingRead]:
        rows = self.booking_repo.list_all(session)
        return [
            AdminBookingRead(
                **booking.model_dump(),
                car=self._car_summary(car),
                customer_name=profile.full_name if profile else None,
            )
            for booking, car, profile in rows
        ]

    def update_status(
        self,
        session: Session,
        booking_id: uuid.UUID,
        payload: BookingStatusUpdate,
    ) -> Booking:
        """
        Admin status change.

        With enforce_transitions off, any status may be set from any
        status. With it on, only edges of BOOKING_TRANSITIONS are
        accepted; anything else raises 400.
        """
        booking = self.booking_repo.get_by_id(session, booking_id)
        if not booking:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Booking not found",
            )

        current = booking.status
        new = payload.status

        if current == new:
            return booking

        if self.enforce_transitions and not is_allowed_transition(current, new):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        booking.status = new
        booking.updated_at = datetime.now(timezone.utc)
        return self.booking_repo.update(session, booking)
