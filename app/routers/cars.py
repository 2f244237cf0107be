# app/routers/cars.py
import uuid
from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.notices import empty_with_notice
from app.database import get_session
from app.repositories.booking_repo import BookingRepository
from app.repositories.car_repo import CarRepository
from app.schemas.booking import BookingQuote
from app.schemas.car import ALL_TYPES, CAR_TYPES, CarRead
from app.services.booking_service import BookingService
from app.services.car_service import CarService

router = APIRouter(prefix="/cars", tags=["Cars"])

car_repo = CarRepository()
booking_repo = BookingRepository()
service = CarService(car_repo, booking_repo)
booking_service = BookingService(booking_repo, car_repo)


# -------- Public endpoints --------


@router.get("", response_model=list[CarRead])
def list_cars(
    response: Response,
    session: Session = Depends(get_session),
    type: str = ALL_TYPES,
):
    """
    Catalog of available cars, newest first.

    - Public endpoint.
    - `type=all` (default) keeps every car; any other value keeps only
      cars of that type.
    - On a store error the list is empty and `X-Notice` explains why.
    """
    try:
        return service.list_catalog(session, type)
    except SQLAlchemyError:
        return empty_with_notice(response, "Failed to load cars")


@router.get("/types", response_model=list[str])
def list_car_types():
    """
    Filter options for the catalog, "all" first.
    """
    return [ALL_TYPES, *CAR_TYPES]


@router.get("/{car_id}", response_model=CarRead)
def get_car(
    car_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Car detail page data.
    """
    return service.get_car(session, car_id)


@router.get("/{car_id}/quote", response_model=BookingQuote)
def quote_car(
    car_id: uuid.UUID,
    start_date: date | None = None,
    end_date: date | None = None,
    session: Session = Depends(get_session),
):
    """
    Price for renting this car between two dates:
    price_per_day x ceil(days). 400 if a date is missing or
    end_date <= start_date.
    """
    return booking_service.quote(session, car_id, start_date, end_date)
