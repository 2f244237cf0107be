# app/routers/bookings.py
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.auth import get_current_user, require_auth
from app.core.notices import empty_with_notice
from app.database import get_session
from app.models.profile import Profile
from app.repositories.booking_repo import BookingRepository
from app.repositories.car_repo import CarRepository
from app.schemas.booking import BookingCreate, BookingRead, BookingWithCarRead
from app.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])

service = BookingService(BookingRepository(), CarRepository())


@router.post(
    "",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
)
def create_booking(
    payload: BookingCreate,
    session: Session = Depends(get_session),
    current_user: Profile | None = Depends(get_current_user),
):
    """
    Book a car for the signed-in user.

    - 401 without a session.
    - 400 if a date is missing or end_date <= start_date.
    - total_price is computed from the car's daily price.
    - New bookings are always 'pending'.
    """
    return service.create_booking(session, current_user, payload)


@router.get("/me", response_model=list[BookingWithCarRead])
def list_my_bookings(
    response: Response,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    The signed-in user's bookings with a car summary, newest first.
    """
    try:
        return service.list_user_bookings(session, current_user.id)
    except SQLAlchemyError:
        return empty_with_notice(response, "Failed to load bookings")
