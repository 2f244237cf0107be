# app/routers/admin.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Response,
    UploadFile,
    status,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.auth import require_admin
from app.core.config import get_settings
from app.core.notices import empty_with_notice
from app.database import get_session
from app.repositories.booking_repo import BookingRepository
from app.repositories.car_repo import CarRepository
from app.schemas.booking import AdminBookingRead, BookingRead, BookingStatusUpdate
from app.schemas.car import CarCreate, CarRead
from app.services.booking_service import BookingService
from app.services.car_service import CarService

settings = get_settings()

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

car_repo = CarRepository()
booking_repo = BookingRepository()
car_service = CarService(car_repo, booking_repo)
booking_service = BookingService(
    booking_repo,
    car_repo,
    enforce_transitions=settings.ENFORCE_BOOKING_TRANSITIONS,
)


# -------- Cars --------


@router.get("/cars", response_model=list[CarRead])
def list_all_cars(
    response: Response,
    session: Session = Depends(get_session),
):
    """
    Every car regardless of status, newest first.
    """
    try:
        return car_service.list_all_cars(session)
    except SQLAlchemyError:
        return empty_with_notice(response, "Failed to fetch cars")


@router.post(
    "/cars",
    response_model=CarRead,
    status_code=status.HTTP_201_CREATED,
)
def create_car(
    payload: CarCreate,
    session: Session = Depends(get_session),
):
    """
    Add a car to the fleet (status 'available').
    """
    return car_service.create_car(session, payload)


@router.delete(
    "/cars/{car_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_car(
    car_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a car, its bookings and its stored photo.
    """
    car_service.delete_car(session, car_id)
    return None


@router.post(
    "/cars/{car_id}/image",
    response_model=CarRead,
    summary="Upload or replace the photo of a car",
)
def upload_car_image(
    car_id: uuid.UUID,
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
):
    """
    Upload a photo to Supabase Storage and point image_url at it.

    - Accepts JPEG, PNG, WEBP (max 5MB).
    - Removes the previous stored photo, if any.
    """
    if not file.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )

    file_bytes = file.file.read()
    return car_service.set_image(
        session=session,
        car_id=car_id,
        content_type=file.content_type,
        file_bytes=file_bytes,
    )


# -------- Bookings --------


@router.get("/bookings", response_model=list[AdminBookingRead])
def list_all_bookings(
    response: Response,
    session: Session = Depends(get_session),
):
    """
    Every booking with car summary and customer name, newest first.
    """
    try:
        return booking_service.list_all_bookings(session)
    except SQLAlchemyError:
        return empty_with_notice(response, "Failed to fetch bookings")


@router.patch(
    "/bookings/{booking_id}/status",
    response_model=BookingRead,
)
def update_booking_status(
    booking_id: uuid.UUID,
    payload: BookingStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Set a booking's status.

    Intended lifecycle:

      pending   -> confirmed, cancelled

      confirmed -> active, cancelled

      active    -> completed, cancelled

      completed, cancelled -> (terminal)

    Only enforced when ENFORCE_BOOKING_TRANSITIONS is enabled;
    otherwise any status can be set.
    """
    return booking_service.update_status(session, booking_id, payload)
