# app/services/car_service.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, TypeVar

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.storage_utils import (
    delete_public_url,
    generate_filename,
    upload_to_storage,
)
from app.models.car import Car
from app.repositories.booking_repo import BookingRepository
from app.repositories.car_repo import CarRepository
from app.schemas.car import ALL_TYPES, CarCreate

logger = logging.getLogger(__name__)

# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

T = TypeVar("T")


def filter_cars_by_type(cars: Iterable[T], car_type: str = ALL_TYPES) -> list[T]:
    """
    Keep a car if the selected type is "all" or equals the car's type.

    The input is expected to already be restricted to available cars.
    """
    if car_type == ALL_TYPES:
        return list(cars)
    return [car for car in cars if car.type == car_type]


class CarService:
    """
    Business logic for the fleet.

    Responsibilities:
      - catalog listing (available cars + type filter)
      - car detail
      - admin inventory: insert, delete, photo upload
    """

    def __init__(self, repo: CarRepository, booking_repo: BookingRepository):
        self.repo = repo
        self.booking_repo = booking_repo

    # ----- Helpers -----

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported image type. Allowed: JPEG, PNG, WEBP.",
            )

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image too large (max 5MB).",
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    @staticmethod
    def _remove_stored_image(url: str | None) -> None:
        """Best-effort Storage cleanup; a failure never blocks the DB change."""
        if not url:
            return
        try:
            delete_public_url(url)
        except Exception:
            logger.warning("Could not remove stored image %s", url, exc_info=True)

    # ----- Catalog -----

    def list_catalog(self, session: Session, car_type: str = ALL_TYPES) -> list[Car]:
        return filter_cars_by_type(self.repo.list_available(session), car_type)

    def get_car(self, session: Session, car_id: uuid.UUID) -> Car:
        car = self.repo.get_by_id(session, car_id)
        if not car:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Car not found",
            )
        return car

    # ----- Admin -----

    def list_all_cars(self, session: Session) -> list[Car]:
        return self.repo.list_all(session)

    def create_car(self, session: Session, payload: CarCreate) -> Car:
        """
        Insert a car; new cars always start as 'available'.
        """
        car = Car(**payload.model_dump(), status="available")
        return self.repo.create(session, car)

    def delete_car(self, session: Session, car_id: uuid.UUID) -> None:
        """
        Delete a car together with its bookings and stored photo.

        Postgres cascades bookings on its own; deleting them here keeps
        databases without FK enforcement consistent.
        """
        car = self.get_car(session, car_id)
        image_url = car.image_url

        for booking in self.booking_repo.list_for_car(session, car.id):
            self.booking_repo.delete(session, booking)
        self.repo.delete(session, car)

        self._remove_stored_image(image_url)

    def set_image(
        self,
        session: Session,
        car_id: uuid.UUID,
        content_type: str,
        file_bytes: bytes,
    ) -> Car:
        """
        Upload or replace the car photo.

        Path pattern:
            cars/<car_id>/<uuid>.<ext>

        The old photo is removed only after the new URL is committed.
        If the commit fails the new upload is removed instead.
        """
        car = self.get_car(session, car_id)
        ext = self._validate_and_get_ext(content_type, file_bytes)

        path = f"cars/{car.id}/{generate_filename(ext)}"
        new_url = upload_to_storage(path, file_bytes, content_type)

        old_url = car.image_url
        car.image_url = new_url
        car.updated_at = datetime.now(timezone.utc)
        try:
            car = self.repo.update(session, car)
        except SQLAlchemyError:
            session.rollback()
            self._remove_stored_image(new_url)
            raise

        self._remove_stored_image(old_url)
        return car
