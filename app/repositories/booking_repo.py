# app/repositories/booking_repo.py
import uuid

from sqlmodel import Session, select

from app.models.booking import Booking
from app.models.car import Car
from app.models.profile import Profile


class BookingRepository:
    """
    Data access layer for bookings.

    Listing queries join the car (and, for admins, the customer profile)
    so that a single round trip feeds each view.
    """

    def get_by_id(self, session: Session, booking_id: uuid.UUID) -> Booking | None:
        return session.get(Booking, booking_id)

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> list[tuple[Booking, Car | None]]:
        stmt = (
            select(Booking, Car)
            .join(Car, Car.id == Booking.car_id, isouter=True)
            .where(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def list_all(
        self,
        session: Session,
    ) -> list[tuple[Booking, Car | None, Profile | None]]:
        stmt = (
            select(Booking, Car, Profile)
            .join(Car, Car.id == Booking.car_id, isouter=True)
            .join(Profile, Profile.id == Booking.user_id, isouter=True)
            .order_by(Booking.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def list_for_car(self, session: Session, car_id: uuid.UUID) -> list[Booking]:
        stmt = select(Booking).where(Booking.car_id == car_id)
        return list(session.exec(stmt).all())

    def create(self, session: Session, booking: Booking) -> Booking:
        session.add(booking)
        session.commit()
        session.refresh(booking)
        return booking

    def update(self, session: Session, booking: Booking) -> Booking:
        session.add(booking)
        session.commit()
        session.refresh(booking)
        return booking

    def delete(self, session: Session, booking: Booking) -> None:
        session.delete(booking)
