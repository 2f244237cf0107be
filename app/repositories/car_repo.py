# app/repositories/car_repo.py
import uuid

from sqlmodel import Session, select

from app.models.car import Car


class CarRepository:
    """
    Data access layer for Car.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, car_id: uuid.UUID) -> Car | None:
        return session.get(Car, car_id)

    def list_available(self, session: Session) -> list[Car]:
        """Catalog query: available cars, newest first."""
        stmt = (
            select(Car)
            .where(Car.status == "available")
            .order_by(Car.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def list_all(self, session: Session) -> list[Car]:
        stmt = select(Car).order_by(Car.created_at.desc())
        return list(session.exec(stmt).all())

    def create(self, session: Session, car: Car) -> Car:
        session.add(car)
        session.commit()
        session.refresh(car)
        return car

    def update(self, session: Session, car: Car) -> Car:
        session.add(car)
        session.commit()
        session.refresh(car)
        return car

    def delete(self, session: Session, car: Car) -> None:
        session.delete(car)
        session.commit()
