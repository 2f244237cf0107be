import os
import uuid
from datetime import datetime, timedelta, timezone

# Settings are read at import time; point them at throwaway values first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.core.config import get_settings
from app.database import get_session
from app.main import app
from app.models.car import Car
from app.models.profile import Profile, UserRole

API = get_settings().API_V1_STR


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(user_id: uuid.UUID, email: str = "driver@example.com", **metadata) -> str:
    """Mint a Supabase-style access token signed with the test secret."""
    settings = get_settings()
    claims = {
        "sub": str(user_id),
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "user_metadata": metadata,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.SUPABASE_JWT_ALG)


def auth_header(user_id: uuid.UUID, **kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, **kwargs)}"}


@pytest.fixture
def user_headers():
    return auth_header(uuid.uuid4(), email="alice@example.com", full_name="Alice Driver")


@pytest.fixture
def admin_headers(db):
    admin_id = uuid.uuid4()
    db.add(Profile(id=admin_id, full_name="Fleet Admin"))
    db.add(UserRole(user_id=admin_id, role="user"))
    db.add(UserRole(user_id=admin_id, role="admin"))
    db.commit()
    return auth_header(admin_id, email="admin@example.com")


@pytest.fixture
def add_car(db):
    """Insert a car directly; returns the persisted row."""
    counter = {"n": 0}

    def _add_car(**overrides) -> Car:
        counter["n"] += 1
        fields = dict(
            name=f"Car {counter['n']}",
            type="sedan",
            brand="Toyota",
            model="Camry",
            year=2023,
            price_per_day=50.0,
            seats=5,
            transmission="automatic",
            fuel_type="petrol",
            status="available",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=counter["n"]),
        )
        fields.update(overrides)
        car = Car(**fields)
        db.add(car)
        db.commit()
        db.refresh(car)
        return car

    return _add_car


def car_payload(**overrides) -> dict:
    payload = {
        "name": "Model 3 Long Range",
        "type": "electric",
        "brand": "Tesla",
        "model": "Model 3",
        "year": 2024,
        "price_per_day": 50,
        "image_url": "https://images.example.com/model3.jpg",
        "seats": 5,
        "transmission": "automatic",
        "fuel_type": "electric",
        "description": "Quiet and quick.",
        "features": ["Autopilot", "Heated seats"],
    }
    payload.update(overrides)
    return payload
