"""Shared fixtures: in-memory database, API client and a ready-made barbershop."""

import os
from datetime import date

import pytest

# Settings must be in place before barberbook.config is imported
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from barberbook.db import get_session, init_db  # noqa: E402
from barberbook.main import app  # noqa: E402

PASSWORD = "s3cret-pass"

MONDAY = date(2024, 1, 1)
TUESDAY = date(2024, 1, 2)


def week(**overrides):
    """Working hours with every day closed, except the ones given."""
    hours = {
        day: {"start": "09:00", "end": "18:00", "enabled": False}
        for day in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
    }
    hours.update(overrides)
    return hours


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
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


@pytest.fixture
def register(client):
    """Create a user and return auth headers for it."""

    def _register(email: str, role: str) -> dict:
        response = client.post("/users", json={"email": email, "password": PASSWORD, "role": role})
        assert response.status_code == 201, response.text
        response = client.post("/auth/login", data={"username": email, "password": PASSWORD})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _register


@pytest.fixture
def open_shop(client, register):
    """Barber with profile, establishment open Monday 09:00-13:00 and a 60 minute haircut."""

    def _open_shop(email: str, name: str, barber_name: str = "Joao", city: str = "Recife") -> dict:
        barber = register(email, "barber")

        response = client.post("/barbers/me", json={"name": barber_name, "email": email}, headers=barber)
        assert response.status_code == 201, response.text

        response = client.put(
            "/establishments/me",
            json={
                "name": name,
                "address": {"city": city},
                "working_hours": week(monday={"start": "09:00", "end": "13:00", "enabled": True}),
            },
            headers=barber,
        )
        assert response.status_code == 200, response.text
        establishment_id = response.json()["id"]

        response = client.post(
            "/services",
            json={"name": "Haircut", "duration_minutes": 60, "price_cents": 4000},
            headers=barber,
        )
        assert response.status_code == 201, response.text

        return {
            "barber": barber,
            "establishment_id": establishment_id,
            "service_id": response.json()["id"],
        }

    return _open_shop


@pytest.fixture
def shop(open_shop):
    return open_shop("barber@example.com", "Navalha de Ouro")
