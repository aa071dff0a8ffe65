import os
from datetime import datetime, timedelta, timezone
from math import pi
from typing import Annotated, Dict, List, Optional

# Point the app at SQLite before db.session builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ATTENDANCE_TIMEZONE", "UTC")

import pytest
from fastapi import Depends, Request
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import models  # noqa: F401
from core.deps import get_attendance_service, get_token_uid, get_user_directory
from core.errors import Unauthenticated
from db.session import get_session
from models.office_location import OfficeLocation
from models.user import UserProfile, UserRole
from services.attendance_service import AttendanceService
from utils.geofence import EARTH_RADIUS_M


def offset_north(meters: float, latitude: float = 0.0) -> float:
    """Latitude that lies ``meters`` due north of ``latitude`` on the haversine sphere."""
    return latitude + meters / (EARTH_RADIUS_M * pi / 180)


class InMemoryUsers:
    def __init__(self, profiles: List[UserProfile]):
        self.profiles: Dict[str, UserProfile] = {p.uid: p for p in profiles}

    def get_user(self, uid: str) -> Optional[UserProfile]:
        return self.profiles.get(uid)

    def list_users_by_role(self, role: UserRole) -> List[UserProfile]:
        return [p for p in self.profiles.values() if p.role == role]


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def alice():
    return UserProfile(uid="alice", role=UserRole.EMPLOYEE, display_name="Alice", email="alice@example.com")


@pytest.fixture
def bob():
    return UserProfile(uid="bob", role=UserRole.EMPLOYEE, display_name="Bob", email="bob@example.com")


@pytest.fixture
def admin():
    return UserProfile(uid="root", role=UserRole.ADMIN, display_name="Admin", email="admin@example.com")


@pytest.fixture
def manager():
    return UserProfile(uid="mgr", role=UserRole.MANAGER, display_name="Manager", email="mgr@example.com")


@pytest.fixture
def users(alice, bob, admin, manager):
    return InMemoryUsers([alice, bob, admin, manager])


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def office(session):
    office = OfficeLocation(
        id="hq",
        name="Head Office",
        address="1 Null Island Way",
        longitude=0.0,
        latitude=0.0,
        radius_meters=100.0,
    )
    session.add(office)
    session.commit()
    session.refresh(office)
    return office


@pytest.fixture
def service(session, users, clock):
    return AttendanceService(session, users, tz="UTC", clock=clock)


@pytest.fixture
def client(engine, users, clock):
    from main import app

    def override_session():
        with Session(engine) as session:
            yield session

    # Tests authenticate with "Bearer <uid>"
    def override_token_uid(request: Request) -> str:
        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            raise Unauthenticated("Unauthorized: No token provided")
        return auth_header.split(" ", 1)[1]

    def override_service(
        session: Annotated[Session, Depends(get_session)],
        users: Annotated[InMemoryUsers, Depends(get_user_directory)],
    ) -> AttendanceService:
        return AttendanceService(session, users, tz="UTC", clock=clock)

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_user_directory] = lambda: users
    app.dependency_overrides[get_token_uid] = override_token_uid
    app.dependency_overrides[get_attendance_service] = override_service

    yield TestClient(app)

    app.dependency_overrides.clear()


def auth(uid: str) -> dict:
    return {"Authorization": f"Bearer {uid}"}
