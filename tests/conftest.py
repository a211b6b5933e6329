"""
Test configuration and fixtures

Every test gets its own SQLite database file, so concurrent sessions in a
test contend on real database locks.
"""

import os
from datetime import timedelta
from decimal import Decimal
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

# Set test environment before the application reads its settings
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./ferrybook_test.db"
os.environ["LOG_LEVEL"] = "WARNING"

# Import all models BEFORE creating fixtures (create_all needs them registered)
from ferrybook.core.database import Base
from ferrybook.core.security import create_user_token
from ferrybook.models import (
    Boat,
    Booking,
    BookingPaymentStatus,
    BookingStatus,
    Route,
    Schedule,
    ScheduleStatus,
    User,
    UserRole,
)
from ferrybook.models.base import utcnow


class FixedRandom:
    """Stand-in rng whose random() always returns the same value"""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """Async engine on a fresh SQLite file"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ferrybook.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with session_factory() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with dependency override"""
    from ferrybook.main import app
    from ferrybook.core.database import get_session

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


# User fixtures
async def create_user(db_session, role: UserRole = UserRole.USER, is_active: bool = True) -> User:
    user = User(
        email=f"{role.value}_{uuid4().hex[:8]}@example.com",
        full_name=f"Test {role.value.title()}",
        phone="+628123456789",
        role=role,
        is_active=is_active
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def test_user(db_session):
    return await create_user(db_session)


@pytest_asyncio.fixture
async def other_user(db_session):
    return await create_user(db_session)


@pytest_asyncio.fixture
async def test_admin(db_session):
    return await create_user(db_session, role=UserRole.ADMIN)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def auth_headers_user(test_user):
    return auth_headers(test_user)


@pytest.fixture
def auth_headers_admin(test_admin):
    return auth_headers(test_admin)


# Inventory fixtures
@pytest_asyncio.fixture
async def test_boat(db_session):
    boat = Boat(name="Ocean Explorer", capacity=50, description="Fast and comfortable boat")
    db_session.add(boat)
    await db_session.commit()
    return boat


@pytest_asyncio.fixture
async def test_route(db_session):
    route = Route(
        departure_port="Bali",
        destination_port="Gili Trawangan",
        duration_minutes=90,
        base_price=Decimal("350000")
    )
    db_session.add(route)
    await db_session.commit()
    return route


@pytest.fixture
def make_schedule(db_session, test_boat, test_route):
    """Factory for schedules on the test boat and route"""

    async def _make_schedule(
        available_seats: int = None,
        price: Decimal = Decimal("350000"),
        departs_in: timedelta = timedelta(days=3),
        status: ScheduleStatus = ScheduleStatus.ACTIVE,
        boat: Boat = None,
        route: Route = None
    ) -> Schedule:
        boat = boat or test_boat
        route = route or test_route
        departure = utcnow() + departs_in
        schedule = Schedule(
            boat_id=boat.id,
            route_id=route.id,
            departure_time=departure,
            arrival_time=departure + timedelta(minutes=route.duration_minutes),
            price=price,
            available_seats=boat.capacity if available_seats is None else available_seats,
            status=status
        )
        db_session.add(schedule)
        await db_session.commit()
        return schedule

    return _make_schedule


@pytest_asyncio.fixture
async def test_schedule(make_schedule):
    return await make_schedule()


async def insert_booking(
    db_session,
    schedule: Schedule,
    passenger_count: int = 1,
    user: User = None,
    booking_code: str = None,
    payment_status: BookingPaymentStatus = BookingPaymentStatus.PENDING,
    booking_status: BookingStatus = BookingStatus.CONFIRMED
) -> Booking:
    """Insert a booking row directly, without touching the seat counter"""
    booking = Booking(
        booking_code=booking_code or f"FB{uuid4().hex[:8].upper()}",
        user_id=user.id if user else None,
        schedule_id=schedule.id,
        customer_name="Jane Doe",
        customer_email="jane@example.com",
        customer_phone="+628123",
        passenger_count=passenger_count,
        total_amount=schedule.price * passenger_count,
        payment_status=payment_status,
        booking_status=booking_status
    )
    db_session.add(booking)
    await db_session.commit()
    return booking


@pytest.fixture
def valid_card():
    return {
        "payment_method": "credit_card",
        "card_number": "4111111111111111",
        "expiry_month": 12,
        "expiry_year": utcnow().year + 2,
        "cvv": "123",
        "cardholder_name": "Jane Doe"
    }
