"""
Demo data seeding for empty databases
"""
import random
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ferrybook.config import settings
from ferrybook.core.database import async_session
from ferrybook.models.base import utcnow
from ferrybook.models.boat import Boat, BoatStatus
from ferrybook.models.route import Route, RouteStatus
from ferrybook.models.schedule import Schedule, ScheduleStatus
from ferrybook.models.user import User, UserRole

logger = logging.getLogger(__name__)

DEMO_BOATS = [
    ("Ocean Explorer", 50, "Fast and comfortable boat with air conditioning"),
    ("Island Hopper", 30, "Smaller boat perfect for scenic routes"),
    ("Blue Wave", 75, "Large capacity boat with modern amenities"),
    ("Sea Breeze", 40, "Mid-size boat with outdoor seating"),
]

DEMO_ROUTES = [
    ("Bali", "Gili Trawangan", 90, Decimal("350000")),
    ("Bali", "Lombok", 120, Decimal("450000")),
    ("Lombok", "Gili Air", 45, Decimal("200000")),
    ("Gili Trawangan", "Bali", 90, Decimal("350000")),
    ("Lombok", "Bali", 120, Decimal("450000")),
    ("Gili Air", "Lombok", 45, Decimal("200000")),
]

MIN_DEMO_PRICE = Decimal("100000")


async def seed_demo_data(session: AsyncSession, days: Optional[int] = None, rng: Optional[random.Random] = None):
    """
    Insert demo users, boats, routes and 2-3 schedules per route per day.

    Returns the number of schedules created. The caller commits.
    """
    rng = rng or random.Random()
    days = days or settings.SEED_DEMO_DAYS

    session.add_all([
        User(email="admin@ferrybook.local", full_name="Admin User", role=UserRole.ADMIN, is_active=True),
        User(email="demo@ferrybook.local", full_name="Demo User", role=UserRole.USER, is_active=True),
    ])

    boats = [
        Boat(name=name, capacity=capacity, description=description, status=BoatStatus.ACTIVE)
        for name, capacity, description in DEMO_BOATS
    ]
    routes = [
        Route(
            departure_port=departure,
            destination_port=destination,
            duration_minutes=duration,
            base_price=price,
            status=RouteStatus.ACTIVE
        )
        for departure, destination, duration, price in DEMO_ROUTES
    ]
    session.add_all(boats + routes)

    # Start tomorrow so every seeded departure is in the future
    first_day = (utcnow() + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    created = 0
    for day in range(days):
        date = first_day + timedelta(days=day)
        for route in routes:
            for _ in range(rng.randint(2, 3)):
                boat = rng.choice(boats)
                departure = date.replace(hour=rng.randint(6, 18), minute=rng.randint(0, 59))
                price = max(route.base_price + rng.randint(-50000, 100000), MIN_DEMO_PRICE)
                session.add(Schedule(
                    boat=boat,
                    route=route,
                    departure_time=departure,
                    arrival_time=departure + timedelta(minutes=route.duration_minutes),
                    price=price,
                    available_seats=boat.capacity,
                    status=ScheduleStatus.ACTIVE
                ))
                created += 1

    await session.flush()
    return created


async def seed_if_empty():
    """Seed database only if it has no boats yet"""
    async with async_session() as session:
        result = await session.execute(select(Boat).limit(1))
        if result.scalar_one_or_none():
            logger.info("Database already contains data, skipping seeding")
            return

        logger.info("Empty database detected, starting demo seeding...")

        try:
            created = await seed_demo_data(session)
            await session.commit()
            logger.info(f"Demo seeding completed: {len(DEMO_BOATS)} boats, {len(DEMO_ROUTES)} routes, {created} schedules")
        except Exception as e:
            await session.rollback()
            logger.error(f"Demo seeding failed: {e}")
            raise
