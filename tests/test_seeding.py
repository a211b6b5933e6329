"""
Tests for demo data seeding
"""

import random

import pytest
from sqlalchemy import func, select

from ferrybook.core.seeding import DEMO_BOATS, DEMO_ROUTES, MIN_DEMO_PRICE, seed_demo_data
from ferrybook.models import Boat, Route, Schedule, ScheduleStatus, User, UserRole
from ferrybook.models.base import utcnow


@pytest.mark.asyncio
async def test_seed_demo_data(db_session):
    created = await seed_demo_data(db_session, days=2, rng=random.Random(7))
    await db_session.commit()

    assert await db_session.scalar(select(func.count(Boat.id))) == len(DEMO_BOATS)
    assert await db_session.scalar(select(func.count(Route.id))) == len(DEMO_ROUTES)
    assert await db_session.scalar(select(func.count(Schedule.id))) == created
    # Two or three departures per route per day
    assert 2 * 2 * len(DEMO_ROUTES) <= created <= 2 * 3 * len(DEMO_ROUTES)

    admins = await db_session.scalar(select(func.count(User.id)).where(User.role == UserRole.ADMIN))
    assert admins == 1


@pytest.mark.asyncio
async def test_seeded_schedules_are_bookable(db_session):
    await seed_demo_data(db_session, days=1, rng=random.Random(3))
    await db_session.commit()

    result = await db_session.execute(select(Schedule))
    now = utcnow()
    for schedule in result.scalars():
        await db_session.refresh(schedule, ["boat", "route"])
        assert schedule.status == ScheduleStatus.ACTIVE
        assert schedule.departure_time > now
        assert schedule.available_seats == schedule.boat.capacity
        assert schedule.price >= MIN_DEMO_PRICE
        assert schedule.arrival_time > schedule.departure_time
