"""
Concurrent booking tests

Each attempt runs in its own session on its own connection, so the
conditional seat update is exercised against real database locking.
"""

import asyncio

import pytest
from sqlalchemy import func, select

from ferrybook.core.exceptions import InsufficientCapacity
from ferrybook.models import Booking, Schedule
from ferrybook.services.booking_service import BookingService


async def attempt_booking(session_factory, service, schedule_id, passengers=1):
    async with session_factory() as session:
        booking = await service.create_booking(
            session,
            schedule_id=schedule_id,
            customer_name="Racer",
            customer_email="racer@example.com",
            customer_phone="+62800",
            passenger_count=passengers
        )
        return booking.booking_code


@pytest.mark.concurrency
@pytest.mark.asyncio
class TestConcurrentBookings:

    async def test_never_oversells(self, session_factory, make_schedule):
        capacity = 5
        attempts = 12
        schedule = await make_schedule(available_seats=capacity)
        service = BookingService()

        results = await asyncio.gather(
            *[attempt_booking(session_factory, service, schedule.id) for _ in range(attempts)],
            return_exceptions=True
        )

        successes = [r for r in results if isinstance(r, str)]
        rejected = [r for r in results if isinstance(r, InsufficientCapacity)]
        unexpected = [r for r in results if not isinstance(r, (str, InsufficientCapacity))]

        assert unexpected == []
        assert len(successes) == capacity
        assert len(rejected) == attempts - capacity
        assert len(set(successes)) == capacity

        async with session_factory() as session:
            remaining = await session.scalar(
                select(Schedule.available_seats).where(Schedule.id == schedule.id)
            )
            booked = await session.scalar(
                select(func.coalesce(func.sum(Booking.passenger_count), 0))
                .where(Booking.schedule_id == schedule.id)
            )
        assert remaining == 0
        assert booked == capacity

    async def test_mixed_party_sizes_stay_within_capacity(self, session_factory, make_schedule):
        capacity = 10
        schedule = await make_schedule(available_seats=capacity)
        service = BookingService()
        party_sizes = [3, 4, 2, 5, 1, 3, 2]

        results = await asyncio.gather(
            *[attempt_booking(session_factory, service, schedule.id, size) for size in party_sizes],
            return_exceptions=True
        )
        assert all(isinstance(r, (str, InsufficientCapacity)) for r in results)

        async with session_factory() as session:
            remaining = await session.scalar(
                select(Schedule.available_seats).where(Schedule.id == schedule.id)
            )
            booked = await session.scalar(
                select(func.coalesce(func.sum(Booking.passenger_count), 0))
                .where(Booking.schedule_id == schedule.id)
            )

        assert remaining >= 0
        assert remaining + booked == capacity
        assert booked == sum(size for size, r in zip(party_sizes, results) if isinstance(r, str))
