"""
Tests for the seat ledger: availability checks, conditional decrement and
the cancellation policy switch
"""

import pytest
from datetime import timedelta

from sqlalchemy import update

from ferrybook.core.exceptions import InsufficientCapacity, ScheduleUnavailable, ValidationError
from ferrybook.models import BookingStatus, Schedule, ScheduleStatus
from ferrybook.services.seat_ledger import SeatLedger
from tests.conftest import insert_booking


@pytest.mark.unit
class TestValidateCount:

    @pytest.mark.parametrize("count", [0, -1, 11, 2.5, "3", True])
    def test_rejects_out_of_range_or_non_integer(self, count):
        with pytest.raises(ValidationError) as exc_info:
            SeatLedger().validate_count(count)
        assert exc_info.value.details == {"field": "passenger_count"}

    @pytest.mark.parametrize("count", [1, 5, 10])
    def test_accepts_one_to_ten(self, count):
        SeatLedger().validate_count(count)


@pytest.mark.asyncio
class TestReserve:

    async def test_decrements_seats(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=5)
        ledger = SeatLedger()

        await ledger.reserve(db_session, schedule, 3)
        await db_session.commit()

        await db_session.refresh(schedule)
        assert schedule.available_seats == 2

    async def test_insufficient_capacity_leaves_counter(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=2)

        with pytest.raises(InsufficientCapacity) as exc_info:
            await SeatLedger().reserve(db_session, schedule, 3)
        await db_session.rollback()

        await db_session.refresh(schedule)
        assert schedule.available_seats == 2
        assert exc_info.value.details["available"] == 2

    async def test_cancelled_schedule_unavailable(self, db_session, make_schedule):
        schedule = await make_schedule(status=ScheduleStatus.CANCELLED)
        with pytest.raises(ScheduleUnavailable):
            await SeatLedger().reserve(db_session, schedule, 1)

    async def test_full_schedule_unavailable(self, db_session, make_schedule):
        schedule = await make_schedule(status=ScheduleStatus.FULL)
        with pytest.raises(ScheduleUnavailable):
            await SeatLedger().reserve(db_session, schedule, 1)

    async def test_departed_schedule_unavailable(self, db_session, make_schedule):
        schedule = await make_schedule(departs_in=timedelta(minutes=-5))
        with pytest.raises(ScheduleUnavailable):
            await SeatLedger().reserve(db_session, schedule, 1)

    async def test_stale_count_is_caught_by_conditional_update(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=10)

        # Another writer took seats; the loaded instance still says 10
        await db_session.execute(
            update(Schedule)
            .where(Schedule.id == schedule.id)
            .values(available_seats=1)
            .execution_options(synchronize_session=False)
        )
        await db_session.commit()
        assert schedule.available_seats == 10

        with pytest.raises(InsufficientCapacity) as exc_info:
            await SeatLedger().reserve(db_session, schedule, 2)
        await db_session.rollback()

        assert exc_info.value.details["available"] == 1


@pytest.mark.asyncio
class TestCancellationPolicy:

    async def test_default_keeps_seats(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=7)
        booking = await insert_booking(db_session, schedule, passenger_count=3)

        released = await SeatLedger(restore_on_cancel=False).on_booking_cancelled(db_session, booking)
        await db_session.commit()

        await db_session.refresh(schedule)
        assert released is False
        assert schedule.available_seats == 7

    async def test_restore_switch_gives_seats_back(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=7)
        booking = await insert_booking(db_session, schedule, passenger_count=3)

        released = await SeatLedger(restore_on_cancel=True).on_booking_cancelled(db_session, booking)
        await db_session.commit()

        await db_session.refresh(schedule)
        assert released is True
        assert schedule.available_seats == 10

    async def test_reinstate_needs_free_seats(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=1)
        booking = await insert_booking(
            db_session, schedule, passenger_count=3, booking_status=BookingStatus.CANCELLED
        )

        with pytest.raises(InsufficientCapacity):
            await SeatLedger(restore_on_cancel=True).on_booking_reinstated(db_session, booking)
        await db_session.rollback()
