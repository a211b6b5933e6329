"""
Tests for booking creation and lookup
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import func, select

from ferrybook.core.exceptions import (
    AuthorizationError,
    CodeGenerationExhausted,
    InsufficientCapacity,
    NotFoundError,
    ScheduleUnavailable,
    ValidationError,
)
from ferrybook.models import Booking, BookingPaymentStatus, BookingStatus, Schedule, ScheduleStatus
from ferrybook.services.booking_code import BOOKING_CODE_PATTERN, BookingCodeGenerator
from ferrybook.services.booking_service import BookingService
from tests.conftest import insert_booking


class UncheckedCodes(BookingCodeGenerator):
    """Hands out codes without the existence pre-check, so collisions reach the unique index"""

    def __init__(self, *codes):
        super().__init__()
        self.codes = list(codes)

    async def generate(self, session):
        return self.codes.pop(0)


async def book(service, session, schedule, passengers, **kwargs):
    return await service.create_booking(
        session,
        schedule_id=schedule.id,
        customer_name="Jane Doe",
        customer_email="jane@x.com",
        customer_phone="+628123",
        passenger_count=passengers,
        **kwargs
    )


async def seats_left(session, schedule_id) -> int:
    return await session.scalar(select(Schedule.available_seats).where(Schedule.id == schedule_id))


@pytest.mark.asyncio
class TestCreateBooking:

    async def test_end_to_end_scenario(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=5, price=Decimal("350000"))
        schedule_id = schedule.id
        service = BookingService()

        booking = await book(service, db_session, schedule, 3)

        assert booking.total_amount == Decimal("1050000")
        assert booking.payment_status == BookingPaymentStatus.PENDING
        assert booking.booking_status == BookingStatus.CONFIRMED
        assert BOOKING_CODE_PATTERN.match(booking.booking_code)
        assert await seats_left(db_session, schedule_id) == 2

        with pytest.raises(InsufficientCapacity):
            await book(service, db_session, schedule, 3)
        assert await seats_left(db_session, schedule_id) == 2

    async def test_seat_counter_tracks_successful_bookings(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=20)
        service = BookingService()

        counts = [1, 4, 10, 2]
        for count in counts:
            await book(service, db_session, schedule, count)

        assert await seats_left(db_session, schedule.id) == 20 - sum(counts)

    async def test_booking_loaded_with_details(self, db_session, test_schedule, test_user):
        booking = await book(BookingService(), db_session, test_schedule, 2, user=test_user, notes="Surfboards")

        assert booking.user_id == test_user.id
        assert booking.notes == "Surfboards"
        assert booking.schedule.boat.name == "Ocean Explorer"
        assert booking.schedule.route.route_name == "Bali → Gili Trawangan"
        assert booking.payments == []

    async def test_total_amount_frozen_after_price_change(self, db_session, test_schedule):
        booking = await book(BookingService(), db_session, test_schedule, 2)

        test_schedule.price = Decimal("999999")
        await db_session.commit()

        stored = await db_session.scalar(select(Booking.total_amount).where(Booking.id == booking.id))
        assert stored == Decimal("700000")

    @pytest.mark.parametrize("count", [0, 11])
    async def test_invalid_passenger_count(self, db_session, test_schedule, count):
        with pytest.raises(ValidationError):
            await book(BookingService(), db_session, test_schedule, count)
        assert await seats_left(db_session, test_schedule.id) == 50

    async def test_unknown_schedule(self, db_session):
        with pytest.raises(NotFoundError):
            await BookingService().create_booking(
                db_session,
                schedule_id=uuid4(),
                customer_name="Jane Doe",
                customer_email="jane@x.com",
                customer_phone="+628123",
                passenger_count=1
            )

    async def test_cancelled_schedule(self, db_session, make_schedule):
        schedule = await make_schedule(status=ScheduleStatus.CANCELLED)
        with pytest.raises(ScheduleUnavailable):
            await book(BookingService(), db_session, schedule, 1)

    async def test_failed_booking_writes_nothing(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=1)
        schedule_id = schedule.id
        with pytest.raises(InsufficientCapacity):
            await book(BookingService(), db_session, schedule, 2)

        assert await db_session.scalar(select(func.count(Booking.id))) == 0
        assert await seats_left(db_session, schedule_id) == 1

    async def test_code_collision_at_insert_retries_whole_transaction(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=10)
        schedule_id = schedule.id
        await insert_booking(db_session, schedule, booking_code="FBTAKEN001")
        service = BookingService(code_generator=UncheckedCodes("FBTAKEN001", "FBFRESH001"))

        booking = await book(service, db_session, schedule, 4)

        assert booking.booking_code == "FBFRESH001"
        # The rolled back attempt must not have consumed seats
        assert await seats_left(db_session, schedule_id) == 6

    async def test_insert_retries_are_bounded(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=10)
        schedule_id = schedule.id
        await insert_booking(db_session, schedule, booking_code="FBTAKEN001")
        service = BookingService(
            code_generator=UncheckedCodes(*["FBTAKEN001"] * 3),
            max_insert_attempts=3
        )

        with pytest.raises(CodeGenerationExhausted):
            await book(service, db_session, schedule, 1)
        assert await seats_left(db_session, schedule_id) == 10

    async def test_codes_unique_across_bookings(self, db_session, make_schedule):
        schedule = await make_schedule(available_seats=50)
        service = BookingService()

        codes = {(await book(service, db_session, schedule, 1)).booking_code for _ in range(25)}
        assert len(codes) == 25


@pytest.mark.asyncio
class TestGetBooking:

    async def test_owner_can_read(self, db_session, test_schedule, test_user):
        created = await book(BookingService(), db_session, test_schedule, 1, user=test_user)
        booking = await BookingService().get_booking(db_session, created.id, user=test_user)
        assert booking.id == created.id

    async def test_admin_can_read(self, db_session, test_schedule, test_user, test_admin):
        created = await book(BookingService(), db_session, test_schedule, 1, user=test_user)
        booking = await BookingService().get_booking(db_session, created.id, user=test_admin)
        assert booking.id == created.id

    async def test_other_user_rejected(self, db_session, test_schedule, test_user, other_user):
        created = await book(BookingService(), db_session, test_schedule, 1, user=test_user)
        with pytest.raises(AuthorizationError):
            await BookingService().get_booking(db_session, created.id, user=other_user)

    async def test_missing_booking(self, db_session):
        with pytest.raises(NotFoundError):
            await BookingService().get_booking(db_session, uuid4())

    async def test_get_by_code_is_case_insensitive(self, db_session, test_schedule):
        created = await book(BookingService(), db_session, test_schedule, 1)
        booking = await BookingService().get_booking_by_code(db_session, created.booking_code.lower())
        assert booking.id == created.id

    async def test_get_by_code_checks_owner(self, db_session, test_schedule, test_user, other_user, test_admin):
        service = BookingService()
        created = await book(service, db_session, test_schedule, 1, user=test_user)

        assert (await service.get_booking_by_code(db_session, created.booking_code, user=test_user)).id == created.id
        assert (await service.get_booking_by_code(db_session, created.booking_code, user=test_admin)).id == created.id
        with pytest.raises(AuthorizationError):
            await service.get_booking_by_code(db_session, created.booking_code, user=other_user)

    async def test_get_by_unknown_code(self, db_session):
        with pytest.raises(NotFoundError):
            await BookingService().get_booking_by_code(db_session, "FBNOPE0000")

    async def test_list_user_bookings(self, db_session, test_schedule, test_user, other_user):
        service = BookingService()
        mine = [await book(service, db_session, test_schedule, 1, user=test_user) for _ in range(3)]
        await book(service, db_session, test_schedule, 1, user=other_user)

        bookings = await service.list_user_bookings(db_session, test_user)
        assert {b.id for b in bookings} == {b.id for b in mine}

        page = await service.list_user_bookings(db_session, test_user, skip=1, limit=1)
        assert len(page) == 1
