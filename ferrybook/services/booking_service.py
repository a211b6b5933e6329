"""
Booking creation and lookup
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ferrybook.config import settings
from ferrybook.core.database import db_manager
from ferrybook.core.exceptions import AuthorizationError, CodeGenerationExhausted, NotFoundError
from ferrybook.core.metrics import metrics_collector
from ferrybook.models.booking import Booking, BookingPaymentStatus, BookingStatus
from ferrybook.models.schedule import Schedule
from ferrybook.models.user import User
from ferrybook.services.booking_code import BookingCodeGenerator
from ferrybook.services.seat_ledger import SeatLedger, seat_ledger as default_seat_ledger

logger = logging.getLogger(__name__)


class _BookingCodeTaken(Exception):
    def __init__(self, booking_code: str):
        self.booking_code = booking_code
        super().__init__(booking_code)


def _booking_details_query():
    return (
        select(Booking)
        .options(
            selectinload(Booking.schedule).selectinload(Schedule.boat),
            selectinload(Booking.schedule).selectinload(Schedule.route),
            selectinload(Booking.payments),
        )
        .execution_options(populate_existing=True)
    )


def _check_access(booking: Booking, user: Optional[User]) -> None:
    if user is not None and not user.is_admin and booking.user_id != user.id:
        raise AuthorizationError("You do not have access to this booking")


class BookingService:
    """
    Creates bookings against the seat inventory.

    A booking is created in one transaction: the seat decrement and the
    booking insert either both land or neither does. A booking code that
    collides at insert time (unique index) rolls the whole transaction back
    and the attempt is repeated with a fresh code.
    """

    def __init__(
        self,
        code_generator: Optional[BookingCodeGenerator] = None,
        ledger: Optional[SeatLedger] = None,
        max_insert_attempts: Optional[int] = None
    ):
        self.code_generator = code_generator or BookingCodeGenerator()
        self.ledger = ledger or default_seat_ledger
        self.max_insert_attempts = max_insert_attempts or settings.BOOKING_CODE_MAX_ATTEMPTS

    async def create_booking(
        self,
        session: AsyncSession,
        schedule_id: UUID,
        customer_name: str,
        customer_email: str,
        customer_phone: str,
        passenger_count: int,
        notes: Optional[str] = None,
        user: Optional[User] = None,
        now: Optional[datetime] = None
    ) -> Booking:
        """
        Reserve seats and create a confirmed, payment-pending booking.

        Raises:
            ValidationError: passenger_count outside 1..MAX_PASSENGERS_PER_BOOKING
            NotFoundError: unknown schedule
            ScheduleUnavailable: schedule not active or already departed
            InsufficientCapacity: not enough seats left
            CodeGenerationExhausted: no unique booking code could be found
        """
        # A rollback expires loaded instances, so keep plain values only
        user_id = user.id if user else None

        async with metrics_collector.track_booking_operation("create_booking"):
            self.ledger.validate_count(passenger_count)

            for attempt in range(1, self.max_insert_attempts + 1):
                try:
                    booking_id = await self._create_once(
                        session,
                        schedule_id=schedule_id,
                        user_id=user_id,
                        customer_name=customer_name,
                        customer_email=customer_email,
                        customer_phone=customer_phone,
                        passenger_count=passenger_count,
                        notes=notes,
                        now=now
                    )
                except _BookingCodeTaken as e:
                    logger.warning(f"Booking code {e.booking_code} taken at insert, retrying (attempt {attempt})")
                    await metrics_collector.record_code_collision()
                    continue
                await metrics_collector.record_booking_created(passenger_count)
                return await self.get_booking(session, booking_id)

            logger.error(f"Booking insert retries exhausted for schedule {schedule_id}")
            raise CodeGenerationExhausted(self.max_insert_attempts)

    async def _create_once(
        self,
        session: AsyncSession,
        schedule_id: UUID,
        user_id: Optional[UUID],
        customer_name: str,
        customer_email: str,
        customer_phone: str,
        passenger_count: int,
        notes: Optional[str],
        now: Optional[datetime]
    ) -> UUID:
        booking_code = None
        try:
            async with db_manager.transaction(session):
                result = await session.execute(
                    select(Schedule)
                    .where(Schedule.id == schedule_id)
                    .execution_options(populate_existing=True)
                )
                schedule = result.scalar_one_or_none()
                if not schedule:
                    raise NotFoundError("Schedule", schedule_id)

                self.ledger.check_available(schedule, passenger_count, now)
                booking_code = await self.code_generator.generate(session)
                total_amount = Decimal(schedule.price) * passenger_count

                await self.ledger.reserve(session, schedule, passenger_count, now)

                booking = Booking(
                    booking_code=booking_code,
                    user_id=user_id,
                    schedule_id=schedule.id,
                    customer_name=customer_name,
                    customer_email=customer_email,
                    customer_phone=customer_phone,
                    passenger_count=passenger_count,
                    total_amount=total_amount,
                    payment_status=BookingPaymentStatus.PENDING,
                    booking_status=BookingStatus.CONFIRMED,
                    notes=notes
                )
                session.add(booking)
                await session.flush()
                booking_id = booking.id
        except IntegrityError:
            if booking_code and await self.code_generator.exists(session, booking_code):
                raise _BookingCodeTaken(booking_code)
            raise

        logger.info(
            f"Booking {booking_code} created: schedule={schedule_id} "
            f"passengers={passenger_count} total={total_amount}"
        )
        return booking_id

    async def get_booking(
        self,
        session: AsyncSession,
        booking_id: UUID,
        user: Optional[User] = None
    ) -> Booking:
        """
        Booking with schedule, boat, route and payments loaded.

        When ``user`` is given it must own the booking or be an admin.
        """
        result = await session.execute(_booking_details_query().where(Booking.id == booking_id))
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", booking_id)

        _check_access(booking, user)
        return booking

    async def get_booking_by_code(
        self,
        session: AsyncSession,
        booking_code: str,
        user: Optional[User] = None
    ) -> Booking:
        """Case-insensitive lookup by the code printed on the confirmation"""
        result = await session.execute(
            _booking_details_query().where(Booking.booking_code == booking_code.upper())
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", booking_code)

        _check_access(booking, user)
        return booking

    async def list_user_bookings(
        self,
        session: AsyncSession,
        user: User,
        skip: int = 0,
        limit: int = 20
    ) -> List[Booking]:
        """Bookings owned by ``user``, newest first"""
        result = await session.execute(
            _booking_details_query()
            .where(Booking.user_id == user.id)
            .order_by(Booking.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())


booking_service = BookingService()
