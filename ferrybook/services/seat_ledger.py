"""
Seat ledger: the only code path that changes Schedule.available_seats
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from ferrybook.config import settings
from ferrybook.core.exceptions import InsufficientCapacity, ScheduleUnavailable, ValidationError
from ferrybook.models.booking import Booking
from ferrybook.models.schedule import Schedule, ScheduleStatus

logger = logging.getLogger(__name__)


class SeatLedger:
    """
    Applies seat consumption and release with conditional updates.

    The decrement is a single ``UPDATE ... WHERE available_seats >= n``
    statement, so two concurrent reservations can never both pass against
    the same stale count. Callers run it inside their own transaction.

    Seats are not given back when a booking is cancelled unless
    ``restore_on_cancel`` is enabled.
    """

    def __init__(self, restore_on_cancel: Optional[bool] = None, max_per_booking: Optional[int] = None):
        self.restore_on_cancel = (
            settings.RESTORE_SEATS_ON_CANCEL if restore_on_cancel is None else restore_on_cancel
        )
        self.max_per_booking = max_per_booking or settings.MAX_PASSENGERS_PER_BOOKING

    def validate_count(self, requested: int) -> None:
        if isinstance(requested, bool) or not isinstance(requested, int):
            raise ValidationError("Number of passengers must be an integer", field="passenger_count")
        if requested < 1:
            raise ValidationError("At least 1 passenger is required", field="passenger_count")
        if requested > self.max_per_booking:
            raise ValidationError(
                f"Maximum {self.max_per_booking} passengers allowed per booking",
                field="passenger_count"
            )

    def check_available(self, schedule: Schedule, requested: int, now: Optional[datetime] = None) -> None:
        """Raise if the schedule cannot take ``requested`` more passengers"""
        self.validate_count(requested)
        if schedule.status != ScheduleStatus.ACTIVE:
            raise ScheduleUnavailable(schedule.id)
        if schedule.has_departed(now):
            raise ScheduleUnavailable(schedule.id, reason="This schedule has already departed")
        if schedule.available_seats < requested:
            raise InsufficientCapacity(schedule.id, requested, schedule.available_seats)

    async def reserve(
        self,
        session: AsyncSession,
        schedule: Schedule,
        requested: int,
        now: Optional[datetime] = None
    ) -> None:
        """
        Consume ``requested`` seats on ``schedule``.

        Raises ValidationError, ScheduleUnavailable or InsufficientCapacity.
        On success ``schedule.available_seats`` reflects the new count.
        """
        self.check_available(schedule, requested, now)

        result = await session.execute(
            update(Schedule)
            .where(
                Schedule.id == schedule.id,
                Schedule.status == ScheduleStatus.ACTIVE,
                Schedule.available_seats >= requested
            )
            .values(available_seats=Schedule.available_seats - requested)
            .execution_options(synchronize_session=False)
        )

        await session.refresh(schedule, attribute_names=["available_seats", "status"])

        if result.rowcount != 1:
            # Lost a race: another booking or an admin edit got there first
            logger.info(
                f"Seat reservation lost race on schedule {schedule.id}: "
                f"requested={requested}, available={schedule.available_seats}"
            )
            if schedule.status != ScheduleStatus.ACTIVE:
                raise ScheduleUnavailable(schedule.id)
            raise InsufficientCapacity(schedule.id, requested, schedule.available_seats)

        logger.debug(f"Reserved {requested} seats on schedule {schedule.id}, {schedule.available_seats} left")

    async def release(self, session: AsyncSession, schedule_id, count: int) -> None:
        await session.execute(
            update(Schedule)
            .where(Schedule.id == schedule_id)
            .values(available_seats=Schedule.available_seats + count)
            .execution_options(synchronize_session=False)
        )
        logger.info(f"Released {count} seats on schedule {schedule_id}")

    async def on_booking_cancelled(self, session: AsyncSession, booking: Booking) -> bool:
        """Returns True when seats were given back to the schedule"""
        if not self.restore_on_cancel:
            return False
        await self.release(session, booking.schedule_id, booking.passenger_count)
        return True

    async def on_booking_reinstated(self, session: AsyncSession, booking: Booking) -> bool:
        """Take seats again for a cancelled booking that an admin re-confirms"""
        if not self.restore_on_cancel:
            return False

        result = await session.execute(
            update(Schedule)
            .where(
                Schedule.id == booking.schedule_id,
                Schedule.available_seats >= booking.passenger_count
            )
            .values(available_seats=Schedule.available_seats - booking.passenger_count)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InsufficientCapacity(booking.schedule_id, booking.passenger_count)
        return True


seat_ledger = SeatLedger()
