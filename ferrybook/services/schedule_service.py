"""
Schedule queries: availability listing, seat accounting and lookups
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ferrybook.core.exceptions import NotFoundError
from ferrybook.models.booking import Booking
from ferrybook.models.route import Route
from ferrybook.models.schedule import Schedule
from ferrybook.models.scopes import available_schedules, seat_holding_bookings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleFilters:
    departure_port: Optional[str] = None
    destination_port: Optional[str] = None
    departure_date: Optional[date] = None


@dataclass(frozen=True)
class SeatSummary:
    """
    Both seat views of a schedule side by side.

    ``unaccounted`` is capacity - available - booked. It is non-zero when the
    counter and the bookings disagree, e.g. after a cancellation that did not
    give seats back.
    """
    capacity: int
    available_seats: int
    booked_seats: int

    @property
    def unaccounted(self) -> int:
        return self.capacity - self.available_seats - self.booked_seats


def _day_bounds(day: date):
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class ScheduleService:
    """Read side of the seat inventory"""

    async def get_schedule(self, session: AsyncSession, schedule_id: UUID) -> Schedule:
        result = await session.execute(
            select(Schedule)
            .options(selectinload(Schedule.boat), selectinload(Schedule.route))
            .where(Schedule.id == schedule_id)
        )
        schedule = result.scalar_one_or_none()
        if not schedule:
            raise NotFoundError("Schedule", schedule_id)
        return schedule

    async def list_available_schedules(
        self,
        session: AsyncSession,
        filters: Optional[ScheduleFilters] = None,
        now: Optional[datetime] = None
    ) -> List[Schedule]:
        """Active, future schedules with seats left, earliest departure first"""
        filters = filters or ScheduleFilters()

        query = (
            select(Schedule)
            .join(Route, Schedule.route_id == Route.id)
            .options(selectinload(Schedule.boat), selectinload(Schedule.route))
            .where(available_schedules(now))
        )

        if filters.departure_port:
            query = query.where(Route.departure_port == filters.departure_port)
        if filters.destination_port:
            query = query.where(Route.destination_port == filters.destination_port)
        if filters.departure_date:
            day_start, day_end = _day_bounds(filters.departure_date)
            query = query.where(
                Schedule.departure_time >= day_start,
                Schedule.departure_time < day_end
            )

        result = await session.execute(query.order_by(Schedule.departure_time.asc()))
        return list(result.scalars().all())

    async def list_ports(self, session: AsyncSession, now: Optional[datetime] = None) -> List[str]:
        """Sorted unique ports served by currently available schedules"""
        result = await session.execute(
            select(Route.departure_port, Route.destination_port)
            .join(Schedule, Schedule.route_id == Route.id)
            .where(available_schedules(now))
            .distinct()
        )
        ports = set()
        for departure_port, destination_port in result:
            ports.add(departure_port)
            ports.add(destination_port)
        return sorted(ports)

    async def compute_booked_seats(self, session: AsyncSession, schedule_id: UUID) -> int:
        """
        Sum of passengers on confirmed, non-payment-failed bookings.

        Derived independently of Schedule.available_seats and never written back.
        """
        result = await session.execute(
            select(func.coalesce(func.sum(Booking.passenger_count), 0))
            .where(Booking.schedule_id == schedule_id, seat_holding_bookings())
        )
        return int(result.scalar() or 0)

    async def seat_summary(self, session: AsyncSession, schedule: Schedule) -> SeatSummary:
        """Needs schedule.boat loaded"""
        booked = await self.compute_booked_seats(session, schedule.id)
        summary = SeatSummary(
            capacity=schedule.boat.capacity,
            available_seats=schedule.available_seats,
            booked_seats=booked
        )
        if summary.unaccounted != 0:
            logger.info(
                f"Seat counter drift on schedule {schedule.id}: "
                f"capacity={summary.capacity} available={summary.available_seats} booked={summary.booked_seats}"
            )
        return summary


schedule_service = ScheduleService()
