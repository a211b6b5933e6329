"""
Administrative operations: booking overrides, schedule, boat and route
management, dashboard statistics
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ferrybook.core.database import db_manager
from ferrybook.core.exceptions import (
    HasDependentBookings,
    HasDependentSchedules,
    NotFoundError,
    ValidationError,
)
from ferrybook.core.metrics import metrics_collector
from ferrybook.models.base import as_utc, utcnow
from ferrybook.models.boat import Boat
from ferrybook.models.booking import Booking, BookingPaymentStatus, BookingStatus
from ferrybook.models.payment import Payment
from ferrybook.models.route import Route
from ferrybook.models.schedule import Schedule, ScheduleStatus
from ferrybook.models.scopes import active_schedules, completed_payments, upcoming_schedules
from ferrybook.services.booking_service import BookingService, booking_service as default_booking_service
from ferrybook.services.seat_ledger import SeatLedger, seat_ledger as default_seat_ledger

logger = logging.getLogger(__name__)

# Statuses an admin may pick when creating a schedule; "full" is only reachable by update
CREATABLE_SCHEDULE_STATUSES = (ScheduleStatus.ACTIVE, ScheduleStatus.CANCELLED)

BOAT_FIELDS = ("name", "capacity", "description", "status")
ROUTE_FIELDS = ("departure_port", "destination_port", "duration_minutes", "base_price", "status")
SCHEDULE_UPDATE_FIELDS = ("departure_time", "arrival_time", "price", "status")


@dataclass
class DashboardStats:
    total_bookings: int
    pending_payments: int
    total_revenue: Decimal
    active_schedules: int


@dataclass
class Dashboard:
    stats: DashboardStats
    recent_bookings: List[Booking]
    upcoming_schedules: List[Schedule]


def _apply(instance, changes: Dict[str, Any], allowed) -> None:
    for name, value in changes.items():
        if name not in allowed:
            raise ValidationError(f"Field '{name}' cannot be changed", field=name)
        setattr(instance, name, value)


def _like(term: str) -> str:
    return f"%{term.strip()}%"


class AdminService:
    """
    Operations reserved for administrators.

    Booking overrides set statuses directly and skip the customer-facing
    rules. Cancelling still goes through the seat ledger so that seat
    restoration follows RESTORE_SEATS_ON_CANCEL.
    """

    def __init__(self, ledger: Optional[SeatLedger] = None, bookings: Optional[BookingService] = None):
        self.ledger = ledger or default_seat_ledger
        self.bookings = bookings or default_booking_service

    # Bookings

    async def list_bookings(
        self,
        session: AsyncSession,
        search: Optional[str] = None,
        payment_status: Optional[BookingPaymentStatus] = None,
        booking_status: Optional[BookingStatus] = None,
        skip: int = 0,
        limit: int = 15
    ) -> Tuple[List[Booking], int]:
        """Newest first, with the total count before pagination"""
        conditions = []
        if search:
            pattern = _like(search)
            conditions.append(or_(
                Booking.booking_code.ilike(pattern),
                Booking.customer_name.ilike(pattern),
                Booking.customer_email.ilike(pattern),
            ))
        if payment_status:
            conditions.append(Booking.payment_status == payment_status)
        if booking_status:
            conditions.append(Booking.booking_status == booking_status)

        total = await session.scalar(select(func.count(Booking.id)).where(*conditions))
        result = await session.execute(
            select(Booking)
            .options(
                selectinload(Booking.schedule).selectinload(Schedule.boat),
                selectinload(Booking.schedule).selectinload(Schedule.route),
                selectinload(Booking.payments),
            )
            .where(*conditions)
            .order_by(Booking.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), int(total or 0)

    async def get_booking(self, session: AsyncSession, booking_id: UUID) -> Booking:
        return await self.bookings.get_booking(session, booking_id)

    async def update_booking_admin(
        self,
        session: AsyncSession,
        booking_id: UUID,
        booking_status: Optional[BookingStatus] = None,
        payment_status: Optional[BookingPaymentStatus] = None,
        notes: Optional[str] = None
    ) -> Booking:
        """
        Set booking_status, payment_status and notes directly.

        Cancelling a confirmed booking calls the ledger's cancellation hook;
        re-confirming a cancelled one calls the reinstatement hook. Both are
        no-ops unless seat restoration is enabled.
        """
        async with db_manager.transaction(session):
            booking = await session.get(Booking, booking_id, populate_existing=True)
            if not booking:
                raise NotFoundError("Booking", booking_id)

            previous_status = booking.booking_status
            seats_released = False

            if booking_status is not None and booking_status != previous_status:
                if booking_status == BookingStatus.CANCELLED:
                    seats_released = await self.ledger.on_booking_cancelled(session, booking)
                else:
                    await self.ledger.on_booking_reinstated(session, booking)
                booking.booking_status = booking_status

            if payment_status is not None:
                booking.payment_status = payment_status
            if notes is not None:
                booking.notes = notes

            booking_code = booking.booking_code
            passenger_count = booking.passenger_count

        if booking_status == BookingStatus.CANCELLED and previous_status != BookingStatus.CANCELLED:
            await metrics_collector.record_booking_cancelled(passenger_count if seats_released else 0)

        logger.info(
            f"Admin updated booking {booking_code}: "
            f"booking_status={booking_status} payment_status={payment_status} "
            f"seats_released={seats_released}"
        )
        return await self.bookings.get_booking(session, booking_id)

    # Schedules

    async def list_schedules(
        self,
        session: AsyncSession,
        search: Optional[str] = None,
        status: Optional[ScheduleStatus] = None,
        skip: int = 0,
        limit: int = 15
    ) -> Tuple[List[Schedule], int]:
        query = (
            select(Schedule)
            .join(Boat, Schedule.boat_id == Boat.id)
            .join(Route, Schedule.route_id == Route.id)
        )
        count_query = (
            select(func.count(Schedule.id))
            .join(Boat, Schedule.boat_id == Boat.id)
            .join(Route, Schedule.route_id == Route.id)
        )

        conditions = []
        if search:
            pattern = _like(search)
            conditions.append(or_(
                Boat.name.ilike(pattern),
                Route.departure_port.ilike(pattern),
                Route.destination_port.ilike(pattern),
            ))
        if status:
            conditions.append(Schedule.status == status)

        total = await session.scalar(count_query.where(*conditions))
        result = await session.execute(
            query.options(selectinload(Schedule.boat), selectinload(Schedule.route))
            .where(*conditions)
            .order_by(Schedule.departure_time.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), int(total or 0)

    async def get_schedule(self, session: AsyncSession, schedule_id: UUID) -> Schedule:
        result = await session.execute(
            select(Schedule)
            .options(selectinload(Schedule.boat), selectinload(Schedule.route))
            .where(Schedule.id == schedule_id)
            .execution_options(populate_existing=True)
        )
        schedule = result.scalar_one_or_none()
        if not schedule:
            raise NotFoundError("Schedule", schedule_id)
        return schedule

    async def create_schedule(
        self,
        session: AsyncSession,
        boat_id: UUID,
        route_id: UUID,
        departure_time: datetime,
        arrival_time: datetime,
        price: Decimal,
        status: ScheduleStatus = ScheduleStatus.ACTIVE,
        now: Optional[datetime] = None
    ) -> Schedule:
        """New schedule with available_seats seeded from the boat's capacity"""
        now = as_utc(now) or utcnow()
        departure_time = as_utc(departure_time)
        arrival_time = as_utc(arrival_time)
        if departure_time <= now:
            raise ValidationError("Departure time must be in the future", field="departure_time")
        if arrival_time <= departure_time:
            raise ValidationError("Arrival time must be after departure time", field="arrival_time")
        if price < 0:
            raise ValidationError("Price cannot be negative", field="price")
        if status not in CREATABLE_SCHEDULE_STATUSES:
            raise ValidationError("New schedules must be active or cancelled", field="status")

        async with db_manager.transaction(session):
            boat = await session.get(Boat, boat_id)
            if not boat:
                raise NotFoundError("Boat", boat_id)
            route = await session.get(Route, route_id)
            if not route:
                raise NotFoundError("Route", route_id)

            schedule = Schedule(
                boat_id=boat.id,
                route_id=route.id,
                departure_time=departure_time,
                arrival_time=arrival_time,
                price=price,
                available_seats=boat.capacity,
                status=status
            )
            session.add(schedule)
            await session.flush()
            schedule_id = schedule.id

        logger.info(f"Schedule {schedule_id} created for boat {boat_id} on route {route_id}")
        return await self.get_schedule(session, schedule_id)

    async def update_schedule(self, session: AsyncSession, schedule_id: UUID, **changes) -> Schedule:
        """Update price, times or status. Seat counts are not editable here."""
        async with db_manager.transaction(session):
            schedule = await session.get(Schedule, schedule_id, populate_existing=True)
            if not schedule:
                raise NotFoundError("Schedule", schedule_id)

            for name in ("departure_time", "arrival_time"):
                if name in changes:
                    changes[name] = as_utc(changes[name])

            departure_time = changes.get("departure_time", schedule.departure_time)
            arrival_time = changes.get("arrival_time", schedule.arrival_time)
            if arrival_time <= departure_time:
                raise ValidationError("Arrival time must be after departure time", field="arrival_time")
            if changes.get("price") is not None and changes["price"] < 0:
                raise ValidationError("Price cannot be negative", field="price")

            _apply(schedule, changes, SCHEDULE_UPDATE_FIELDS)

        logger.info(f"Schedule {schedule_id} updated: {sorted(changes)}")
        return await self.get_schedule(session, schedule_id)

    async def delete_schedule(self, session: AsyncSession, schedule_id: UUID) -> None:
        async with db_manager.transaction(session):
            schedule = await session.get(Schedule, schedule_id)
            if not schedule:
                raise NotFoundError("Schedule", schedule_id)

            booking_count = await session.scalar(
                select(func.count(Booking.id)).where(Booking.schedule_id == schedule_id)
            )
            if booking_count:
                raise HasDependentBookings(schedule_id, booking_count)

            await session.delete(schedule)

        logger.info(f"Schedule {schedule_id} deleted")

    # Boats

    async def list_boats(self, session: AsyncSession) -> List[Boat]:
        result = await session.execute(select(Boat).order_by(Boat.name.asc()))
        return list(result.scalars().all())

    async def create_boat(self, session: AsyncSession, **values) -> Boat:
        async with db_manager.transaction(session):
            boat = Boat()
            _apply(boat, values, BOAT_FIELDS)
            session.add(boat)
            await session.flush()
        logger.info(f"Boat {boat.id} created: {boat.name} ({boat.capacity} seats)")
        return boat

    async def update_boat(self, session: AsyncSession, boat_id: UUID, **changes) -> Boat:
        async with db_manager.transaction(session):
            boat = await session.get(Boat, boat_id, populate_existing=True)
            if not boat:
                raise NotFoundError("Boat", boat_id)
            _apply(boat, changes, BOAT_FIELDS)
        logger.info(f"Boat {boat_id} updated: {sorted(changes)}")
        return boat

    async def delete_boat(self, session: AsyncSession, boat_id: UUID) -> None:
        async with db_manager.transaction(session):
            boat = await session.get(Boat, boat_id)
            if not boat:
                raise NotFoundError("Boat", boat_id)
            schedule_count = await session.scalar(
                select(func.count(Schedule.id)).where(Schedule.boat_id == boat_id)
            )
            if schedule_count:
                raise HasDependentSchedules("Boat", boat_id, schedule_count)
            await session.delete(boat)
        logger.info(f"Boat {boat_id} deleted")

    # Routes

    async def list_routes(self, session: AsyncSession) -> List[Route]:
        result = await session.execute(
            select(Route).order_by(Route.departure_port.asc(), Route.destination_port.asc())
        )
        return list(result.scalars().all())

    async def create_route(self, session: AsyncSession, **values) -> Route:
        async with db_manager.transaction(session):
            route = Route()
            _apply(route, values, ROUTE_FIELDS)
            session.add(route)
            await session.flush()
        logger.info(f"Route {route.id} created: {route.route_name}")
        return route

    async def update_route(self, session: AsyncSession, route_id: UUID, **changes) -> Route:
        async with db_manager.transaction(session):
            route = await session.get(Route, route_id, populate_existing=True)
            if not route:
                raise NotFoundError("Route", route_id)
            _apply(route, changes, ROUTE_FIELDS)
        logger.info(f"Route {route_id} updated: {sorted(changes)}")
        return route

    async def delete_route(self, session: AsyncSession, route_id: UUID) -> None:
        async with db_manager.transaction(session):
            route = await session.get(Route, route_id)
            if not route:
                raise NotFoundError("Route", route_id)
            schedule_count = await session.scalar(
                select(func.count(Schedule.id)).where(Schedule.route_id == route_id)
            )
            if schedule_count:
                raise HasDependentSchedules("Route", route_id, schedule_count)
            await session.delete(route)
        logger.info(f"Route {route_id} deleted")

    # Dashboard

    async def dashboard(self, session: AsyncSession, now: Optional[datetime] = None) -> Dashboard:
        total_bookings = await session.scalar(select(func.count(Booking.id)))
        pending_payments = await session.scalar(
            select(func.count(Booking.id)).where(Booking.payment_status == BookingPaymentStatus.PENDING)
        )
        total_revenue = await session.scalar(
            select(func.coalesce(func.sum(Payment.amount), 0)).where(completed_payments())
        )
        active_count = await session.scalar(select(func.count(Schedule.id)).where(active_schedules()))

        recent = await session.execute(
            select(Booking)
            .options(
                selectinload(Booking.schedule).selectinload(Schedule.boat),
                selectinload(Booking.schedule).selectinload(Schedule.route),
                selectinload(Booking.payments),
            )
            .order_by(Booking.created_at.desc())
            .limit(10)
        )
        upcoming = await session.execute(
            select(Schedule)
            .options(selectinload(Schedule.boat), selectinload(Schedule.route))
            .where(active_schedules(), upcoming_schedules(now))
            .order_by(Schedule.departure_time.asc())
            .limit(5)
        )

        return Dashboard(
            stats=DashboardStats(
                total_bookings=int(total_bookings or 0),
                pending_payments=int(pending_payments or 0),
                total_revenue=Decimal(str(total_revenue or 0)),
                active_schedules=int(active_count or 0),
            ),
            recent_bookings=list(recent.scalars().all()),
            upcoming_schedules=list(upcoming.scalars().all()),
        )


admin_service = AdminService()
