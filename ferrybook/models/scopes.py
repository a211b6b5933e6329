"""
Reusable query filters.

Each function returns a SQL expression that can be passed to ``.where()``
and combined with ``and_``/``or_``.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_

from ferrybook.models.base import utcnow
from ferrybook.models.schedule import Schedule, ScheduleStatus
from ferrybook.models.booking import Booking, BookingStatus, BookingPaymentStatus
from ferrybook.models.payment import Payment, PaymentStatus


def active_schedules():
    return Schedule.status == ScheduleStatus.ACTIVE


def upcoming_schedules(now: Optional[datetime] = None):
    return Schedule.departure_time > (now or utcnow())


def available_schedules(now: Optional[datetime] = None):
    """Active, in the future and with at least one seat left"""
    return and_(
        active_schedules(),
        Schedule.available_seats > 0,
        upcoming_schedules(now),
    )


def confirmed_bookings():
    return Booking.booking_status == BookingStatus.CONFIRMED


def paid_bookings():
    return Booking.payment_status == BookingPaymentStatus.PAID


def seat_holding_bookings():
    """Bookings counted towards booked seats: confirmed and not payment-failed"""
    return and_(
        confirmed_bookings(),
        Booking.payment_status != BookingPaymentStatus.FAILED,
    )


def completed_payments():
    return Payment.status == PaymentStatus.COMPLETED
