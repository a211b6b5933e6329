"""
Database models
"""

from ferrybook.models.user import User, UserRole
from ferrybook.models.boat import Boat, BoatStatus
from ferrybook.models.route import Route, RouteStatus
from ferrybook.models.schedule import Schedule, ScheduleStatus
from ferrybook.models.booking import Booking, BookingStatus, BookingPaymentStatus
from ferrybook.models.payment import Payment, PaymentStatus

__all__ = [
    "User",
    "UserRole",
    "Boat",
    "BoatStatus",
    "Route",
    "RouteStatus",
    "Schedule",
    "ScheduleStatus",
    "Booking",
    "BookingStatus",
    "BookingPaymentStatus",
    "Payment",
    "PaymentStatus",
]
