"""
Admin schemas
"""

from pydantic import Field
from typing import List, Optional
from decimal import Decimal

from ferrybook.schemas.base import BaseSchema
from ferrybook.schemas.booking import BookingResponse
from ferrybook.schemas.schedule import ScheduleResponse
from ferrybook.models.booking import BookingStatus, BookingPaymentStatus


class BookingAdminUpdate(BaseSchema):
    """Direct status override; omitted fields are left unchanged"""
    booking_status: Optional[BookingStatus] = None
    payment_status: Optional[BookingPaymentStatus] = None
    notes: Optional[str] = Field(None, max_length=500)


class DashboardStats(BaseSchema):
    total_bookings: int
    pending_payments: int
    total_revenue: Decimal
    active_schedules: int


class DashboardResponse(BaseSchema):
    stats: DashboardStats
    recent_bookings: List[BookingResponse]
    upcoming_schedules: List[ScheduleResponse]
