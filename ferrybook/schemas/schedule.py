"""
Schedule schemas
"""

from pydantic import Field, field_validator
from typing import Optional
from uuid import UUID
from datetime import datetime
from decimal import Decimal

from ferrybook.models.base import as_utc
from ferrybook.schemas.base import BaseSchema, IDSchema, TimestampSchema
from ferrybook.schemas.boat import BoatSummary
from ferrybook.schemas.route import RouteSummary
from ferrybook.models.schedule import ScheduleStatus


class ScheduleResponse(IDSchema):
    """Schedule as listed to customers"""
    boat: BoatSummary
    route: RouteSummary
    departure_time: datetime
    arrival_time: datetime
    price: Decimal
    available_seats: int
    status: ScheduleStatus
    is_full: bool


class ScheduleDetail(ScheduleResponse, TimestampSchema):
    """
    Schedule with both seat views.

    booked_seats is summed from bookings and can disagree with
    capacity - available_seats; unaccounted_seats shows the difference.
    """
    capacity: int
    booked_seats: int
    unaccounted_seats: int


class ScheduleCreate(BaseSchema):
    """Admin schedule creation schema"""
    boat_id: UUID
    route_id: UUID
    departure_time: datetime
    arrival_time: datetime
    price: Decimal = Field(..., ge=0)
    status: ScheduleStatus = ScheduleStatus.ACTIVE

    @field_validator("departure_time", "arrival_time")
    @classmethod
    def ensure_utc(cls, v):
        return as_utc(v)


class ScheduleUpdate(BaseSchema):
    """Admin schedule update schema; seat counts are not editable"""
    departure_time: Optional[datetime] = None
    arrival_time: Optional[datetime] = None
    price: Optional[Decimal] = Field(None, ge=0)
    status: Optional[ScheduleStatus] = None

    @field_validator("departure_time", "arrival_time")
    @classmethod
    def ensure_utc(cls, v):
        return as_utc(v)
