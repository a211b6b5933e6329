"""
Booking schemas
"""

from pydantic import ConfigDict, EmailStr, Field, field_validator
from typing import List, Optional
from uuid import UUID
from decimal import Decimal

from ferrybook.schemas.base import BaseSchema, IDSchema, TimestampSchema
from ferrybook.schemas.schedule import ScheduleResponse
from ferrybook.schemas.payment import PaymentResponse
from ferrybook.models.booking import BookingStatus, BookingPaymentStatus


class BookingCreate(BaseSchema):
    """Booking creation schema"""
    schedule_id: UUID
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str = Field(..., min_length=1, max_length=20)
    # Range is enforced by the seat ledger so the error matches other callers
    passenger_count: int
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("customer_name", "customer_phone")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "schedule_id": "xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx",
            "customer_name": "Made Wirawan",
            "customer_email": "made@example.com",
            "customer_phone": "+6281234567890",
            "passenger_count": 2,
            "notes": "Travelling with surfboards"
        }
    })


class BookingResponse(IDSchema, TimestampSchema):
    """Booking response schema"""
    booking_code: str
    user_id: Optional[UUID] = None
    schedule: ScheduleResponse
    customer_name: str
    customer_email: str
    customer_phone: str
    passenger_count: int
    total_amount: Decimal
    payment_status: BookingPaymentStatus
    booking_status: BookingStatus
    notes: Optional[str] = None
    is_paid: bool
    can_be_cancelled: bool
    payments: List[PaymentResponse] = []
