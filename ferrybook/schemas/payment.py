"""
Payment schemas
"""

from pydantic import Field, field_validator
from typing import Optional, Dict, Any
from uuid import UUID
from datetime import datetime
from decimal import Decimal

from ferrybook.schemas.base import BaseSchema, IDSchema
from ferrybook.models.payment import PaymentStatus
from ferrybook.models.booking import BookingPaymentStatus


class PaymentSubmit(BaseSchema):
    """
    Card details for a payment attempt.

    Only shape is checked here; card rules (length, expiry, CVV) are applied
    by the payment service so every caller gets the same errors.
    """
    payment_method: str = Field(..., min_length=1, max_length=50)
    card_number: str = Field(..., min_length=1, repr=False)
    expiry_month: int
    expiry_year: int
    cvv: str = Field(..., min_length=1, repr=False)
    cardholder_name: str = Field(..., min_length=1, max_length=255)

    @field_validator("card_number")
    @classmethod
    def strip_card_number(cls, v: str) -> str:
        return v.replace(" ", "").replace("-", "")

    @field_validator("cvv", "cardholder_name", "payment_method")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()


class PaymentResponse(IDSchema):
    """Recorded payment"""
    booking_id: UUID
    payment_method: str
    amount: Decimal
    transaction_id: Optional[str] = None
    status: PaymentStatus
    payment_details: Optional[Dict[str, Any]] = None
    paid_at: Optional[datetime] = None
    created_at: datetime


class PaymentResultResponse(BaseSchema):
    """Outcome of a payment attempt"""
    success: bool
    booking_code: str
    payment_status: BookingPaymentStatus
    reason: Optional[str] = None
    payment: Optional[PaymentResponse] = None
