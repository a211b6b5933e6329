"""
Payment model for transaction processing
"""

from sqlalchemy import Column, String, Numeric, ForeignKey, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
import enum

from ferrybook.models.base import BaseModel, UTCDateTime, enum_type


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class Payment(BaseModel):
    """
    One payment attempt against a booking.

    payment_details holds card_last_four and cardholder_name only.
    """
    __tablename__ = "payments"

    booking_id = Column(Uuid(as_uuid=True), ForeignKey("bookings.id"), nullable=False, index=True)
    payment_method = Column(String(50), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    transaction_id = Column(String(64), unique=True, nullable=False)
    status = Column(
        enum_type(PaymentStatus, "payment_status"),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True
    )
    payment_details = Column(JSON().with_variant(JSONB(), "postgresql"), default=dict)
    paid_at = Column(UTCDateTime())

    # Relationships
    booking = relationship("Booking", back_populates="payments")

    def __repr__(self):
        return f"<Payment(id={self.id}, booking_id={self.booking_id}, amount={self.amount}, status={self.status})>"
