"""
Booking model
"""

from datetime import datetime, timedelta

from sqlalchemy import Column, String, Integer, Numeric, Text, ForeignKey, Index, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
import enum

from ferrybook.config import settings
from ferrybook.models.base import BaseModel, enum_type, utcnow


class BookingStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class BookingPaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Booking(BaseModel):
    """
    Customer reservation of N seats on one schedule.

    total_amount is computed once at creation and never recalculated.
    """
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_payment_booking_status", "payment_status", "booking_status"),
        CheckConstraint(
            "passenger_count >= 1 AND passenger_count <= 10",
            name="chk_bookings_passenger_count"
        ),
        CheckConstraint("total_amount >= 0", name="chk_bookings_total_amount"),
    )

    booking_code = Column(String(20), unique=True, nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    schedule_id = Column(Uuid(as_uuid=True), ForeignKey("schedules.id"), nullable=False, index=True)

    # Contact snapshot, independent of the user record
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False, index=True)
    customer_phone = Column(String(20), nullable=False)

    passenger_count = Column(Integer, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    payment_status = Column(
        enum_type(BookingPaymentStatus, "booking_payment_status"),
        default=BookingPaymentStatus.PENDING,
        nullable=False
    )
    booking_status = Column(
        enum_type(BookingStatus, "booking_status"),
        default=BookingStatus.CONFIRMED,
        nullable=False
    )
    notes = Column(Text)

    # Relationships
    user = relationship("User", back_populates="bookings")
    schedule = relationship("Schedule", back_populates="bookings")
    payments = relationship("Payment", back_populates="booking", order_by="Payment.created_at")

    @property
    def is_paid(self) -> bool:
        return self.payment_status == BookingPaymentStatus.PAID

    @property
    def can_be_cancelled(self) -> bool:
        return self.cancellable_at(utcnow())

    def cancellable_at(self, now: datetime) -> bool:
        """Confirmed and departing after the cancellation cutoff. Needs schedule loaded."""
        cutoff = timedelta(hours=settings.CANCELLATION_CUTOFF_HOURS)
        return (
            self.booking_status == BookingStatus.CONFIRMED
            and self.schedule.departure_time > now + cutoff
        )

    def __repr__(self):
        return f"<Booking(id={self.id}, code={self.booking_code}, status={self.booking_status}, amount={self.total_amount})>"
