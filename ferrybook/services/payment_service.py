"""
Payment processing for bookings
Charges through a PaymentGateway and records the outcome atomically
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ferrybook.config import settings
from ferrybook.core.database import db_manager
from ferrybook.core.exceptions import AlreadyPaid, AuthorizationError, NotFoundError, ValidationError
from ferrybook.core.metrics import metrics_collector
from ferrybook.models.base import utcnow
from ferrybook.models.booking import Booking, BookingPaymentStatus
from ferrybook.models.payment import Payment, PaymentStatus
from ferrybook.models.scopes import paid_bookings
from ferrybook.models.user import User
from ferrybook.services.payment_gateway import (
    ChargeRequest,
    PaymentGateway,
    SimulatedPaymentGateway,
)

logger = logging.getLogger(__name__)


@dataclass
class PaymentInput:
    payment_method: str
    cardholder_name: str
    card_number: str = field(repr=False)
    expiry_month: int
    expiry_year: int
    cvv: str = field(repr=False)


@dataclass
class PaymentResult:
    success: bool
    reason: Optional[str] = None
    payment: Optional[Payment] = None
    booking: Optional[Booking] = None


class PaymentValidator:
    """Validator for payment-related operations"""

    @staticmethod
    def validate_card_number(card_number: str) -> bool:
        """Digits only, 12 to 19 of them"""
        return card_number.isdigit() and 12 <= len(card_number) <= 19

    @staticmethod
    def validate_expiry(month: int, year: int, now: Optional[datetime] = None) -> bool:
        """Validate card expiry date"""
        now = now or utcnow()

        if not 1 <= month <= 12:
            return False
        if year < now.year:
            return False
        if year == now.year and month < now.month:
            return False

        return True

    @staticmethod
    def validate_cvv(cvv: str) -> bool:
        """Validate CVV code"""
        return cvv.isdigit() and len(cvv) == 3

    @classmethod
    def validate(cls, payment_input: PaymentInput, now: Optional[datetime] = None) -> None:
        if not payment_input.payment_method or not payment_input.payment_method.strip():
            raise ValidationError("Payment method is required", field="payment_method")
        if not payment_input.cardholder_name or not payment_input.cardholder_name.strip():
            raise ValidationError("Cardholder name is required", field="cardholder_name")
        if not cls.validate_card_number(payment_input.card_number):
            raise ValidationError("Card number must be 12 to 19 digits", field="card_number")
        if not 1 <= payment_input.expiry_month <= 12:
            raise ValidationError("Expiry month must be between 1 and 12", field="expiry_month")
        if not cls.validate_expiry(payment_input.expiry_month, payment_input.expiry_year, now):
            raise ValidationError("Card has expired", field="expiry_year")
        if not cls.validate_cvv(payment_input.cvv):
            raise ValidationError("CVV must be exactly 3 digits", field="cvv")


class PaymentService:
    """Service for handling payment operations"""

    def __init__(self, gateway: Optional[PaymentGateway] = None):
        self.gateway = gateway or SimulatedPaymentGateway()

    async def _load_booking(self, session: AsyncSession, booking_id: UUID) -> Booking:
        result = await session.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    async def submit_payment(
        self,
        session: AsyncSession,
        booking_id: UUID,
        payment_input: PaymentInput,
        user: Optional[User] = None
    ) -> PaymentResult:
        """
        Charge the booking's total and mark it paid.

        A declined charge is an expected outcome: nothing is written and the
        result carries the decline reason so the customer can retry.

        Raises:
            NotFoundError: unknown booking
            AuthorizationError: ``user`` does not own the booking
            AlreadyPaid: booking already paid, checked before charging and again at commit
            ValidationError: malformed card details
        """
        booking = await self._load_booking(session, booking_id)

        if user is not None and booking.user_id != user.id:
            raise AuthorizationError("You can only pay for your own bookings")
        if booking.is_paid:
            raise AlreadyPaid(booking.booking_code)

        PaymentValidator.validate(payment_input)

        charge = ChargeRequest(
            booking_code=booking.booking_code,
            amount=booking.total_amount,
            currency=settings.PAYMENT_CURRENCY,
            payment_method=payment_input.payment_method,
            cardholder_name=payment_input.cardholder_name,
            card_number=payment_input.card_number,
            expiry_month=payment_input.expiry_month,
            expiry_year=payment_input.expiry_year,
            cvv=payment_input.cvv
        )
        outcome = await self.gateway.charge(charge)
        await metrics_collector.record_payment(outcome.success)

        if not outcome.success:
            logger.info(f"Payment declined for booking {booking.booking_code}: {outcome.reason}")
            return PaymentResult(success=False, reason=outcome.reason, booking=booking)

        booking_code = booking.booking_code
        async with db_manager.transaction(session):
            result = await session.execute(
                update(Booking)
                .where(
                    Booking.id == booking.id,
                    ~paid_bookings()
                )
                .values(payment_status=BookingPaymentStatus.PAID, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                # Paid by a concurrent request between our check and now
                logger.warning(
                    f"Booking {booking_code} was paid concurrently, "
                    f"charge {outcome.transaction_id} not recorded"
                )
                raise AlreadyPaid(booking_code)

            payment = Payment(
                booking_id=booking.id,
                payment_method=payment_input.payment_method,
                amount=booking.total_amount,
                transaction_id=outcome.transaction_id,
                status=PaymentStatus.COMPLETED,
                payment_details={
                    "card_last_four": charge.card_last_four,
                    "cardholder_name": payment_input.cardholder_name,
                },
                paid_at=utcnow()
            )
            session.add(payment)

        await session.refresh(booking, attribute_names=["payment_status", "updated_at"])
        logger.info(f"Payment {payment.transaction_id} completed for booking {booking_code}")
        return PaymentResult(success=True, payment=payment, booking=booking)

    async def list_payments(
        self,
        session: AsyncSession,
        booking_id: UUID,
        user: Optional[User] = None
    ) -> List[Payment]:
        """Payment attempts for a booking, oldest first"""
        booking = await self._load_booking(session, booking_id)
        if user is not None and not user.is_admin and booking.user_id != user.id:
            raise AuthorizationError("You do not have access to this booking")

        result = await session.execute(
            select(Payment)
            .where(Payment.booking_id == booking.id)
            .order_by(Payment.created_at.asc())
        )
        return list(result.scalars().all())


payment_service = PaymentService()
