"""
Payment gateway interface and the simulated default implementation
"""

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from ferrybook.config import settings
from ferrybook.services.booking_code import generate_transaction_id

logger = logging.getLogger(__name__)


@dataclass
class ChargeRequest:
    booking_code: str
    amount: Decimal
    currency: str
    payment_method: str
    cardholder_name: str
    card_number: str = field(repr=False)
    expiry_month: int = 0
    expiry_year: int = 0
    cvv: str = field(default="", repr=False)

    @property
    def card_last_four(self) -> str:
        return self.card_number[-4:]


@dataclass
class ChargeOutcome:
    success: bool
    transaction_id: Optional[str] = None
    reason: Optional[str] = None


class PaymentGateway(ABC):
    """Anything that can charge a card for a booking"""

    @abstractmethod
    async def charge(self, request: ChargeRequest) -> ChargeOutcome:
        ...


class SimulatedPaymentGateway(PaymentGateway):
    """
    Approves a charge with a fixed probability.

    ``rng`` can be any object with a ``random()`` method returning a float in
    [0, 1), so tests can pin the outcome.
    """

    DECLINE_REASON = "Payment was declined by the card issuer. Please try again."

    def __init__(self, success_rate: Optional[float] = None, rng: Optional[random.Random] = None):
        self.success_rate = settings.PAYMENT_SUCCESS_RATE if success_rate is None else success_rate
        self.rng = rng or random.Random()

    async def charge(self, request: ChargeRequest) -> ChargeOutcome:
        if self.rng.random() < self.success_rate:
            transaction_id = generate_transaction_id()
            logger.info(f"Simulated charge approved for {request.booking_code}: {transaction_id}")
            return ChargeOutcome(success=True, transaction_id=transaction_id)

        logger.info(f"Simulated charge declined for {request.booking_code}")
        return ChargeOutcome(success=False, reason=self.DECLINE_REASON)
