"""
Booking code generation
"""

import logging
import re
import uuid
from typing import Callable, Optional

from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession

from ferrybook.config import settings
from ferrybook.core.exceptions import CodeGenerationExhausted
from ferrybook.models.booking import Booking

logger = logging.getLogger(__name__)

BOOKING_CODE_PREFIX = "FB"
BOOKING_CODE_LENGTH = 8
BOOKING_CODE_PATTERN = re.compile(r"^FB[A-Z0-9]{8}$")

_NON_ALPHANUMERIC = re.compile(r"[^A-Z0-9]")


def default_token() -> str:
    return uuid.uuid4().hex


def generate_transaction_id() -> str:
    """Gateway-style transaction reference, e.g. TXN3F2A..."""
    return f"TXN{uuid.uuid4().hex.upper()}"


class BookingCodeGenerator:
    """
    Produces ``FB`` + 8 uppercase alphanumerics, unique among existing bookings.

    The existence check only narrows the window; the unique index on
    bookings.booking_code is what guarantees uniqueness, and callers retry
    on IntegrityError.
    """

    def __init__(
        self,
        token_factory: Optional[Callable[[], str]] = None,
        max_attempts: Optional[int] = None
    ):
        self.token_factory = token_factory or default_token
        self.max_attempts = max_attempts or settings.BOOKING_CODE_MAX_ATTEMPTS

    def candidate(self) -> str:
        token = _NON_ALPHANUMERIC.sub("", self.token_factory().upper())
        if len(token) < BOOKING_CODE_LENGTH:
            token = token.rjust(BOOKING_CODE_LENGTH, "0")
        return f"{BOOKING_CODE_PREFIX}{token[-BOOKING_CODE_LENGTH:]}"

    async def exists(self, session: AsyncSession, code: str) -> bool:
        result = await session.execute(
            select(exists().where(Booking.booking_code == code))
        )
        return bool(result.scalar())

    async def generate(self, session: AsyncSession) -> str:
        for attempt in range(1, self.max_attempts + 1):
            code = self.candidate()
            if not await self.exists(session, code):
                return code
            logger.warning(f"Booking code collision on attempt {attempt}: {code}")

        logger.error(f"Booking code generation exhausted after {self.max_attempts} attempts")
        raise CodeGenerationExhausted(self.max_attempts)
