"""
Tests for booking code generation
"""

import pytest

from ferrybook.core.exceptions import CodeGenerationExhausted
from ferrybook.services.booking_code import (
    BOOKING_CODE_PATTERN,
    BookingCodeGenerator,
    generate_transaction_id,
)
from tests.conftest import insert_booking


def sequence(*tokens):
    """Token factory returning the given tokens in order"""
    iterator = iter(tokens)
    return lambda: next(iterator)


@pytest.mark.unit
class TestCandidate:

    def test_default_codes_match_format(self):
        generator = BookingCodeGenerator()
        codes = {generator.candidate() for _ in range(200)}
        assert all(BOOKING_CODE_PATTERN.match(code) for code in codes)
        assert len(codes) == 200

    def test_uses_last_eight_uppercased_characters(self):
        generator = BookingCodeGenerator(token_factory=lambda: "0123456789abcdef")
        assert generator.candidate() == "FB89ABCDEF"

    def test_strips_non_alphanumerics_and_pads(self):
        generator = BookingCodeGenerator(token_factory=lambda: "a-b_c")
        assert generator.candidate() == "FB00000ABC"

    def test_transaction_id(self):
        transaction_id = generate_transaction_id()
        assert transaction_id.startswith("TXN")
        assert transaction_id == transaction_id.upper()
        assert transaction_id != generate_transaction_id()


@pytest.mark.asyncio
class TestGenerate:

    async def test_regenerates_on_collision(self, db_session, test_schedule):
        await insert_booking(db_session, test_schedule, booking_code="FBAAAAAAAA")
        generator = BookingCodeGenerator(token_factory=sequence("aaaaaaaa", "aaaaaaaa", "bbbbbbbb"))

        assert await generator.generate(db_session) == "FBBBBBBBBB"

    async def test_gives_up_after_max_attempts(self, db_session, test_schedule):
        await insert_booking(db_session, test_schedule, booking_code="FBAAAAAAAA")
        calls = []

        def always_taken():
            calls.append(1)
            return "aaaaaaaa"

        generator = BookingCodeGenerator(token_factory=always_taken, max_attempts=20)

        with pytest.raises(CodeGenerationExhausted) as exc_info:
            await generator.generate(db_session)

        assert len(calls) == 20
        assert exc_info.value.status_code == 503
        assert exc_info.value.details == {"attempts": 20}

    async def test_exists(self, db_session, test_schedule):
        booking = await insert_booking(db_session, test_schedule)
        generator = BookingCodeGenerator()

        assert await generator.exists(db_session, booking.booking_code) is True
        assert await generator.exists(db_session, "FBZZZZZZZZ") is False
