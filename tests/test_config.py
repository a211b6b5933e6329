"""
Tests for settings parsing and validation
"""

import pytest
from pydantic import ValidationError as SettingsError

from ferrybook.config import Settings, settings

SECRET = "x" * 32


@pytest.mark.unit
class TestSettings:

    def test_test_environment_is_active(self):
        assert settings.is_testing is True

    def test_postgres_url_uses_asyncpg(self):
        config = Settings(DATABASE_URL="postgresql://ferry:secret@db/ferrybook", JWT_SECRET_KEY=SECRET)
        assert config.DATABASE_URL == "postgresql+asyncpg://ferry:secret@db/ferrybook"

    def test_cors_origins_from_comma_list(self):
        config = Settings(CORS_ORIGINS="https://ferry.example, https://admin.ferry.example", JWT_SECRET_KEY=SECRET)
        assert config.CORS_ORIGINS == ["https://ferry.example", "https://admin.ferry.example"]

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_success_rate_bounds(self, rate):
        with pytest.raises(SettingsError):
            Settings(PAYMENT_SUCCESS_RATE=rate, JWT_SECRET_KEY=SECRET)

    def test_short_jwt_secret_rejected(self):
        with pytest.raises(SettingsError):
            Settings(JWT_SECRET_KEY="short")

    def test_booking_defaults(self):
        config = Settings(JWT_SECRET_KEY=SECRET)
        assert config.MAX_PASSENGERS_PER_BOOKING == 10
        assert config.BOOKING_CODE_MAX_ATTEMPTS == 20
        assert config.RESTORE_SEATS_ON_CANCEL is False
        assert config.PAYMENT_SUCCESS_RATE == 0.95
