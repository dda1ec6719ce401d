"""Unit tests that do not require a running API or external services."""
from decimal import Decimal

from app.config import settings


def test_settings_load():
    """Settings load from environment (e.g. CI env vars)."""
    assert settings.API_V1_PREFIX == "/api/v1"
    assert settings.APP_NAME == "Society Backend"


def test_environment_flag():
    """Environment flags reflect ENVIRONMENT value."""
    assert settings.ENVIRONMENT.lower() in ("development", "test", "production")
    assert settings.is_development == (settings.ENVIRONMENT.lower() == "development")
    assert settings.is_production == (settings.ENVIRONMENT.lower() == "production")


def test_billing_defaults():
    assert settings.LATE_FEE_RATE == Decimal("0.10")
    assert settings.BILL_DUE_DAY == 25
    assert settings.COMPLAINT_NUMBER_PREFIX == "C"
