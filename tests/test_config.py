"""
Unit tests for configuration module.
"""
import pytest
from pydantic import ValidationError

from vesting.config import get_settings, reset_settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("LOG_LEVEL", "OUTPUT_PATH"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()


def test_settings_defaults():
    """Test default configuration values."""
    settings = get_settings()
    assert settings.app_name == "Vesting Schedule Builder"
    assert settings.log_level == "INFO"
    assert settings.header_height == 5
    assert settings.sheet is None
    assert settings.check_final_pool is False
    assert settings.output_path == "schedules"
    assert settings.columns[:3] == ["total", "pool", "subtotal"]
    assert len(settings.columns) == 13


def test_settings_from_environment(monkeypatch):
    """Test values are read from the environment."""
    monkeypatch.setenv("HEADER_HEIGHT", "3")
    monkeypatch.setenv("SHEET_NAME", "Schedule")
    monkeypatch.setenv("CHECK_FINAL_POOL", "true")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.header_height == 3
    assert settings.sheet == "Schedule"
    assert settings.check_final_pool is True
    assert settings.log_level == "DEBUG"


def test_settings_column_layout_with_gaps(monkeypatch):
    """Test empty entries in the column layout mark ignored columns."""
    monkeypatch.setenv("SCHEDULE_COLUMNS", "pool, ,subtotal,name")

    settings = get_settings()
    assert settings.columns == ["pool", None, "subtotal", "name"]


def test_settings_validation_unknown_column(monkeypatch):
    """Test column names outside the field vocabulary are rejected."""
    monkeypatch.setenv("SCHEDULE_COLUMNS", "pool,subtotal,vesting_speed")

    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_repeated_column(monkeypatch):
    """Test a field can only be mapped from one column."""
    monkeypatch.setenv("SCHEDULE_COLUMNS", "pool,amount,amount")

    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_header_height(monkeypatch):
    """Test header height validation."""
    monkeypatch.setenv("HEADER_HEIGHT", "0")

    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_log_level(monkeypatch):
    """Test log level validation."""
    monkeypatch.setenv("LOG_LEVEL", "INVALID")

    with pytest.raises(ValidationError):
        get_settings()


def test_settings_singleton():
    """Test settings singleton behavior."""
    settings1 = get_settings()
    settings2 = get_settings()
    assert settings1 is settings2
