"""
Centralized configuration management.
All environment variables and settings are defined here.
"""
from typing import List, Optional

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator

from vesting.schema import FIELD_NAMES

DEFAULT_COLUMNS = (
    "total,pool,subtotal,percent_of_total,name,amount,address,"
    "start_at,interval,duration,cliff,portion_size,remainder"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="Vesting Schedule Builder", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Table layout
    header_height: int = Field(default=5, alias="HEADER_HEIGHT")
    sheet_name: str = Field(default="", alias="SHEET_NAME")
    schedule_columns: str = Field(default=DEFAULT_COLUMNS, alias="SCHEDULE_COLUMNS")

    # Validation
    check_final_pool: bool = Field(default=False, alias="CHECK_FINAL_POOL")

    # Storage
    output_path: str = Field(default="schedules", alias="OUTPUT_PATH")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper

    @field_validator("header_height")
    @classmethod
    def validate_header_height(cls, v):
        """Spreadsheet rows are numbered from 1."""
        if v < 1:
            raise ValueError("Header height must be at least 1")
        return v

    @field_validator("schedule_columns")
    @classmethod
    def validate_schedule_columns(cls, v):
        """Validate every named column belongs to the field vocabulary."""
        names = [name.strip() for name in v.split(",")]
        unknown = sorted({name for name in names if name and name not in FIELD_NAMES})
        if unknown:
            raise ValueError(f"Unknown schedule columns: {unknown}")
        mapped = [name for name in names if name]
        if len(mapped) != len(set(mapped)):
            raise ValueError("Schedule columns must not repeat a field")
        return ",".join(names)

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def columns(self) -> List[Optional[str]]:
        """Column layout starting at column A; None marks an ignored column."""
        return [name or None for name in self.schedule_columns.split(",")]

    @property
    def sheet(self) -> Optional[str]:
        """Worksheet to read, None for the first one."""
        return self.sheet_name or None


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
