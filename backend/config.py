"""Application configuration using pydantic-settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./networth.db"

    # HTTP
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # External accounts whose type is in this list are liabilities
    DEBT_ACCOUNT_TYPES: list[str] = ["Mortgage", "Loan", "Credit Card"]

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()

    @field_validator("MAX_UPLOAD_BYTES")
    @classmethod
    def validate_max_upload_bytes(cls, v: int) -> int:
        """Uploads need at least room for a header line."""
        if v <= 0:
            raise ValueError("MAX_UPLOAD_BYTES must be positive")
        return v

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_SQL: bool = False


settings = Settings()
