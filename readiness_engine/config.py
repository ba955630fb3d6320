"""Application configuration with validation."""
from typing import Optional, Literal
from functools import lru_cache
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from the environment / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Sales Readiness Engine"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Taxonomy
    TAXONOMY_PATH: Optional[str] = Field(
        default=None,
        description="JSON taxonomy file; the bundled default is used when unset",
    )

    # Analysis pipeline
    MIN_TRANSCRIPT_CHUNKS: int = Field(default=3, ge=1, le=100)
    PRICE_SENSITIVITY_PILLAR_ID: str = "P6"
    DEFAULT_CUSTOMER_NAME: str = "Customer"

    # Sessions
    MAX_SESSIONS: int = Field(default=1000, ge=1, le=100_000)

    @field_validator("PRICE_SENSITIVITY_PILLAR_ID")
    @classmethod
    def validate_pillar_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("PRICE_SENSITIVITY_PILLAR_ID must not be empty")
        return v

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production does not run in debug mode."""
        if self.APP_ENV == "production" and self.DEBUG:
            raise ValueError("DEBUG must be False in production")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
