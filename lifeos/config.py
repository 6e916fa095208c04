"""
Application Configuration
=========================

Centralized configuration using Pydantic Settings.
Loads from environment variables with validation.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: str = Field(default="development")

    # Development Settings
    DEV_AUTH_DISABLED: bool = Field(
        default=False,
        description="Disable authentication for local development/testing"
    )

    # Database & Auth - Supabase
    SUPABASE_JWT_SECRET: str = Field(default="change-this-secret-in-production-please")
    SUPABASE_JWT_AUDIENCE: str = Field(default="authenticated")
    SUPABASE_DATABASE_URL: str = Field(default="")

    # Redis
    REDIS_URL: str = Field(default="redis://localhost:6379/0")

    # AI completion gateway (OpenAI-compatible chat completions)
    AI_GATEWAY_URL: str = Field(default="https://ai.gateway.lovable.dev/v1/chat/completions")
    AI_GATEWAY_API_KEY: str = Field(default="")
    AI_MODEL: str = Field(default="google/gemini-2.5-flash")
    AI_TIMEOUT_SECONDS: float = Field(default=60.0)

    # Life coach
    COACH_HISTORY_LIMIT: int = Field(default=10, ge=0, le=50)
    COACH_RATE_LIMIT_PER_MINUTE: int = Field(default=20, ge=1)

    # Analytics
    WEEK_STARTS_ON: int = Field(
        default=6,
        ge=0,
        le=6,
        description="First day of the week (Monday=0 ... Sunday=6)",
    )
    USER_TIMEZONE: Optional[str] = Field(default=None)

    # App Configuration
    ALLOWED_ORIGINS: str = Field(default="http://localhost:5173,http://localhost:8000")

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse ALLOWED_ORIGINS into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def database_url_async(self) -> str:
        """Convert database URL to async format for asyncpg."""
        if self.SUPABASE_DATABASE_URL:
            return self.SUPABASE_DATABASE_URL.replace(
                "postgresql://", "postgresql+asyncpg://"
            )
        return ""

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"

    @property
    def auth_disabled(self) -> bool:
        """Check if auth is disabled (only allowed in development)."""
        return self.is_development and self.DEV_AUTH_DISABLED

    @property
    def ai_gateway_configured(self) -> bool:
        return bool(self.AI_GATEWAY_API_KEY)

    @field_validator("SUPABASE_JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Ensure JWT secret is sufficiently long."""
        if len(v) < 32:
            raise ValueError("SUPABASE_JWT_SECRET must be at least 32 characters long")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()


# Export a default settings instance
settings = get_settings()
