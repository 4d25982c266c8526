"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.

Settings are resolved once by the application factory and handed down
explicitly. Domain services never import this module.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


WEAK_SECRETS = {
    "dev-secret-change-me-in-production",
    "secret",
    "password",
    "changeme",
    "default",
}


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./food_ordering.db"
    database_echo: bool = False
    # Run Base.metadata.create_all on startup
    create_schema: bool = True

    # JWT Configuration
    jwt_secret: str = "dev-secret-change-me-in-production"
    jwt_issuer: str = "food-ordering"
    jwt_audience: str = "food-ordering-users"
    jwt_access_token_expire_minutes: int = 60

    # Comma-separated list of allowed origins (empty uses default localhost list)
    allowed_origins: str = ""

    # Server
    rest_api_port: int = 8000

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    @property
    def cors_origins(self) -> list[str]:
        if not self.allowed_origins:
            return ["http://localhost:3000", "http://localhost:5173"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def validate_production_secrets(self) -> list[str]:
        """
        Validate that secrets are properly configured for production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.jwt_secret in WEAK_SECRETS or len(self.jwt_secret) < 32:
                errors.append(
                    "JWT_SECRET must be at least 32 characters and not a default value in production"
                )

            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.is_sqlite:
                errors.append("DATABASE_URL must point to a server database in production")

            if not self.allowed_origins:
                errors.append(
                    "ALLOWED_ORIGINS must be set in production (comma-separated list of allowed domains)"
                )

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
