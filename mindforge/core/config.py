"""Application configuration with environment variables."""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment: dev | test | production
    ENV: str = "dev"

    VERSION: str = "1.0.0"

    # Database
    DATABASE_URL: str = "sqlite:///./mindforge.db"
    DB_ECHO: bool = False

    # Bearer tokens (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 24 * 7

    # Password hashing cost factor
    BCRYPT_ROUNDS: int = 12

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Logging
    LOG_LEVEL: str = ""  # Empty = debug in dev, info elsewhere

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    # Rate Limiting (requests per minute, 0 disables)
    RATE_LIMIT_AUTH: int = 5
    RATE_LIMIT_API: int = 100

    @model_validator(mode="after")
    def _check_production_secret(self) -> "Settings":
        if self.ENV == "production" and len(self.JWT_SECRET) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets

    @property
    def log_level(self) -> str:
        if self.LOG_LEVEL:
            return self.LOG_LEVEL.upper()
        return "DEBUG" if self.ENV == "dev" else "INFO"

    @property
    def is_testing(self) -> bool:
        return self.ENV == "test"


settings = Settings()
