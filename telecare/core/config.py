from typing import Optional, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator
from urllib.parse import quote_plus
from enum import Enum


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TELECARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "Telecare Booking Core"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # Working hours used to generate bookable slots
    DAY_START_HOUR: int = 9
    DAY_END_HOUR: int = 18
    DEFAULT_SLOT_MINUTES: int = 30

    # Recommendations
    RECOMMENDATION_LIMIT: int = 10
    RECOMMENDATION_CANDIDATE_LIMIT: int = 50
    RECOMMENDATION_MIN_RATING: float = 4.0

    # Booking lock: "local" serializes per process, "redis" across processes
    BOOKING_LOCK_BACKEND: Literal["local", "redis"] = "local"
    BOOKING_LOCK_TIMEOUT_SECONDS: float = 10.0
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0

    # Metrics
    METRICS_ENABLED: bool = False

    # --- Validators & Derived Settings ---
    @model_validator(mode="after")
    def _finalize_and_validate(self) -> "Settings":
        if not (0 <= self.DAY_START_HOUR < self.DAY_END_HOUR <= 24):
            raise ValueError(
                f"Invalid working hours: DAY_START_HOUR={self.DAY_START_HOUR}, "
                f"DAY_END_HOUR={self.DAY_END_HOUR}"
            )
        if self.DEFAULT_SLOT_MINUTES <= 0:
            raise ValueError("DEFAULT_SLOT_MINUTES must be positive")

        # Derive SQLALCHEMY_DATABASE_URI if not provided
        if not self.SQLALCHEMY_DATABASE_URI:
            user = self.POSTGRES_USER
            server = self.POSTGRES_SERVER
            db = self.POSTGRES_DB
            if user and server and db:
                safe_user = quote_plus(user)
                if self.POSTGRES_PASSWORD:
                    safe_password = quote_plus(self.POSTGRES_PASSWORD)
                    self.SQLALCHEMY_DATABASE_URI = (
                        f"postgresql://{safe_user}:{safe_password}@{server}:{self.POSTGRES_PORT}/{db}"
                    )
                else:
                    self.SQLALCHEMY_DATABASE_URI = (
                        f"postgresql://{safe_user}@{server}:{self.POSTGRES_PORT}/{db}"
                    )
            else:
                # Local development without PostgreSQL
                self.SQLALCHEMY_DATABASE_URI = "sqlite:///./telecare.db"
        return self


settings = Settings()
