from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator
from urllib.parse import quote_plus
from enum import Enum


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "Chanjo Chonjo"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"

    # CORS
    ALLOWED_ORIGINS: list[str] = ["http://localhost:5173"]

    # Database - PostgreSQL, or any SQLAlchemy URI via SQLALCHEMY_DATABASE_URI
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "chanjo"
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: str = "vaccination_tracker"
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # Security
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Reminder times are computed and stored as wall-clock time in this zone
    DEFAULT_TIMEZONE: str = "Africa/Nairobi"

    # Email Configuration
    SMTP_SERVER: Optional[str] = None  # SMTP server (e.g., smtp.gmail.com)
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    FROM_EMAIL: Optional[str] = None
    FROM_NAME: str = "Chanjo Chonjo"

    @model_validator(mode="after")
    def _finalize_and_validate(self) -> "Settings":
        # Derive SQLALCHEMY_DATABASE_URI if not provided
        if not self.SQLALCHEMY_DATABASE_URI:
            safe_user = quote_plus(self.POSTGRES_USER)
            server = f"{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            if self.POSTGRES_PASSWORD:
                safe_password = quote_plus(self.POSTGRES_PASSWORD)
                self.SQLALCHEMY_DATABASE_URI = f"postgresql://{safe_user}:{safe_password}@{server}"
            else:
                self.SQLALCHEMY_DATABASE_URI = f"postgresql://{safe_user}@{server}"

        # FROM_EMAIL falls back to the authenticated SMTP user
        if not self.FROM_EMAIL and self.SMTP_USERNAME:
            self.FROM_EMAIL = self.SMTP_USERNAME

        if self.ENVIRONMENT == Environment.PRODUCTION and self.SECRET_KEY == "change-me":
            raise ValueError("SECRET_KEY must be set in production")
        return self

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")


settings = Settings()
