from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Tenant Invites"
    app_env: str = "development"  # development, testing, production
    debug: bool = False

    # Security
    log_user_emails: bool = False  # Set to False in production for GDPR compliance

    # Database
    database_url: str = "sqlite+aiosqlite:///./invitations.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_echo: bool = False

    # Hashing (passwords and invitation tokens)
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Email (Resend)
    resend_api_key: str | None = None  # If not set, emails are logged but not sent
    email_from: str = "noreply@example.com"
    email_send_timeout_seconds: int = 10  # Timeout for email API calls
    app_url: str = "http://localhost:4200"  # Frontend URL for set-password links

    # Invitations
    invitation_expiry_hours: int = 72

    @field_validator("invitation_expiry_hours")
    @classmethod
    def validate_invitation_expiry(cls, v: int) -> int:
        if v < 1:
            raise ValueError("INVITATION_EXPIRY_HOURS must be at least 1")
        return v

    @field_validator("app_url")
    @classmethod
    def validate_app_url(cls, v: str) -> str:
        """Links are embedded in emails; strip the trailing slash so paths join cleanly."""
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
