"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CONSUMER_DOMAINS = [
    "gmail.com", "googlemail.com",
    "yahoo.com", "yahoo.co.uk", "ymail.com",
    "outlook.com", "hotmail.com", "live.com", "msn.com",
    "icloud.com", "me.com", "mac.com",
    "aol.com",
    "proton.me", "protonmail.com",
    "gmx.com", "gmx.net",
    "mail.com", "zoho.com",
    "yandex.com", "yandex.ru",
    "qq.com", "163.com",
]


class Settings(BaseSettings):
    # Database (DATABASE_URL wins over the postgres_* parts)
    database_url: Optional[str] = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "jobplatform_user"
    postgres_password: str = "password"
    postgres_db: str = "jobplatform_db"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Company email verification
    verification_ttl_hours: int = 24
    consumer_domains: List[str] = DEFAULT_CONSUMER_DOMAINS
    extra_consumer_domains: List[str] = []
    # "declared" = name typed by the user, "derived" = name taken from the email domain
    company_name_policy: Literal["declared", "derived"] = "declared"

    # SMTP (verification emails)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_from: str = "no-reply@localhost"
    smtp_from_name: str = "Job Platform"
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = 10.0

    # App
    app_base_url: str = "http://localhost:8000"
    debug: bool = True
    log_level: str = "INFO"

    @property
    def sqlalchemy_url(self) -> str:
        """Connection URL for SQLAlchemy"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def blocked_domains(self) -> List[str]:
        """Full consumer block-list (defaults + extras)."""
        return list(self.consumer_domains) + list(self.extra_consumer_domains)

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
