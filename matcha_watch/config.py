from functools import lru_cache
from typing import List, Literal
from urllib.parse import urlsplit

from pydantic import PositiveInt, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from matcha_watch.errors import ConfigurationError


def split_keywords(raw: str) -> List[str]:
    """Split a comma-separated keyword list into lower-cased, non-empty items."""
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
    )

    # Job
    job_interval_minutes: PositiveInt
    products_url: str
    extraction_mode: Literal["detail", "listing"] = "detail"
    fetch_timeout_seconds: float = 30

    # Keywords (comma-separated)
    matcha_brands: str
    matcha_variants: str = "matcha"
    matcha_ingredients: str = "matcha,green tea powder"

    # SMTP
    smtp_url: str
    smtp_port: int = 465
    smtp_user: str
    smtp_password: str
    smtp_sender: str
    smtp_recipient: str
    smtp_notification_subject: str

    # Failure handling
    failure_policy: Literal["abort", "retry"] = "abort"
    max_consecutive_failures: PositiveInt = 3

    # Notified-product store
    dedup_enabled: bool = False
    database_url: str = "sqlite:///./matcha_watch.db"

    log_level: str = "INFO"

    @field_validator("products_url")
    @classmethod
    def _check_products_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError("must be an absolute http(s) URL")
        return value

    @property
    def brand_keywords(self) -> List[str]:
        return split_keywords(self.matcha_brands)

    @property
    def variant_keywords(self) -> List[str]:
        return split_keywords(self.matcha_variants)

    @property
    def ingredient_keywords(self) -> List[str]:
        return split_keywords(self.matcha_ingredients)

    @property
    def interval_seconds(self) -> int:
        return self.job_interval_minutes * 60

    @property
    def base_url(self) -> str:
        """Scheme and host of the listing page, used to resolve detail links."""
        parts = urlsplit(self.products_url)
        return f"{parts.scheme}://{parts.netloc}"


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, failing with ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            name = ".".join(str(part) for part in error["loc"]) or "settings"
            problems.append(f"{name.upper()}: {error['msg']}")
        raise ConfigurationError("; ".join(problems)) from e


@lru_cache
def get_settings() -> Settings:
    return load_settings()
