"""
Shared configuration management for the registry submission service.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class TimeUnit(str, Enum):
    """Granularity of the submission rate window."""

    MILLISECONDS = "MILLISECONDS"
    SECONDS = "SECONDS"
    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"

    def to_seconds(self, amount: float = 1) -> float:
        """Convert ``amount`` of this unit to seconds."""
        return amount * _SECONDS_PER_UNIT[self]


_SECONDS_PER_UNIT = {
    TimeUnit.MILLISECONDS: 0.001,
    TimeUnit.SECONDS: 1.0,
    TimeUnit.MINUTES: 60.0,
    TimeUnit.HOURS: 3600.0,
    TimeUnit.DAYS: 86400.0,
}


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SUBMISSION_",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Service binding
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8020)


class SubmissionConfig(BaseConfig):
    """Settings consumed by the submission pipeline."""

    # Rate gate
    time_unit: TimeUnit = Field(default=TimeUnit.SECONDS)
    request_limit: int = Field(default=10, gt=0)

    # Registry transport
    base_url: str = Field(default="https://ismp.crpt.ru")
    introduce_goods_path: str = Field(default="/api/v3/lk/documents/create")
    auth_token: SecretStr = Field(default=SecretStr(""))
    request_timeout: float = Field(default=10.0, gt=0)

    # Envelope
    product_group: Optional[str] = Field(default=None)

    @property
    def interval_seconds(self) -> float:
        """Length of the rolling admission window."""
        return self.time_unit.to_seconds()


def get_config() -> SubmissionConfig:
    """Load the submission configuration from the environment."""
    return SubmissionConfig()
