"""Core configuration for the trigger widget."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WidgetConfig(BaseSettings):
    """Runtime settings for the trigger widget and its submissions."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Log this package at DEBUG regardless of log_level",
    )

    darkmode: str | None = Field(
        default=None,
        description="Host darkmode flag; the string 'true' selects the dark theme",
    )

    submission_timeout_seconds: float = Field(
        default=6.0,
        gt=0.0,
        description="Hard timeout for one submission round trip",
    )
    max_callback_days: int = Field(
        default=30,
        ge=1,
        description="How far ahead a datetime field may be set, in days",
    )
    fulfillment_base_url: str = Field(
        default="",
        description="Base URL used to resolve relative action URLs",
    )
    notify_transport_failures: bool = Field(
        default=False,
        description=(
            "Also report timeouts and network errors to the notifier. "
            "When false these are only logged."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="VTW_",
        env_file=".env",
        extra="ignore",
    )
