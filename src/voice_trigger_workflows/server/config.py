"""Configuration for the fulfillment server.

The server only needs to know where to listen, which origins may call it,
where static assets live, and which handler fulfills submitted actions.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HANDLER = "voice_trigger_workflows.server.handler:acknowledge"


class ServerSettings(BaseSettings):
    """Settings for the fulfillment HTTP surface."""

    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8080, validation_alias="PORT", ge=1, le=65535)

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    public_dir: Path = Field(
        default=Path("public"),
        validation_alias="FULFILLMENT_PUBLIC_DIR",
        description="Directory served under /public when it exists.",
    )

    # The desktop loads the widget from another origin, so the default is open.
    cors_origins: str = Field(
        default="*",
        validation_alias="FULFILLMENT_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    fulfillment_handler: str = Field(
        default=DEFAULT_HANDLER,
        validation_alias="FULFILLMENT_HANDLER",
        description="Handler for submitted actions, as 'package.module:function'.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
