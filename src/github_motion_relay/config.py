"""Configuration for the relay.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The variable names match the ones the relay has always read, so an
existing `.env` keeps working.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MOTION_BASE_URL = "https://api.usemotion.com/v1"


class RelaySettings(BaseSettings):
    """Settings for the webhook relay.

    Environment variables:
    - MOTION_API_KEY
    - MOTION_WORKSPACE_ID
    - GITHUB_USER_ID          (the only sender login accepted)
    - MOTION_BASE_URL         (optional)
    - MOTION_TIMEOUT_SECONDS  (optional)
    - RELAY_STATE_PATH        (optional)
    - LOG_LEVEL               (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `RelaySettings(_env_file=path_to_env)`.
    """

    motion_api_key: str = Field(
        default="",
        validation_alias="MOTION_API_KEY",
        description="Motion API key sent with every request",
    )
    motion_workspace_id: str = Field(
        default="",
        validation_alias="MOTION_WORKSPACE_ID",
        description="Workspace that receives the projects and tasks",
    )
    allowed_sender: str = Field(
        default="",
        validation_alias="GITHUB_USER_ID",
        description="GitHub login whose events are relayed; everyone else is rejected",
    )
    motion_base_url: str = Field(
        default=DEFAULT_MOTION_BASE_URL,
        validation_alias="MOTION_BASE_URL",
        description="Motion REST API base URL",
    )
    motion_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="MOTION_TIMEOUT_SECONDS",
        description="Per-request timeout for Motion calls",
    )

    relay_state_path: Path = Field(
        default=Path("relay_state"),
        validation_alias="RELAY_STATE_PATH",
        description="Directory where the mapping documents are persisted",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _require_credentials(self) -> RelaySettings:
        required = {
            "MOTION_API_KEY": self.motion_api_key,
            "MOTION_WORKSPACE_ID": self.motion_workspace_id,
            "GITHUB_USER_ID": self.allowed_sender,
        }
        missing = [name for name, value in required.items() if not value.strip()]
        if missing:
            raise ValueError(f"{', '.join(missing)} is required")
        return self

    @property
    def mappings_path(self) -> Path:
        """Directory holding the repo, issue and workspace mapping documents."""

        return self.relay_state_path / "mappings"
