"""
Application configuration using pydantic-settings.
Values come from init kwargs, environment variables, a .env file and
finally the YAML config file (NOTIFIER_CONFIG, default config.yml).
"""

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from notifier.models.notification import MessageStyle

ALL_BRANCHES = "all"
DEFAULT_CONFIG_FILE = "config.yml"


def config_file_path() -> str:
    """Path of the YAML config file."""
    return os.getenv("NOTIFIER_CONFIG", DEFAULT_CONFIG_FILE)


class SlackSettings(BaseModel):
    """
    Global Slack settings.

    Per-status channels are extra keys named ``channel-<status>``,
    e.g. ``channel-error: "#alerts"``.
    """

    model_config = ConfigDict(extra="allow")

    webhook_url: str = ""
    username: str = "Codeship"
    channel: str | list[str] | None = None
    style: MessageStyle = MessageStyle.CURRENT

    def channel_settings(self) -> dict[str, Any]:
        """Settings as a plain mapping, as consumed by the channel resolver."""
        return self.model_dump(exclude={"style"})


class CodeshipSettings(BaseModel):
    """Codeship API credentials and polling tunables."""

    project_id: str = ""
    api_key: str = ""
    attempted_build_finds: int = 5
    not_found_interval: float = 3
    poll_interval: float = 10
    wait_timeout: int = 1500
    terminal_statuses: list[str] = ["success", "error"]

    @field_validator("project_id", mode="before")
    @classmethod
    def _stringify_project_id(cls, value: Any) -> str:
        return "" if value is None else str(value)


class Settings(BaseSettings):
    """Application settings."""

    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 9876
    log_dir: str | None = None
    log_level: str = "INFO"

    # Either a list of branch names or a mapping of branch -> slack overrides
    branches_to_handle: list[str] | dict[str, dict[str, Any] | None] = [ALL_BRANCHES]

    slack: SlackSettings = Field(default_factory=SlackSettings)
    codeship: CodeshipSettings = Field(default_factory=CodeshipSettings)

    @field_validator("branches_to_handle", mode="before")
    @classmethod
    def _wrap_single_branch(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @property
    def branch_filter(self) -> list[str]:
        """Names of the branches that trigger notifications."""
        return list(self.branches_to_handle)

    @property
    def branch_overrides(self) -> dict[str, dict[str, Any]]:
        """Per-branch slack overrides, empty when a plain list is configured."""
        if isinstance(self.branches_to_handle, list):
            return {}
        return {branch: dict(value or {}) for branch, value in self.branches_to_handle.items()}

    def handles_branch(self, branch: str | None) -> bool:
        """Check whether a build on ``branch`` passes the branch filter."""
        branches = self.branch_filter
        return ALL_BRANCHES in branches or branch in branches

    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), ".env"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=config_file_path()),
            file_secret_settings,
        )


# Singleton settings instance
settings = Settings()
