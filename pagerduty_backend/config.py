"""Configuration management using Pydantic Settings."""

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


class PagerDutySettings(BaseModel):
    """PagerDuty API client configuration."""

    api_url: str = Field(
        default="https://api.pagerduty.com",
        description="PagerDuty REST API base URL",
    )
    api_timeout: int = Field(
        default=30,
        description="PagerDuty API timeout in seconds",
    )
    instance_name: str = Field(
        default="default",
        description="PagerDuty instance name (used in logs and metrics)",
    )
    page_size: int = Field(
        default=50,
        gt=0,
        description="Page size for paginated listings",
    )
    change_events_limit: int = Field(
        default=5,
        gt=0,
        description="Number of most recent change events returned per service",
    )
    metrics_window_days: int = Field(
        default=30,
        gt=0,
        description="Trailing window in days for service metrics",
    )


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PAGERDUTY_BACKEND_",
        env_nested_delimiter="__",
        json_file=".env.json",
        json_file_encoding="utf-8",
        yaml_file=".env.yaml",
        yaml_file_encoding="utf-8",
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
            file_secret_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            YamlConfigSettingsSource(settings_cls),
        )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format_json: bool = Field(
        default=True,
        description="Use JSON logging format (False for human-readable logs in development)",
    )
    log_exclude_loggers: str = Field(
        default="httpx,httpcore",
        description="Comma-separated list of logger names to exclude from DEBUG logging",
    )

    pagerduty: PagerDutySettings = Field(
        default_factory=PagerDutySettings,
        description="PagerDuty API configuration",
    )


settings = Settings()
