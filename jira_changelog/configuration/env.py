"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application.

    Values here only fill in what the configuration file leaves unset, so
    credentials can stay out of the repository.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Jira API settings
    JIRA_API_HOST: str | None = None
    JIRA_API_EMAIL: str | None = None
    JIRA_API_TOKEN: str | None = None

    # Slack webhook settings
    SLACK_WEBHOOK_URL: str | None = None
    SLACK_CHANNEL: str | None = None
