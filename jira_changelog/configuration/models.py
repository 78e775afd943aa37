"""Models for the changelog configuration and the options of a single run."""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ImportString, field_validator

from jira_changelog.utils.constants import DEFAULT_SLACK_USERNAME, DEFAULT_TICKET_ID_PATTERN

Hook = ImportString[Callable[..., Any]]


class ChangelogRange(BaseModel):
    """Commit selection criteria, either by revision bounds or by date bounds."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str | None = Field(default=None, alias="from")
    to: str | None = None
    after: str | None = None
    before: str | None = None

    @field_validator("from_", "to", "after", "before", mode="before")
    @classmethod
    def coerce_to_string(cls, value: Any) -> Any:
        """YAML parses bare dates and numeric tags, git only wants strings."""
        if isinstance(value, (date, int, float)):
            return str(value)
        return value

    def is_empty(self) -> bool:
        """Whether no selection criterion has been set."""
        return not any((self.from_, self.to, self.after, self.before))


class SourceControlConfig(BaseModel):
    """Source control settings."""

    model_config = ConfigDict(frozen=True)

    default_range: ChangelogRange = ChangelogRange()


class JiraApiConfig(BaseModel):
    """Connection settings for the Jira REST API."""

    model_config = ConfigDict(frozen=True)

    host: str | None = None
    email: str | None = None
    token: str | None = None


class JiraConfig(BaseModel):
    """Jira settings."""

    model_config = ConfigDict(frozen=True)

    api: JiraApiConfig = JiraApiConfig()
    base_url: str | None = None
    ticket_id_pattern: str = DEFAULT_TICKET_ID_PATTERN
    exclude_issue_types: list[str] = Field(default_factory=list)
    include_issue_types: list[str] = Field(default_factory=list)
    generate_release_version_name: Hook | None = None

    @property
    def enabled(self) -> bool:
        """Jira is only queried when an API host is configured."""
        return bool(self.api.host)

    @property
    def browse_url(self) -> str | None:
        """Base URL used to link tickets in the changelog."""
        if self.base_url:
            return self.base_url.rstrip("/")
        if self.api.host:
            return f"https://{self.api.host}"
        return None


class SlackConfig(BaseModel):
    """Slack incoming webhook settings."""

    model_config = ConfigDict(frozen=True)

    webhook_url: str | None = None
    channel: str | None = None
    username: str = DEFAULT_SLACK_USERNAME

    @property
    def enabled(self) -> bool:
        """Slack is enabled when a webhook URL is set."""
        return bool(self.webhook_url)


class ChangelogConfig(BaseModel):
    """Resolved configuration for a changelog run."""

    model_config = ConfigDict(frozen=True)

    source_control: SourceControlConfig = SourceControlConfig()
    jira: JiraConfig = JiraConfig()
    slack: SlackConfig = SlackConfig()
    template: Path | None = None
    transform_data: Hook | None = None
    transform_for_slack: Hook | None = None
    config_dir: Path | None = None

    @property
    def template_path(self) -> Path | None:
        """Absolute path of the configured template, if any."""
        if self.template is None:
            return None
        if self.template.is_absolute() or self.config_dir is None:
            return self.template
        return self.config_dir / self.template


@dataclass(frozen=True)
class RunOptions:
    """Options of a single changelog run, built once from the command line."""

    git_path: Path
    config_path: Path | None = None
    range: list[str] | None = None
    date_range: list[str] | None = None
    slack: bool = False
    release: bool | str | None = None
    debug: bool = False
