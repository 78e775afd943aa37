"""Loads the changelog configuration for a git workspace."""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import structlog
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from jira_changelog.configuration.env import Settings
from jira_changelog.configuration.exceptions import ConfigError
from jira_changelog.configuration.models import ChangelogConfig
from jira_changelog.utils.constants import CONFIG_FILE_NAMES

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

yaml = YAML(typ="safe")


def find_config_file(git_path: Path, config_path: Path | None = None) -> Path | None:
    """Find the configuration file for a workspace.

    An explicit path must exist. Otherwise the workspace root is searched for
    one of the default file names, and None is returned when there is none.
    """
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path.absolute()}")
        return config_path

    for name in CONFIG_FILE_NAMES:
        candidate = git_path / name
        if candidate.is_file():
            return candidate
    return None


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML configuration file into a dictionary."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.load(f)
    except (OSError, YAMLError) as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return data


def apply_environment(data: dict[str, Any], settings: Settings) -> dict[str, Any]:
    """Fill in Jira and Slack settings missing from the file with environment values."""
    jira = data["jira"] = data.get("jira") or {}
    jira_api = jira["api"] = jira.get("api") or {}
    for key, value in (("host", settings.JIRA_API_HOST), ("email", settings.JIRA_API_EMAIL), ("token", settings.JIRA_API_TOKEN)):
        if value and not jira_api.get(key):
            jira_api[key] = value

    slack = data["slack"] = data.get("slack") or {}
    for key, value in (("webhook_url", settings.SLACK_WEBHOOK_URL), ("channel", settings.SLACK_CHANNEL)):
        if value and not slack.get(key):
            slack[key] = value
    return data


@contextmanager
def importable_from(directory: Path | None) -> Iterator[None]:
    """Allow hooks defined next to the config file to be imported."""
    if directory is None or str(directory) in sys.path:
        yield
        return
    sys.path.insert(0, str(directory))
    try:
        yield
    finally:
        sys.path.remove(str(directory))


def load_config(git_path: Path, config_path: Path | None = None) -> ChangelogConfig:
    """Load and validate the configuration for a git workspace.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid, or a
            configured hook cannot be imported.
    """
    path = find_config_file(git_path, config_path)
    if path is None:
        logger.debug("No config file found, using defaults", git_path=str(git_path))
        data: dict[str, Any] = {}
        config_dir = git_path
    else:
        logger.debug("Loading config file", path=str(path))
        data = load_yaml_config(path)
        config_dir = path.parent.absolute()

    data = apply_environment(data, Settings())
    data["config_dir"] = config_dir

    with importable_from(config_dir):
        try:
            config = ChangelogConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    logger.debug(
        "Loaded configuration",
        jira_enabled=config.jira.enabled,
        slack_enabled=config.slack.enabled,
        default_range=config.source_control.default_range.model_dump(exclude_none=True),
    )
    return config
