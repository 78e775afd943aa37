"""Contains exceptions raised when loading configuration."""

from jira_changelog.exceptions import ChangelogError


class ConfigError(ChangelogError):
    """Raised when the configuration cannot be loaded or yields no usable range."""

    pass

