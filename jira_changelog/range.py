"""Resolves the range of commits a changelog run covers."""

import re

import structlog

from jira_changelog.configuration.exceptions import ConfigError
from jira_changelog.configuration.models import ChangelogRange
from jira_changelog.utils.constants import RANGE_SEPARATOR_PATTERN

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def parse_range(range_str: str) -> list[str]:
    """Split a range string formatted as "a...b" into its tokens."""
    return re.split(RANGE_SEPARATOR_PATTERN, range_str)


def resolve_range(
    cli_range: list[str] | None,
    cli_date_range: list[str] | None,
    default_range: ChangelogRange | None,
) -> ChangelogRange:
    """Build the range for a run from the command line and the configured default.

    A commit range given on the command line wins over a date range, and
    either wins over the configured default.

    Args:
        cli_range: Tokens of a ``from...to`` range, as returned by parse_range.
        cli_date_range: One or two date tokens.
        default_range: The range from the configuration file.

    Raises:
        ConfigError: If the commit range is malformed or no range is defined.

    Returns:
        ChangelogRange: The resolved range.
    """
    if cli_range:
        tokens = [token.strip() for token in cli_range]
        if len(tokens) != 2 or not all(tokens):
            raise ConfigError(f"Invalid range '{'...'.join(cli_range)}', expected <from>...<to>")
        resolved = ChangelogRange(from_=tokens[0], to=tokens[1])
    elif cli_date_range:
        if len(cli_date_range) > 2:
            raise ConfigError(f"Invalid date range '{'...'.join(cli_date_range)}', expected <date>[...date]")
        after = cli_date_range[0].strip()
        before = cli_date_range[1].strip() if len(cli_date_range) > 1 else ""
        resolved = ChangelogRange(after=after or None, before=before or None)
    elif default_range is not None:
        resolved = default_range.model_copy()
    else:
        resolved = ChangelogRange()

    if resolved.is_empty():
        raise ConfigError("No range defined for the changelog.")

    logger.debug("Resolved changelog range", range=resolved.model_dump(exclude_none=True))
    return resolved
