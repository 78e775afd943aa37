"""Generate a changelog from git commits enriched with Jira metadata."""

__version__ = "2.3.0"
