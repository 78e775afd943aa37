"""Shared constants used across the application."""

# Slack Constants
# ---------------

MSG_SIZE_LIMIT = 4000
"""Maximum number of characters Slack accepts in a single message."""

CONTINUATION_MARKER = "..."
"""Marker placed at both sides of a line that had to be split mid-content."""

DEFAULT_SLACK_USERNAME = "Changelog notifier"
"""Username the webhook posts as when none is configured."""

DEFAULT_SLACK_FALLBACK_TEXT = "Changelog published"
"""Plain text shown in notifications for clients that cannot render blocks."""

# Range Constants
# ---------------

RANGE_SEPARATOR_PATTERN = r"\.{3}"
"""Separator between the two ends of a range, e.g. v1.0.0...v1.1.0."""

# Jira Constants
# --------------

DEFAULT_TICKET_ID_PATTERN = r"[A-Z][A-Z0-9]+-\d+"
"""Pattern matching Jira issue keys (e.g., PROJ-123) in commit messages."""

JIRA_API_PATH = "/rest/api/2"
"""Path of the Jira REST API relative to the host."""

# Configuration File Settings
# ---------------------------

CONFIG_FILE_NAMES = ("changelog.config.yml", "changelog.config.yaml")
"""File names searched for in the git workspace when no config path is given."""

DEFAULT_TEMPLATE_NAME = "changelog.j2"
"""Name of the template shipped with the package."""

# CLI Constants
# -------------

GENERATE_RELEASE_NAME = "__generate__"
"""Value given to --release when it is passed without a name."""
