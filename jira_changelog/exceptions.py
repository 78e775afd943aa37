"""Exceptions raised while generating or delivering a changelog."""


class ChangelogError(Exception):
    """Base class for all changelog errors."""

    pass


class CollaboratorError(ChangelogError):
    """Raised when an external collaborator (git, Jira, templates) fails."""

    pass


class SourceControlError(CollaboratorError):
    """Raised when commit logs cannot be read from source control."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str | None = None) -> None:
        """Initializes the exception with the failing command's exit details."""
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class JiraError(CollaboratorError):
    """Raised when the Jira API rejects a request."""

    pass


class TemplateError(CollaboratorError):
    """Raised when the changelog template cannot be loaded or rendered."""

    pass


class DeliveryError(ChangelogError):
    """Raised when the changelog cannot be delivered to the chat channel."""

    pass
