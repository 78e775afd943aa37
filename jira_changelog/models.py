"""Data models shared by the changelog collaborators."""

from pydantic import BaseModel, Field


class CommitLog(BaseModel):
    """A single commit read from source control."""

    revision: str
    full_name: str
    email: str
    date: str
    summary: str
    full_text: str
    tickets: list[str] = Field(default_factory=list)
    """Keys of the Jira tickets referenced by this commit."""


class Ticket(BaseModel):
    """A Jira ticket referenced by one or more commits."""

    key: str
    summary: str
    issue_type: str | None = None
    status: str | None = None
    url: str | None = None
    reporter: str | None = None
    assignee: str | None = None
    project: str | None = None
    fix_versions: list[str] = Field(default_factory=list)
    commits: list[CommitLog] = Field(default_factory=list)


class Changelog(BaseModel):
    """Commits of a run correlated with the tickets they reference."""

    commits: list[CommitLog] = Field(default_factory=list)
    tickets: list[Ticket] = Field(default_factory=list)
    no_tickets: list[CommitLog] = Field(default_factory=list)
