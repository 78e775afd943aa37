"""Correlates commits with the Jira tickets they reference."""

import re
from typing import Any

import httpx
import structlog

from jira_changelog.configuration.models import ChangelogConfig
from jira_changelog.jira.client import JiraClient
from jira_changelog.models import Changelog, CommitLog, Ticket
from jira_changelog.utils.helpers import unique

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def ticket_from_issue(issue: dict[str, Any], browse_url: str | None) -> Ticket:
    """Build a Ticket from a Jira issue payload."""
    fields = issue.get("fields") or {}
    key = issue["key"]
    return Ticket(
        key=key,
        summary=fields.get("summary") or "",
        issue_type=(fields.get("issuetype") or {}).get("name"),
        status=(fields.get("status") or {}).get("name"),
        url=f"{browse_url}/browse/{key}" if browse_url else None,
        reporter=(fields.get("reporter") or {}).get("displayName"),
        assignee=(fields.get("assignee") or {}).get("displayName"),
        project=(fields.get("project") or {}).get("key") or key.split("-")[0],
        fix_versions=[version["name"] for version in fields.get("fixVersions") or []],
    )


class Jira:
    """Generates the ticket side of a changelog and assigns release versions."""

    def __init__(self, config: ChangelogConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize with the changelog configuration.

        Args:
            config: The loaded configuration; only the jira section is used.
            transport: Optional HTTP transport handed to the Jira client.
        """
        self.config = config.jira
        self.transport = transport
        self.ticket_pattern = re.compile(self.config.ticket_id_pattern)
        self.release_versions: list[str] = []

    def find_ticket_keys(self, commit: CommitLog) -> list[str]:
        """Find the ticket keys mentioned in a commit message."""
        text = commit.full_text or commit.summary
        return unique([match.group(0) for match in self.ticket_pattern.finditer(text)])

    def is_included(self, ticket: Ticket) -> bool:
        """Apply the configured issue type filters to a ticket."""
        if ticket.issue_type in self.config.exclude_issue_types:
            return False
        if self.config.include_issue_types and ticket.issue_type not in self.config.include_issue_types:
            return False
        return True

    async def generate(self, commit_logs: list[CommitLog], release: str | None = None) -> Changelog:
        """Correlate commit logs with Jira tickets.

        When a release name is given, it is assigned as a fix version to every
        ticket in the changelog, creating the version in Jira if needed.
        """
        self.release_versions = []
        commits = [commit.model_copy(update={"tickets": self.find_ticket_keys(commit)}) for commit in commit_logs]

        if not self.config.enabled:
            logger.info("Jira is not configured, listing commits without tickets", commit_count=len(commits))
            return Changelog(commits=commits, tickets=[], no_tickets=commits)

        tickets_by_key: dict[str, Ticket] = {}
        async with JiraClient.create(self.config.api, transport=self.transport) as client:
            for key in unique([key for commit in commits for key in commit.tickets]):
                issue = await client.get_issue(key)
                if issue is None:
                    continue
                ticket = ticket_from_issue(issue, self.config.browse_url)
                if not self.is_included(ticket):
                    logger.debug("Skipping ticket filtered by issue type", key=key, issue_type=ticket.issue_type)
                    continue
                tickets_by_key[key] = ticket

            no_tickets: list[CommitLog] = []
            for commit in commits:
                matched = [tickets_by_key[key] for key in commit.tickets if key in tickets_by_key]
                for ticket in matched:
                    ticket.commits.append(commit)
                if not matched:
                    no_tickets.append(commit)

            tickets = list(tickets_by_key.values())
            if release and tickets:
                await self.assign_release(client, tickets, release)

        logger.info(
            "Correlated commits with Jira",
            commit_count=len(commits),
            ticket_count=len(tickets),
            commits_without_tickets=len(no_tickets),
        )
        return Changelog(commits=commits, tickets=tickets, no_tickets=no_tickets)

    async def assign_release(self, client: JiraClient, tickets: list[Ticket], release: str) -> None:
        """Assign the release version to every ticket, creating it per project when missing."""
        for project in unique([ticket.project for ticket in tickets]):
            versions = await client.list_project_versions(project)
            if not any(version.get("name") == release for version in versions):
                await client.create_version(project, release)

        for ticket in tickets:
            if release in ticket.fix_versions:
                continue
            await client.add_fix_version(ticket.key, release)
            ticket.fix_versions.append(release)

        if release not in self.release_versions:
            self.release_versions.append(release)
        logger.info("Assigned release version", release=release, ticket_count=len(tickets))
