"""Unit tests for correlating commits with Jira tickets."""

import json
from typing import Any

import httpx
import pytest

from jira_changelog.configuration.models import ChangelogConfig, JiraApiConfig, JiraConfig
from jira_changelog.exceptions import JiraError
from jira_changelog.jira import Jira
from jira_changelog.jira.changelog import ticket_from_issue
from jira_changelog.models import CommitLog


def make_commit(revision: str, message: str) -> CommitLog:
    """Build a commit log with the given message."""
    return CommitLog(
        revision=revision,
        full_name="Ada Lovelace",
        email="ada@example.com",
        date="2024-01-02T10:00:00+00:00",
        summary=message.splitlines()[0],
        full_text=message,
    )


def make_issue(key: str, issue_type: str = "Story", fix_versions: list[str] | None = None) -> dict[str, Any]:
    """Build a Jira issue payload."""
    return {
        "key": key,
        "fields": {
            "summary": f"Summary of {key}",
            "issuetype": {"name": issue_type},
            "status": {"name": "Done"},
            "project": {"key": key.split("-")[0]},
            "reporter": {"displayName": "Grace Hopper"},
            "assignee": None,
            "fixVersions": [{"name": name} for name in fix_versions or []],
        },
    }


class FakeJira:
    """In-memory Jira API served through httpx.MockTransport."""

    def __init__(self, issues: dict[str, dict[str, Any]], versions: list[str] | None = None) -> None:
        self.issues = issues
        self.versions = versions or []
        self.requests: list[tuple[str, str]] = []
        self.created_versions: list[dict[str, Any]] = []
        self.updates: dict[str, Any] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/rest/api/2")
        self.requests.append((request.method, path))
        if request.method == "GET" and path.startswith("/issue/"):
            key = path.split("/")[-1]
            if key not in self.issues:
                return httpx.Response(404, json={"errorMessages": ["Issue does not exist"]})
            return httpx.Response(200, json=self.issues[key])
        if request.method == "GET" and path.endswith("/versions"):
            return httpx.Response(200, json=[{"name": name} for name in self.versions])
        if request.method == "POST" and path == "/version":
            body = json.loads(request.content)
            self.created_versions.append(body)
            return httpx.Response(201, json=body)
        if request.method == "PUT" and path.startswith("/issue/"):
            self.updates[path.split("/")[-1]] = json.loads(request.content)
            return httpx.Response(204)
        return httpx.Response(500, json={"errorMessages": ["unexpected request"]})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def jira_config(**kwargs: Any) -> ChangelogConfig:
    """Build a config with Jira enabled."""
    return ChangelogConfig(jira=JiraConfig(api=JiraApiConfig(host="example.atlassian.net", email="a@b", token="t"), **kwargs))


def test_find_ticket_keys() -> None:
    """Ticket keys are found anywhere in the message, once each."""
    jira = Jira(ChangelogConfig())
    commit = make_commit("a", "PROJ-1 Fix parser\n\nAlso touches PROJ-22 and PROJ-1")
    assert jira.find_ticket_keys(commit) == ["PROJ-1", "PROJ-22"]


def test_ticket_from_issue() -> None:
    """Issue payloads map onto tickets with browse links."""
    ticket = ticket_from_issue(make_issue("PROJ-1", fix_versions=["v1"]), "https://example.atlassian.net")
    assert ticket.key == "PROJ-1"
    assert ticket.issue_type == "Story"
    assert ticket.status == "Done"
    assert ticket.assignee is None
    assert ticket.project == "PROJ"
    assert ticket.fix_versions == ["v1"]
    assert ticket.url == "https://example.atlassian.net/browse/PROJ-1"


@pytest.mark.asyncio
async def test_generate_without_jira_host() -> None:
    """Without Jira configured, all commits are listed without tickets."""
    commits = [make_commit("a", "PROJ-1 Fix"), make_commit("b", "Tidy")]
    changelog = await Jira(ChangelogConfig()).generate(commits)
    assert changelog.tickets == []
    assert [commit.revision for commit in changelog.no_tickets] == ["a", "b"]
    assert changelog.commits[0].tickets == ["PROJ-1"]


@pytest.mark.asyncio
async def test_generate_correlates_commits_and_tickets() -> None:
    """Commits are attached to the tickets they reference."""
    fake = FakeJira({"PROJ-1": make_issue("PROJ-1"), "PROJ-2": make_issue("PROJ-2", "Bug")})
    commits = [
        make_commit("a", "PROJ-1 Fix parser"),
        make_commit("b", "PROJ-1 PROJ-2 Follow up"),
        make_commit("c", "Tidy up"),
        make_commit("d", "PROJ-404 Unknown ticket"),
    ]

    changelog = await Jira(jira_config(), transport=fake.transport()).generate(commits)

    assert [ticket.key for ticket in changelog.tickets] == ["PROJ-1", "PROJ-2"]
    assert [commit.revision for commit in changelog.tickets[0].commits] == ["a", "b"]
    assert [commit.revision for commit in changelog.tickets[1].commits] == ["b"]
    assert [commit.revision for commit in changelog.no_tickets] == ["c", "d"]
    issue_requests = [path for method, path in fake.requests if method == "GET"]
    assert issue_requests == ["/issue/PROJ-1", "/issue/PROJ-2", "/issue/PROJ-404"]


@pytest.mark.asyncio
async def test_generate_filters_issue_types() -> None:
    """Excluded issue types are dropped from the changelog."""
    fake = FakeJira({"PROJ-1": make_issue("PROJ-1"), "PROJ-2": make_issue("PROJ-2", "Sub-task")})
    commits = [make_commit("a", "PROJ-1 Fix"), make_commit("b", "PROJ-2 Subtask")]

    changelog = await Jira(jira_config(exclude_issue_types=["Sub-task"]), transport=fake.transport()).generate(commits)

    assert [ticket.key for ticket in changelog.tickets] == ["PROJ-1"]
    assert [commit.revision for commit in changelog.no_tickets] == ["b"]


@pytest.mark.asyncio
async def test_generate_include_issue_types() -> None:
    """With an include list, other issue types are dropped."""
    fake = FakeJira({"PROJ-1": make_issue("PROJ-1"), "PROJ-2": make_issue("PROJ-2", "Bug")})
    commits = [make_commit("a", "PROJ-1 Fix"), make_commit("b", "PROJ-2 Bug")]

    changelog = await Jira(jira_config(include_issue_types=["Bug"]), transport=fake.transport()).generate(commits)

    assert [ticket.key for ticket in changelog.tickets] == ["PROJ-2"]


@pytest.mark.asyncio
async def test_generate_assigns_release() -> None:
    """A release name is created when missing and added to each ticket."""
    fake = FakeJira({"PROJ-1": make_issue("PROJ-1"), "PROJ-2": make_issue("PROJ-2", fix_versions=["v2.0.0"])})
    commits = [make_commit("a", "PROJ-1 Fix"), make_commit("b", "PROJ-2 Feature")]
    jira = Jira(jira_config(), transport=fake.transport())

    changelog = await jira.generate(commits, "v2.0.0")

    assert fake.created_versions == [{"name": "v2.0.0", "project": "PROJ"}]
    assert list(fake.updates) == ["PROJ-1"]
    assert fake.updates["PROJ-1"] == {"update": {"fixVersions": [{"add": {"name": "v2.0.0"}}]}}
    assert all("v2.0.0" in ticket.fix_versions for ticket in changelog.tickets)
    assert jira.release_versions == ["v2.0.0"]


@pytest.mark.asyncio
async def test_generate_reuses_existing_release() -> None:
    """An existing version is not created again."""
    fake = FakeJira({"PROJ-1": make_issue("PROJ-1")}, versions=["v2.0.0"])
    jira = Jira(jira_config(), transport=fake.transport())

    await jira.generate([make_commit("a", "PROJ-1 Fix")], "v2.0.0")

    assert fake.created_versions == []
    assert "PROJ-1" in fake.updates


@pytest.mark.asyncio
async def test_generate_raises_on_jira_error() -> None:
    """Jira server errors are raised as JiraError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"errorMessages": ["Unauthorized"]})

    with pytest.raises(JiraError, match="Unauthorized"):
        await Jira(jira_config(), transport=httpx.MockTransport(handler)).generate([make_commit("a", "PROJ-1 Fix")])
