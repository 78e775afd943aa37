"""Minimal asynchronous client for the Jira REST API."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import httpx
import structlog

from jira_changelog.configuration.models import JiraApiConfig
from jira_changelog.exceptions import JiraError
from jira_changelog.utils.constants import JIRA_API_PATH

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_jira_errors(func: F) -> F:
    """Decorator to turn HTTP failures into JiraError, logging the response details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except httpx.HTTPStatusError as exc:
            try:
                error_data = exc.response.json()
            except ValueError:
                error_data = {}
            messages = error_data.get("errorMessages") or []
            errors = error_data.get("errors") or {}
            logger.error(
                "Jira API request failed",
                function=func.__name__,
                status_code=exc.response.status_code,
                url=str(exc.request.url),
                messages=messages,
                errors=errors,
            )
            raise JiraError(
                f"Jira {exc.response.status_code} error in {func.__name__}: {messages or exc.response.reason_phrase} | errors: {errors}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Jira API unreachable", function=func.__name__, error=str(exc))
            raise JiraError(f"Jira request failed in {func.__name__}: {exc}") from exc

    return wrapper  # type: ignore


class JiraClient:
    """Thin wrapper around the Jira REST API endpoints the changelog needs."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        """Initialize with an already-configured HTTP client."""
        self.client = client

    @classmethod
    def create(cls, api: JiraApiConfig, transport: httpx.AsyncBaseTransport | None = None) -> Self:
        """Create a client for the configured Jira host.

        Args:
            api: Jira API host and credentials.
            transport: Optional transport, mainly for tests.
        """
        if not api.host:
            raise JiraError("Jira API host is not configured.")
        host = api.host if api.host.startswith("http") else f"https://{api.host}"
        auth = httpx.BasicAuth(api.email, api.token) if api.email and api.token else None
        logger.info("Creating Jira client", host=host, authenticated=auth is not None)
        client = httpx.AsyncClient(
            base_url=host.rstrip("/") + JIRA_API_PATH,
            auth=auth,
            headers={"Accept": "application/json"},
            transport=transport,
        )
        return cls(client)

    async def __aenter__(self) -> Self:
        """Enter the async context."""
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        """Close the underlying HTTP client."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    @handle_jira_errors
    async def get_issue(self, key: str) -> dict[str, Any] | None:
        """Fetch an issue by key, or None when it does not exist."""
        response = await self.client.get(f"/issue/{key}")
        if response.status_code == 404:
            logger.warning("Jira ticket not found", key=key)
            return None
        response.raise_for_status()
        return response.json()  # type: ignore[no-any-return]

    @handle_jira_errors
    async def list_project_versions(self, project_key: str) -> list[dict[str, Any]]:
        """List the versions of a project."""
        response = await self.client.get(f"/project/{project_key}/versions")
        response.raise_for_status()
        return response.json()  # type: ignore[no-any-return]

    @handle_jira_errors
    async def create_version(self, project_key: str, name: str) -> dict[str, Any]:
        """Create a version in a project."""
        response = await self.client.post("/version", json={"name": name, "project": project_key})
        response.raise_for_status()
        logger.info("Created Jira version", project=project_key, version=name)
        return response.json()  # type: ignore[no-any-return]

    @handle_jira_errors
    async def add_fix_version(self, key: str, version_name: str) -> None:
        """Add a fix version to an issue."""
        response = await self.client.put(
            f"/issue/{key}",
            json={"update": {"fixVersions": [{"add": {"name": version_name}}]}},
        )
        response.raise_for_status()
        logger.debug("Assigned fix version", key=key, version=version_name)
