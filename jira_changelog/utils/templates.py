"""Contains utilities for building and rendering the changelog Jinja2 template."""

from pathlib import Path
from typing import Any

import jinja2
import structlog

from jira_changelog.configuration.models import ChangelogConfig
from jira_changelog.exceptions import TemplateError
from jira_changelog.models import Changelog
from jira_changelog.utils.constants import DEFAULT_TEMPLATE_NAME
from jira_changelog.utils.helpers import maybe_await

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

DEFAULT_TEMPLATE_PATH = Path(__file__).parent.parent / "templates" / DEFAULT_TEMPLATE_NAME


def construct_jinja2_environment() -> jinja2.Environment:
    """Construct a Jinja2 environment."""
    jinja_env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    return jinja_env


def construct_jinja2_template_from_file(template_path: Path | str, environment: jinja2.Environment | None = None) -> jinja2.Template:
    """Construct a Jinja2 template from a file."""
    if environment is None:
        environment = construct_jinja2_environment()
    try:
        with open(template_path, encoding="utf-8") as f:
            template_content = f.read()
    except FileNotFoundError as exc:
        logger.error("Jinja2 template not found", template_path=str(template_path))
        raise TemplateError(f"Template not found: {template_path}") from exc
    try:
        return environment.from_string(template_content)
    except jinja2.TemplateSyntaxError as exc:
        raise TemplateError(f"Invalid template {template_path}, line {exc.lineno}: {exc.message}") from exc


async def generate_template_data(config: ChangelogConfig, changelog: Changelog, release_versions: list[str]) -> dict[str, Any]:
    """Build the data the changelog template is rendered with.

    Tickets are grouped by issue type in first-seen order. When a
    `transform_data` hook is configured, its result replaces the data.
    """
    tickets = [ticket.model_dump() for ticket in changelog.tickets]
    tickets_by_type: dict[str, list[dict[str, Any]]] = {}
    for ticket in tickets:
        tickets_by_type.setdefault(ticket["issue_type"] or "Other", []).append(ticket)

    data: dict[str, Any] = {
        "commits": [commit.model_dump() for commit in changelog.commits],
        "no_tickets": [commit.model_dump() for commit in changelog.no_tickets],
        "tickets": tickets,
        "tickets_by_type": tickets_by_type,
        "release_versions": list(release_versions),
        "jira_base_url": config.jira.browse_url,
    }

    if config.transform_data is not None:
        logger.debug("Applying transform_data hook")
        data = await maybe_await(config.transform_data(data))
    return data


def render_template(config: ChangelogConfig, data: dict[str, Any]) -> str:
    """Render the configured template, or the default one, against the data."""
    template_path = config.template_path or DEFAULT_TEMPLATE_PATH
    template = construct_jinja2_template_from_file(template_path)
    try:
        rendered_template = template.render(data)
    except jinja2.UndefinedError as exc:
        logger.error("Failed to render changelog template", template_path=str(template_path), error=str(exc))
        raise TemplateError(f"Failed to render template {template_path}: {exc}") from exc
    return rendered_template
