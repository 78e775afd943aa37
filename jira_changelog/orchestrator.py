"""Orchestrates a changelog run, from resolving the range to posting to Slack."""

import html
from typing import Any

import structlog
import typer

from jira_changelog.configuration.loader import load_config
from jira_changelog.configuration.models import ChangelogConfig, RunOptions
from jira_changelog.jira import Jira
from jira_changelog.range import resolve_range
from jira_changelog.slack import SlackWebhookTransport
from jira_changelog.source_control import SourceControl
from jira_changelog.utils.helpers import maybe_await
from jira_changelog.utils.templates import generate_template_data, render_template

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

RELEASE_NAME_GUIDANCE = (
    "You need to define jira.generate_release_version_name in your config, "
    "if you're not going to pass the release version name in the command."
)


async def run_changelog(options: RunOptions) -> None:
    """Run the changelog workflow: read commits, correlate with Jira, render, print and post.

    Errors up to printing the changelog propagate to the caller. Errors while
    posting to Slack are reported and swallowed, since the changelog has
    already been generated by then.
    """
    git_path = options.git_path.resolve()
    config = load_config(git_path, options.config_path)
    jira = Jira(config)
    source = SourceControl()

    # Release flag used, but no name passed
    release = options.release
    if release is True:
        if config.jira.generate_release_version_name is None:
            typer.echo(RELEASE_NAME_GUIDANCE)
            return
        release = await maybe_await(config.jira.generate_release_version_name())
        logger.info("Generated release version name", release=release)

    changelog_range = resolve_range(options.range, options.date_range, config.source_control.default_range)
    commit_logs = await source.get_commit_logs(git_path, changelog_range)
    changelog = await jira.generate(commit_logs, str(release) if release else None)

    data = await generate_template_data(config, changelog, jira.release_versions)
    changelog_message = render_template(config, data)
    typer.echo(html.unescape(changelog_message))

    if options.slack:
        await post_to_slack(config, data, changelog_message)


async def post_to_slack(config: ChangelogConfig, data: dict[str, Any], changelog_message: str) -> None:
    """Post the changelog to the configured Slack channel.

    The message is posted as rendered, with its HTML entities still escaped
    as Slack mrkdwn expects. Failures are logged and reported, never raised.
    """
    if not config.slack.enabled or not config.slack.channel:
        typer.echo("Error: Slack is not configured.", err=True)
        return

    typer.echo(f"\nPosting changelog message to slack channel: {config.slack.channel}...")
    try:
        if config.transform_for_slack is not None:
            changelog_message = await maybe_await(config.transform_for_slack(changelog_message, data))

        async with SlackWebhookTransport(config.slack) as transport:
            responses = await transport.post_message(changelog_message)
        logger.info("Posted changelog to Slack", channel=config.slack.channel, chunk_count=len(responses))
        typer.echo("Done")
    except Exception as exc:
        logger.error("Failed to post changelog to Slack", channel=config.slack.channel, error=str(exc), error_type=type(exc).__name__)
        typer.echo(f"Error: {exc}", err=True)
