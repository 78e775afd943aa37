"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import logging
import sys
from pathlib import Path

import structlog
import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from jira_changelog import __version__
from jira_changelog.configuration.models import RunOptions
from jira_changelog.orchestrator import run_changelog
from jira_changelog.range import parse_range
from jira_changelog.utils.constants import GENERATE_RELEASE_NAME

load_dotenv()

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

typer_app = typer.Typer(pretty_exceptions_show_locals=False, add_completion=False)


def configure_logging(debug: bool) -> None:
    """Send log events to stderr so stdout only carries the changelog."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def normalize_release_flag(args: list[str]) -> list[str]:
    """Give a bare --release flag a placeholder value.

    --release may be passed with a release name or on its own, in which case
    the name is generated by the configured hook.
    """
    normalized: list[str] = []
    for index, arg in enumerate(args):
        if arg == "--release":
            following = args[index + 1] if index + 1 < len(args) else None
            if following is None or following.startswith("-"):
                normalized.append(f"--release={GENERATE_RELEASE_NAME}")
                continue
        normalized.append(arg)
    return normalized


def version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        typer.echo(f"jira-changelog {__version__}")
        raise typer.Exit()


@typer_app.command(name="jira-changelog")
def changelog_cli(
    git_path: Annotated[Path, Argument(help="Path to the git workspace.")] = Path("."),
    config: Annotated[Path | None, Option("--config", "-c", envvar="CHANGELOG_CONFIG", help="Path to the config file.")] = None,
    commit_range: Annotated[str | None, Option("--range", "-r", help="git commit range for changelog, as <from>...<to>.")] = None,
    date: Annotated[str | None, Option("--date", "-d", help="Only include commits after this date, as <date>[...date].")] = None,
    slack: Annotated[bool, Option("--slack", "-s", help="Automatically post changelog to slack (if configured).")] = False,
    release: Annotated[
        str | None,
        Option("--release", help="Assign a release version to these stories. Without a name, one is generated by the config hook."),
    ] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
    version: Annotated[bool | None, Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit.")] = None,
) -> None:
    """Generate a changelog from git commits and Jira tickets."""
    configure_logging(debug)

    options = RunOptions(
        git_path=git_path,
        config_path=config,
        range=parse_range(commit_range) if commit_range else None,
        date_range=parse_range(date) if date else None,
        slack=slack,
        release=True if release == GENERATE_RELEASE_NAME else release,
        debug=debug,
    )
    try:
        asyncio.run(run_changelog(options))
    except Exception as exc:
        logger.exception("Changelog generation failed", error_type=type(exc).__name__)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


def main() -> None:
    """Console script entry point."""
    typer_app(args=normalize_release_flag(sys.argv[1:]), prog_name="jira-changelog")


if __name__ == "__main__":
    main()
