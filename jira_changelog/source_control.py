"""Reads commit logs from a git workspace."""

import asyncio
from pathlib import Path

import structlog

from jira_changelog.configuration.models import ChangelogRange
from jira_changelog.exceptions import SourceControlError
from jira_changelog.models import CommitLog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"
LOG_FORMAT = FIELD_SEPARATOR.join(["%H", "%an", "%ae", "%aI", "%s", "%B"]) + RECORD_SEPARATOR


def build_log_arguments(changelog_range: ChangelogRange) -> list[str]:
    """Translate a range into `git log` arguments."""
    args = ["log", "--no-merges", f"--format={LOG_FORMAT}"]
    if changelog_range.after:
        args.append(f"--after={changelog_range.after}")
    if changelog_range.before:
        args.append(f"--before={changelog_range.before}")
    if changelog_range.from_ and changelog_range.to:
        args.append(f"{changelog_range.from_}...{changelog_range.to}")
    elif changelog_range.from_:
        args.append(f"{changelog_range.from_}...HEAD")
    elif changelog_range.to:
        args.append(changelog_range.to)
    return args


def parse_commit_logs(output: str) -> list[CommitLog]:
    """Parse the output of `git log` run with LOG_FORMAT."""
    commits: list[CommitLog] = []
    for record in output.split(RECORD_SEPARATOR):
        record = record.strip("\n")
        if not record:
            continue
        fields = record.split(FIELD_SEPARATOR)
        if len(fields) != 6:
            logger.warning("Skipping malformed git log record", record=record[:80])
            continue
        revision, full_name, email, date, summary, full_text = fields
        commits.append(
            CommitLog(
                revision=revision,
                full_name=full_name,
                email=email,
                date=date,
                summary=summary,
                full_text=full_text.strip(),
            )
        )
    return commits


class SourceControl:
    """Reads commit logs with the git command line client."""

    def __init__(self, git_executable: str = "git") -> None:
        """Initialize with the git executable to run."""
        self.git_executable = git_executable

    async def get_commit_logs(self, path: Path, changelog_range: ChangelogRange) -> list[CommitLog]:
        """Return the commits of the workspace at `path` that fall within the range."""
        args = build_log_arguments(changelog_range)
        logger.debug("Running git", cwd=str(path), args=args)
        try:
            process = await asyncio.create_subprocess_exec(
                self.git_executable,
                *args,
                cwd=path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise SourceControlError(f"Unable to run {self.git_executable}: {exc}") from exc

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            error = stderr.decode("utf-8", errors="replace").strip()
            raise SourceControlError(
                f"git log failed in {path}: {error}",
                returncode=process.returncode,
                stderr=error,
            )

        commits = parse_commit_logs(stdout.decode("utf-8", errors="replace"))
        logger.info("Read commit logs", count=len(commits), range=changelog_range.model_dump(exclude_none=True))
        return commits
