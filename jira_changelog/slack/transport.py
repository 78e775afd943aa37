"""Posts messages to a Slack incoming webhook."""

import json
from typing import Any, Self

import httpx
import structlog

from jira_changelog.configuration.models import SlackConfig
from jira_changelog.exceptions import DeliveryError
from jira_changelog.slack.chunker import split_message
from jira_changelog.slack.dispatcher import dispatch_all
from jira_changelog.slack.models import ChunkResponse
from jira_changelog.utils.constants import DEFAULT_SLACK_FALLBACK_TEXT, MSG_SIZE_LIMIT

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def build_message_body(text: str, username: str, channel: str | None = None) -> dict[str, Any]:
    """Build the webhook payload for one chunk, rendered as a mrkdwn section."""
    body: dict[str, Any] = {
        "username": username,
        "text": DEFAULT_SLACK_FALLBACK_TEXT,
        "blocks": [
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": text,
                },
            }
        ],
    }
    if channel:
        body["channel"] = channel
    return body


def parse_webhook_response(response: httpx.Response) -> ChunkResponse:
    """Interpret a webhook response.

    Slack answers a successful post with the plain text "ok"; APIs that
    answer in JSON must carry ``"ok": true``. Anything else is a rejection,
    even on a 2xx status.
    """
    body = response.text.strip()
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        ok = response.is_success and payload.get("ok") is True and not payload.get("error")
        error = payload.get("error")
    else:
        ok = response.is_success and body == "ok"
        error = None if ok else body or None

    if not ok and error is None:
        error = f"Slack webhook responded {response.status_code} {response.reason_phrase} without an ok acknowledgment"
    return ChunkResponse(ok=ok, status_code=response.status_code, error=error)


class SlackWebhookTransport:
    """Manages posting to a Slack incoming webhook."""

    def __init__(
        self,
        config: SlackConfig,
        limit: int = MSG_SIZE_LIMIT,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize with the Slack settings.

        Args:
            config: Webhook URL, channel and username.
            limit: Maximum size of a single message.
            http_transport: Optional HTTP transport, mainly for tests.
        """
        self.config = config
        self.limit = limit
        self.client = httpx.AsyncClient(timeout=httpx.Timeout(10.0), transport=http_transport)

    async def __aenter__(self) -> Self:
        """Enter the async context."""
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    def is_enabled(self) -> bool:
        """Is the Slack integration enabled."""
        return self.config.enabled

    async def post_chunk(self, text: str) -> ChunkResponse:
        """Post a single message chunk to the webhook URL.

        Raises:
            DeliveryError: If Slack is not configured or the request fails.
        """
        if not self.is_enabled():
            raise DeliveryError("The slack API is not configured.")

        body = build_message_body(text, self.config.username, self.config.channel)
        try:
            response = await self.client.post(str(self.config.webhook_url), json=body)
        except httpx.HTTPError as exc:
            raise DeliveryError(f"Failed to post to Slack: {exc}") from exc
        return parse_webhook_response(response)

    async def post_message(self, text: str) -> list[ChunkResponse]:
        """Post a message, cut into several messages when it is longer than the limit.

        Raises:
            DeliveryError: If there is no text, or a chunk is not accepted.
        """
        if not text:
            raise DeliveryError("No text to send to slack.")

        if not self.is_enabled():
            logger.warning("Slack is not enabled, nothing posted")
            return []

        chunks = split_message(text, self.limit)
        logger.info("Posting message to Slack", chunk_count=len(chunks), channel=self.config.channel)
        return await dispatch_all(chunks, self)
