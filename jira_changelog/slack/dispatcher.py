"""Sends message chunks to a chat transport, one after the other."""

import structlog

from jira_changelog.exceptions import DeliveryError
from jira_changelog.slack.models import ChatTransport, ChunkResponse

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def dispatch_all(chunks: list[str], transport: ChatTransport) -> list[ChunkResponse]:
    """Send chunks strictly in order, stopping at the first one that is not acknowledged.

    Each chunk is only posted once the previous one has been accepted, so the
    channel shows them in order. Chunks already sent are not retried or
    withdrawn when a later one fails.

    Raises:
        DeliveryError: If the transport fails or rejects a chunk.
    """
    responses: list[ChunkResponse] = []
    for index, chunk in enumerate(chunks, start=1):
        logger.debug("Posting chunk", index=index, total=len(chunks), length=len(chunk))
        response = await transport.post_chunk(chunk)
        if not response.ok:
            logger.error(
                "Chunk rejected, aborting remaining chunks",
                index=index,
                total=len(chunks),
                sent=index - 1,
                status_code=response.status_code,
                error=response.error,
            )
            raise DeliveryError(response.error or f"Chunk {index} of {len(chunks)} was not acknowledged")
        responses.append(response)
    return responses
