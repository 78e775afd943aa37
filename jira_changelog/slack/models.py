"""Data models for Slack delivery."""

from typing import Protocol

from pydantic import BaseModel


class ChunkResponse(BaseModel):
    """Acknowledgment of a single chunk by the chat transport."""

    ok: bool
    status_code: int | None = None
    error: str | None = None


class ChatTransport(Protocol):
    """Protocol for transports that accept one message chunk at a time."""

    async def post_chunk(self, text: str) -> ChunkResponse:
        """Post a single chunk.

        Args:
            text: The chunk text, already within the size limit.

        Returns:
            The transport's acknowledgment of the chunk.
        """
        ...
