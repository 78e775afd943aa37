"""Slack delivery of changelog messages."""

from .chunker import split_message
from .dispatcher import dispatch_all
from .models import ChatTransport, ChunkResponse
from .transport import SlackWebhookTransport

__all__ = [
    "ChatTransport",
    "ChunkResponse",
    "SlackWebhookTransport",
    "dispatch_all",
    "split_message",
]
