"""Utility modules for shared functionality."""

from .constants import (
    CONTINUATION_MARKER,
    DEFAULT_TICKET_ID_PATTERN,
    MSG_SIZE_LIMIT,
)
from .helpers import maybe_await

__all__ = [
    "CONTINUATION_MARKER",
    "DEFAULT_TICKET_ID_PATTERN",
    "MSG_SIZE_LIMIT",
    "maybe_await",
]
