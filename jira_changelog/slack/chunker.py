"""Splits messages into chunks that fit within Slack's message size limit."""

import structlog

from jira_changelog.utils.constants import CONTINUATION_MARKER, MSG_SIZE_LIMIT

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def split_long_line(line: str, limit: int, continuation: str = CONTINUATION_MARKER) -> list[str]:
    """Hard split a single line that does not fit within the limit.

    Every slice but the last ends with the continuation marker and every
    slice but the first starts with it. Whitespace is trimmed at each cut,
    so a line of only whitespace yields no slices.
    """
    size = limit - len(continuation)
    if size <= len(continuation):
        raise ValueError(f"Limit {limit} leaves no room for content between continuation markers")

    slices: list[str] = []
    rest = line.strip()
    while rest:
        prefix = continuation if slices else ""
        room = size - len(prefix)
        head = rest[:room].rstrip()
        rest = rest[room:].strip()
        if rest:
            head += continuation
        slices.append(f"{prefix}{head}")
    return slices


def split_message(text: str, limit: int = MSG_SIZE_LIMIT) -> list[str]:
    """Cut a message into chunks that fit within the limit.

    The text is divided at newline characters where possible, and the
    chunks join back into the original text as long as no line is longer
    than the limit. Only such a line is split mid-content, marked with
    continuation characters on both sides of the cut.

    Args:
        text: The message text to split up.
        limit: Maximum length of each chunk.

    Returns:
        list[str]: The chunks, in order.
    """
    if not text:
        return []
    if len(text) <= limit:
        return [text]

    lines = text.split("\n")
    chunks: list[str] = []
    block = ""
    for index, line in enumerate(lines):
        piece = line if index == len(lines) - 1 else f"{line}\n"
        if len(block) + len(piece) <= limit:
            block += piece
            continue

        # Flush the current block and start the next one with this line.
        if block:
            chunks.append(block)
            block = ""
        if len(piece) <= limit:
            block = piece
        elif len(line) <= limit:
            # The line fills a chunk by itself, its newline opens the next one.
            chunks.append(line)
            block = "\n"
        else:
            chunks.extend(split_long_line(line, limit))
    if block:
        chunks.append(block)

    logger.debug("Split message into chunks", length=len(text), limit=limit, chunk_count=len(chunks))
    return chunks
