"""General utility functions and helper classes."""

import inspect
from typing import Any, Awaitable, TypeVar

T = TypeVar("T")


async def maybe_await(value: T | Awaitable[T]) -> T:
    """Await the value if a hook returned an awaitable, otherwise return it as-is."""
    if inspect.isawaitable(value):
        return await value  # type: ignore[no-any-return]
    return value  # type: ignore[return-value]


def unique(items: list[Any]) -> list[Any]:
    """Return the items without duplicates, keeping first-seen order."""
    seen: set[Any] = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
