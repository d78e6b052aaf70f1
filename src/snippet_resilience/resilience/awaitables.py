"""Helpers for callables that may be sync or async."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, TypeVar, Union

T = TypeVar("T")

MaybeAwaitable = Union[T, Awaitable[T]]

# Zero-argument callable returning a value or an awaitable of it
Operation = Callable[[], MaybeAwaitable[T]]


async def resolve(value: Any) -> Any:
    """Await value if it is awaitable, else return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value
