"""Retry helpers for transient transport failures and write conflicts."""

from __future__ import annotations

import asyncio
import functools
import logging
import random
from collections.abc import Awaitable, Callable

import httpx

from app.errors import Conflict

logger = logging.getLogger(__name__)

RETRY_EXCEPTIONS = (OSError, asyncio.TimeoutError, httpx.TransportError)


def retry_async(func: Callable[..., Awaitable] | None = None, *, attempts: int = 3, base_delay: float = 1.0):
    """Retry transient transport failures with jittered backoff.

    Only wrap idempotent calls.
    """
    if func is None:
        return functools.partial(retry_async, attempts=attempts, base_delay=base_delay)

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        delay = base_delay
        for attempt in range(attempts):
            try:
                return await func(*args, **kwargs)
            except RETRY_EXCEPTIONS:
                if attempt == attempts - 1:
                    raise
                await asyncio.sleep(delay + random.random() * base_delay)
                delay *= 2
    return wrapper


def retry_conflict(func: Callable[..., Awaitable]):
    """Re-run a whole read-modify-write once when the write loses a race."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Conflict:
            logger.warning("Write conflict in %s; retrying from a fresh read", func.__qualname__)
            return await func(*args, **kwargs)
    return wrapper
