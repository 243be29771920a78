"""Bounded fixed-interval retrying."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeAlias

Sleep: TypeAlias = Callable[[float], Awaitable[None]]


async def retry(
    predicate: Callable[[], Awaitable[bool]],
    *,
    times: int,
    interval: float,
    sleep: Sleep = asyncio.sleep,
) -> bool:
    """Await ``predicate`` until it returns True, at most ``times`` times.

    Sleeps ``interval`` seconds between attempts, never after the last one.

    Returns:
        True as soon as the predicate holds, False when every attempt failed

    """
    if times < 1:
        raise ValueError(f"times must be at least 1, got {times}")

    for attempt in range(1, times + 1):
        if await predicate():
            return True
        if attempt < times:
            await sleep(interval)
    return False
