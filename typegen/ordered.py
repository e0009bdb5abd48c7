"""Order-preserving async folds."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")
A = TypeVar("A")


async def async_reduce(
    items: Sequence[T],
    step: Callable[[A, T, int, Sequence[T]], Awaitable[A]],
    initial: A,
) -> A:
    """Fold ``items`` through ``step``, awaiting each step before the next."""
    acc = initial
    for index, item in enumerate(items):
        acc = await step(acc, item, index, items)
    return acc


async def gather_ordered(
    items: Sequence[T],
    resolve: Callable[[T], Awaitable[R]],
) -> list[R]:
    """Resolve every item concurrently; return results in input order.

    The first failure propagates; the remaining resolutions are cancelled
    and awaited before it does.
    """
    tasks = [asyncio.ensure_future(resolve(item)) for item in items]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
