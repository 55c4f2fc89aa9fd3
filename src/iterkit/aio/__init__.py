"""Asynchronous mirror of iterkit.iter.

Same combinators and terminals, with ``pull()`` as a coroutine:

    >>> import asyncio
    >>> from iterkit.aio import from_sync
    >>> async def main():
    ...     evens = from_sync(range(10)).filter(lambda n: n % 2 == 0)
    ...     return await evens.chunks(2).collect()
    >>> asyncio.run(main())
    [[0, 2], [4, 6], [8]]

Bridges: ``BaseIter.to_async()`` / ``from_sync()`` go sync -> async,
``AsyncBaseIter.to_sync()`` drains an async sequence into a sync one.
"""

from .base import AsyncBaseIter, AsyncPredicate, MaybeAwaitable, resolve
from .sources import (
    AsyncIter,
    Empty,
    FromFn,
    Once,
    Repeat,
    SyncIter,
    Wrap,
    adapt,
    aseq,
    empty,
    from_fn,
    from_sync,
    once,
    repeat,
    wrap,
)
from .stateful import (
    Chunks,
    ChunksExact,
    FlatMap,
    Flatten,
    Peekable,
    Skip,
    SkipWhile,
    StepBy,
    Take,
    TakeWhile,
)
from .stateless import Await, Chain, Enumerate, Filter, FilterMap, Inspect, Map, MapAwait, Zip

__all__ = [
    # Protocol
    "AsyncBaseIter", "AsyncPredicate", "MaybeAwaitable", "resolve",
    # Sources
    "AsyncIter", "SyncIter", "Wrap", "Empty", "Once", "Repeat", "FromFn",
    "aseq", "from_sync", "adapt", "wrap", "empty", "once", "repeat", "from_fn",
    # Stateless
    "Map", "MapAwait", "Await", "Filter", "FilterMap", "Enumerate", "Inspect", "Chain", "Zip",
    # Stateful
    "Peekable", "Skip", "SkipWhile", "StepBy", "Take", "TakeWhile",
    "Flatten", "FlatMap", "Chunks", "ChunksExact",
]
