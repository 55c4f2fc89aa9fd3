"""Asynchronous leaf producers and adapters.

    - aseq: adapt an async iterable
    - from_sync: adapt a sync iterable, awaiting awaitable elements lazily
    - wrap: adapt a raw pull producer whose pull may return an awaitable
    - empty, once, repeat, from_fn: built-in leaves

Like their synchronous counterparts, all adapters are fused.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import Callable, TypeVar

from iterkit.foundation.errors import ConstructionError, ErrorCode
from iterkit.iter.base import BaseIter
from iterkit.iter.step import Step
from iterkit.runtime.observability import get_logger

from .base import AsyncBaseIter, MaybeAwaitable, resolve

T = TypeVar("T")

_log = get_logger("iterkit.aio.sources")

__all__ = [
    "AsyncIter",
    "SyncIter",
    "Wrap",
    "Empty",
    "Once",
    "Repeat",
    "FromFn",
    "aseq",
    "from_sync",
    "adapt",
    "wrap",
    "empty",
    "once",
    "repeat",
    "from_fn",
]


class AsyncIter(AsyncBaseIter[T], fused=True):
    """Sequence over a native async iterator."""

    __slots__ = ("_data", "_done")

    def __init__(self, data: AsyncIterator[T]) -> None:
        self._data = data
        self._done = False

    async def pull(self) -> Step[T]:
        if self._done:
            return Step.done()
        try:
            value = await self._data.__anext__()
        except StopAsyncIteration:
            self._done = True
            return Step.done()
        return Step.item(value)


class SyncIter(AsyncBaseIter[T], fused=True):
    """Sequence over a sync iterator, optionally awaiting awaitable elements."""

    __slots__ = ("_data", "_await_items", "_done")

    def __init__(self, data: Iterator[MaybeAwaitable[T]], await_items: bool = True) -> None:
        self._data = data
        self._await_items = await_items
        self._done = False

    async def pull(self) -> Step[T]:
        if self._done:
            return Step.done()
        try:
            value = next(self._data)
        except StopIteration:
            self._done = True
            return Step.done()
        return Step.item(await resolve(value) if self._await_items else value)  # type: ignore[arg-type]


class Wrap(AsyncBaseIter[T], fused=True):
    """Sequence over a raw pull producer; results may be awaitables of raw results."""

    __slots__ = ("_pull", "_name", "_done")

    def __init__(self, pull: Callable[[], object], name: str = "producer") -> None:
        self._pull = pull
        self._name = name
        self._done = False

    async def pull(self) -> Step[T]:
        if self._done:
            return Step.done()
        step = Step.of(await resolve(self._pull()))
        if step.is_done:
            self._done = True
            _log.debug("wrapped producer exhausted", producer=self._name)
        return step  # type: ignore[return-value]


class Empty(AsyncBaseIter[T], fused=True):
    __slots__ = ()

    async def pull(self) -> Step[T]:
        return Step.done()


class Once(AsyncBaseIter[T], fused=True):
    __slots__ = ("_item", "_done")

    def __init__(self, item: T) -> None:
        self._item = item
        self._done = False

    async def pull(self) -> Step[T]:
        if self._done:
            return Step.done()
        self._done = True
        return Step.item(self._item)


class Repeat(AsyncBaseIter[T], fused=True):
    __slots__ = ("_item",)

    def __init__(self, item: T) -> None:
        self._item = item

    async def pull(self) -> Step[T]:
        return Step.item(self._item)


class FromFn(AsyncBaseIter[T], fused=True):
    """Infinite sequence of f() results; awaitable results are awaited."""

    __slots__ = ("_f",)

    def __init__(self, f: Callable[[], MaybeAwaitable[T]]) -> None:
        self._f = f

    async def pull(self) -> Step[T]:
        return Step.item(await resolve(self._f()))


# ─────────────────────────────────────────────────────────────────────────────
# Factories
# ─────────────────────────────────────────────────────────────────────────────


def aseq(data: AsyncIterable[T]) -> AsyncBaseIter[T]:
    """Adapt an async iterable; fused async sequences are returned unchanged."""
    if isinstance(data, AsyncBaseIter):
        return data._fused()
    return AsyncIter(aiter(data))


def from_sync(data: Iterable[MaybeAwaitable[T]]) -> AsyncBaseIter[T]:
    """Asynchronous view of a sync iterable.

    Elements are pulled lazily, one per pull; awaitable elements are awaited
    before being emitted.
    """
    return SyncIter(iter(data))


def adapt(data: AsyncIterable[T] | Iterable[T]) -> AsyncBaseIter[T]:
    """Adapt either kind of iterable without awaiting its elements."""
    if isinstance(data, AsyncBaseIter):
        return data._fused()
    if isinstance(data, AsyncIterable):
        return AsyncIter(aiter(data))
    return SyncIter(iter(data), await_items=False)


def wrap(producer: object) -> AsyncBaseIter[object]:
    """Adapt a raw pull producer.

    Same contract as iterkit.iter.wrap, except that ``pull()``/``next()`` may
    return an awaitable resolving to the raw result.

    Raises:
        ConstructionError: If the producer has no usable pull method
    """
    if isinstance(producer, AsyncBaseIter):
        return producer._fused()
    if isinstance(producer, BaseIter):
        return from_sync(producer)
    for attr in ("pull", "next"):
        method = getattr(producer, attr, None)
        if callable(method):
            return Wrap(method, type(producer).__name__)
    if callable(producer):
        return Wrap(producer, getattr(producer, "__name__", type(producer).__name__))
    _log.debug("rejected producer", producer=type(producer).__name__)
    raise ConstructionError.create(
        "wrap",
        "producer must expose pull() or next(), or be callable",
        ErrorCode.INVALID_PRODUCER,
        details=type(producer).__name__,
    )


def empty() -> Empty[T]:
    return Empty()


def once(value: T) -> Once[T]:
    return Once(value)


def repeat(value: T) -> Repeat[T]:
    return Repeat(value)


def from_fn(f: Callable[[], MaybeAwaitable[T]]) -> FromFn[T]:
    return FromFn(f)
