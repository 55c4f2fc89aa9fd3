"""Asynchronous stateless combinators.

Mirrors iterkit.iter.stateless, plus MapAwait and Await for sequences whose
mapped values are themselves awaitable.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from iterkit.iter.stateless import Enumerated, Zipped
from iterkit.iter.step import Step

from .base import AsyncBaseIter, AsyncPredicate, MaybeAwaitable, resolve

T = TypeVar("T")
U = TypeVar("U")

__all__ = ["Map", "MapAwait", "Await", "Filter", "FilterMap", "Enumerate", "Inspect", "Chain", "Zip"]


class Map(AsyncBaseIter[U], fused=True):
    """Applies f to items without awaiting its result."""

    __slots__ = ("_data", "_f")

    def __init__(self, data: AsyncBaseIter[T], f: Callable[[T], U]) -> None:
        self._data = data
        self._f = f

    async def pull(self) -> Step[U]:
        return (await self._data.pull()).map(self._f)


class MapAwait(AsyncBaseIter[U], fused=True):
    """Applies f to items and awaits the result when it is awaitable."""

    __slots__ = ("_data", "_f")

    def __init__(self, data: AsyncBaseIter[T], f: Callable[[T], MaybeAwaitable[U]]) -> None:
        self._data = data
        self._f = f

    async def pull(self) -> Step[U]:
        step = await self._data.pull()
        if step.is_done:
            return Step.done()
        return Step.item(await resolve(self._f(step.value)))


class Await(AsyncBaseIter[T], fused=True):
    """Awaits every awaitable item; plain items pass through."""

    __slots__ = ("_data",)

    def __init__(self, data: AsyncBaseIter[MaybeAwaitable[T]]) -> None:
        self._data = data

    async def pull(self) -> Step[T]:
        step = await self._data.pull()
        if step.is_done:
            return Step.done()
        return Step.item(await resolve(step.value))


class Filter(AsyncBaseIter[T], fused=True):
    __slots__ = ("_data", "_predicate")

    def __init__(self, data: AsyncBaseIter[T], predicate: AsyncPredicate[T]) -> None:
        self._data = data
        self._predicate = predicate

    async def pull(self) -> Step[T]:
        while not (step := await self._data.pull()).is_done:
            if await resolve(self._predicate(step.value)):
                return step
        return step


class FilterMap(AsyncBaseIter[U], fused=True):
    __slots__ = ("_filter", "_f")

    def __init__(self, data: AsyncBaseIter[T], predicate: AsyncPredicate[T], f: Callable[[T], U]) -> None:
        self._filter = Filter(data, predicate)
        self._f = f

    async def pull(self) -> Step[U]:
        return (await self._filter.pull()).map(self._f)


class Enumerate(AsyncBaseIter[Enumerated[T]], fused=True):
    __slots__ = ("_data", "_index")

    def __init__(self, data: AsyncBaseIter[T]) -> None:
        self._data = data
        self._index = 0

    async def pull(self) -> Step[Enumerated[T]]:
        step = await self._data.pull()
        if step.is_done:
            return Step.done()
        i, self._index = self._index, self._index + 1
        return Step.item((i, step.value))


class Inspect(AsyncBaseIter[T], fused=True):
    """Calls f on every item; an awaitable result is awaited before the item is emitted."""

    __slots__ = ("_data", "_f")

    def __init__(self, data: AsyncBaseIter[T], f: Callable[[T], object]) -> None:
        self._data = data
        self._f = f

    async def pull(self) -> Step[T]:
        step = await self._data.pull()
        if not step.is_done:
            await resolve(self._f(step.value))
        return step


class Chain(AsyncBaseIter[T], fused=True):
    __slots__ = ("_a", "_b", "_switched")

    def __init__(self, data: AsyncBaseIter[T], extension: AsyncBaseIter[T]) -> None:
        self._a = data
        self._b = extension
        self._switched = False

    async def pull(self) -> Step[T]:
        if not self._switched:
            step = await self._a.pull()
            if not step.is_done:
                return step
            self._switched = True
        return await self._b.pull()


class Zip(AsyncBaseIter[Zipped[T, U]], fused=True):
    """Pulls the left side, then the right side; latches done on the first exhausted side."""

    __slots__ = ("_a", "_b", "_done")

    def __init__(self, data: AsyncBaseIter[T], other: AsyncBaseIter[U]) -> None:
        self._a = data
        self._b = other
        self._done = False

    async def pull(self) -> Step[Zipped[T, U]]:
        if self._done:
            return Step.done()
        a = await self._a.pull()
        b = await self._b.pull()
        if a.is_done or b.is_done:
            self._done = True
            return Step.done()
        return Step.item((a.value, b.value))
