"""Base combinator algebra for asynchronous lazy sequences.

Structurally identical to iterkit.iter.base, with ``pull()`` as a coroutine.
Predicates, fold functions and callbacks may be plain functions or return
awaitables; their results are awaited when needed. ``map`` never awaits the
mapped value, use ``map_await`` (or ``await_``) for that.

Multiple upstream pulls inside one step are awaited strictly one after
another; a single instance must not be pulled concurrently.

Example:
    >>> import asyncio
    >>> from iterkit.aio import from_sync
    >>> async def main():
    ...     return await from_sync([1, 2, 3]).map(lambda x: x * 2).collect()
    >>> asyncio.run(main())
    [2, 4, 6]
"""

from __future__ import annotations

import inspect as _inspect
from abc import abstractmethod
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Iterable
from typing import TYPE_CHECKING, Callable, ClassVar, TypeVar, Union

from iterkit.iter.step import Step

if TYPE_CHECKING:
    from iterkit.iter.sources import Iter

    from .stateful import Chunks, ChunksExact, FlatMap, Flatten, Peekable, Skip, SkipWhile, StepBy, Take, TakeWhile
    from .stateless import Await, Chain, Enumerate, Filter, FilterMap, Inspect, Map, MapAwait, Zip

T = TypeVar("T")
U = TypeVar("U")

MaybeAwaitable = Union[T, Awaitable[T]]
AsyncPredicate = Callable[[T], MaybeAwaitable[bool]]


async def resolve(value: MaybeAwaitable[T]) -> T:
    """Await value if it is awaitable, else return it unchanged."""
    if _inspect.isawaitable(value):
        return await value
    return value  # type: ignore[return-value]


class AsyncBaseIter(AsyncIterator[T]):
    """Single-consumer, pull-based lazy sequence whose pull may suspend.

    Same fusing contract as BaseIter: subclasses not declared with
    ``fused=True`` are put behind a fused Wrap before being consumed.
    """

    __slots__ = ()

    fused: ClassVar[bool] = False

    def __init_subclass__(cls, fused: bool | None = None, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if fused is not None:
            cls.fused = fused

    @abstractmethod
    async def pull(self) -> Step[T]:
        """Produce the next Step."""

    def __aiter__(self) -> AsyncBaseIter[T]:
        return self

    async def __anext__(self) -> T:
        step = await self.pull()
        if step.is_done:
            raise StopAsyncIteration
        return step.value

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"

    def _fused(self) -> AsyncBaseIter[T]:
        if self.fused:
            return self
        from .sources import Wrap
        return Wrap(self.pull, type(self).__name__)

    # ─────────────────────────────────────────────────────────────────
    # Stateless Combinators
    # ─────────────────────────────────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Map[T, U]:
        from .stateless import Map
        return Map(self._fused(), f)

    def map_await(self, f: Callable[[T], MaybeAwaitable[U]]) -> MapAwait[T, U]:
        """Map with f, awaiting each awaitable result before emitting it."""
        from .stateless import MapAwait
        return MapAwait(self._fused(), f)

    def await_(self) -> Await[T]:
        """Await every awaitable item; plain items pass through."""
        from .stateless import Await
        return Await(self._fused())  # type: ignore[arg-type]

    def filter(self, predicate: AsyncPredicate[T]) -> Filter[T]:
        from .stateless import Filter
        return Filter(self._fused(), predicate)

    def filter_map(self, predicate: AsyncPredicate[T], f: Callable[[T], U]) -> FilterMap[T, U]:
        from .stateless import FilterMap
        return FilterMap(self._fused(), predicate, f)

    def enumerate(self) -> Enumerate[T]:
        from .stateless import Enumerate
        return Enumerate(self._fused())

    def inspect(self, f: Callable[[T], object]) -> Inspect[T]:
        from .stateless import Inspect
        return Inspect(self._fused(), f)

    def chain(self, extension: AsyncIterable[T] | Iterable[T]) -> Chain[T]:
        from .sources import adapt
        from .stateless import Chain
        return Chain(self._fused(), adapt(extension))

    def zip(self, other: AsyncIterable[U] | Iterable[U]) -> Zip[T, U]:
        from .sources import adapt
        from .stateless import Zip
        return Zip(self._fused(), adapt(other))

    # ─────────────────────────────────────────────────────────────────
    # Stateful Combinators
    # ─────────────────────────────────────────────────────────────────

    def peekable(self) -> Peekable[T]:
        from .stateful import Peekable
        return Peekable(self._fused())

    def skip(self, n: int) -> Skip[T]:
        from .stateful import Skip
        return Skip(self._fused(), n)

    def skip_while(self, predicate: AsyncPredicate[T]) -> SkipWhile[T]:
        from .stateful import SkipWhile
        return SkipWhile(self._fused(), predicate)

    def step_by(self, step: int) -> StepBy[T]:
        from .stateful import StepBy
        return StepBy(self._fused(), step)

    def take(self, limit: int) -> Take[T]:
        from .stateful import Take
        return Take(self._fused(), limit)

    def take_while(self, predicate: AsyncPredicate[T]) -> TakeWhile[T]:
        from .stateful import TakeWhile
        return TakeWhile(self._fused(), predicate)

    def flatten(self) -> Flatten[T]:
        from .stateful import Flatten
        return Flatten(self._fused())

    def flat_map(self, f: Callable[[T], object]) -> FlatMap[T, U]:
        from .stateful import FlatMap
        return FlatMap(self._fused(), f)

    def chunks(self, size: int) -> Chunks[T]:
        from .stateful import Chunks
        return Chunks(self._fused(), size)

    def chunks_exact(self, size: int) -> ChunksExact[T]:
        from .stateful import ChunksExact
        return ChunksExact(self._fused(), size)

    # ─────────────────────────────────────────────────────────────────
    # Shared Primitive
    # ─────────────────────────────────────────────────────────────────

    async def advance_by(self, n: int) -> bool:
        """Pull and discard up to n items; False if the sequence ran out first."""
        for _ in range(max(n, 0)):
            if (await self.pull()).is_done:
                return False
        return True

    # ─────────────────────────────────────────────────────────────────
    # Terminal Operations
    # ─────────────────────────────────────────────────────────────────

    async def collect(self) -> list[T]:
        return [value async for value in self]

    async def fold(self, f: Callable[[U, T], MaybeAwaitable[U]], start: U) -> U:
        acc = start
        async for value in self:
            acc = await resolve(f(acc, value))
        return acc

    async def count(self) -> int:
        n = 0
        while not (await self.pull()).is_done:
            n += 1
        return n

    async def last(self) -> T | None:
        return await self.fold(lambda _, x: x, None)

    async def nth(self, n: int) -> T | None:
        if not await self.advance_by(n):
            return None
        return (await self.pull()).value_or(None)

    async def join(self, separator: str = "") -> str:
        return separator.join([str(value) async for value in self])

    async def partition(self, predicate: AsyncPredicate[T]) -> tuple[list[T], list[T]]:
        matching: list[T] = []
        rest: list[T] = []
        async for value in self:
            (matching if await resolve(predicate(value)) else rest).append(value)
        return matching, rest

    async def all(self, predicate: AsyncPredicate[T]) -> bool:
        async for value in self:
            if not await resolve(predicate(value)):
                return False
        return True

    async def some(self, predicate: AsyncPredicate[T]) -> bool:
        async for value in self:
            if await resolve(predicate(value)):
                return True
        return False

    async def find(self, predicate: AsyncPredicate[T]) -> T | None:
        async for value in self:
            if await resolve(predicate(value)):
                return value
        return None

    async def for_each(self, f: Callable[[T], object]) -> None:
        async for value in self:
            await resolve(f(value))

    async def consume(self) -> None:
        while not (await self.pull()).is_done:
            pass

    # ─────────────────────────────────────────────────────────────────
    # Bridges
    # ─────────────────────────────────────────────────────────────────

    async def to_sync(self) -> Iter[T]:
        """Drain this sequence, then return a synchronous sequence over the items."""
        from iterkit.iter.sources import Iter
        return Iter(iter(await self.collect()))
