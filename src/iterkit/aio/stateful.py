"""Asynchronous stateful combinators.

Same state machines as iterkit.iter.stateful; every upstream pull is awaited.
Inner values of flatten/flat_map may be async sequences, async iterables,
sync iterables or plain values.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable
from typing import Callable, TypeVar

from iterkit.foundation.errors import ErrorCode
from iterkit.iter.base import BaseIter
from iterkit.iter.stateful import ATOMIC_TYPES, require_positive
from iterkit.iter.step import Step
from iterkit.runtime.observability import get_logger

from .base import AsyncBaseIter, AsyncPredicate, resolve
from .sources import AsyncIter, Empty, Once, SyncIter

T = TypeVar("T")
U = TypeVar("U")

_log = get_logger("iterkit.aio.stateful")

__all__ = [
    "Peekable",
    "Skip",
    "SkipWhile",
    "StepBy",
    "Take",
    "TakeWhile",
    "Flatten",
    "FlatMap",
    "Chunks",
    "ChunksExact",
    "to_inner",
]


class Peekable(AsyncBaseIter[T], fused=True):
    __slots__ = ("_data", "_peeked")

    def __init__(self, data: AsyncBaseIter[T]) -> None:
        self._data = data
        self._peeked: Step[T] | None = None

    async def peek(self) -> Step[T]:
        """Next step without consuming it; upstream is pulled at most once."""
        if self._peeked is None:
            self._peeked = await self._data.pull()
        return self._peeked

    async def pull(self) -> Step[T]:
        step, self._peeked = self._peeked, None
        return step if step is not None else await self._data.pull()


class Skip(AsyncBaseIter[T], fused=True):
    __slots__ = ("_data", "_n", "_skipped")

    def __init__(self, data: AsyncBaseIter[T], n: int) -> None:
        self._data = data
        self._n = n
        self._skipped = False

    async def pull(self) -> Step[T]:
        if not self._skipped:
            self._skipped = True
            if not await self._data.advance_by(self._n):
                return Step.done()
        return await self._data.pull()


class SkipWhile(AsyncBaseIter[T], fused=True):
    __slots__ = ("_data", "_predicate", "_unlocked")

    def __init__(self, data: AsyncBaseIter[T], predicate: AsyncPredicate[T]) -> None:
        self._data = data
        self._predicate = predicate
        self._unlocked = False

    async def pull(self) -> Step[T]:
        if self._unlocked:
            return await self._data.pull()
        while not (step := await self._data.pull()).is_done:
            if not await resolve(self._predicate(step.value)):
                break
        self._unlocked = True
        return step


class StepBy(AsyncBaseIter[T], fused=True):
    __slots__ = ("_data", "_step", "_first")

    def __init__(self, data: AsyncBaseIter[T], step: int) -> None:
        require_positive("step_by", "step", step, ErrorCode.INVALID_STEP)
        self._data = data
        self._step = step
        self._first = True

    async def pull(self) -> Step[T]:
        if self._first:
            self._first = False
            return await self._data.pull()
        if not await self._data.advance_by(self._step - 1):
            return Step.done()
        return await self._data.pull()


class Take(AsyncBaseIter[T], fused=True):
    __slots__ = ("_data", "_remaining")

    def __init__(self, data: AsyncBaseIter[T], limit: int) -> None:
        self._data = data
        self._remaining = limit

    async def pull(self) -> Step[T]:
        if self._remaining <= 0:
            return Step.done()
        step = await self._data.pull()
        self._remaining = 0 if step.is_done else self._remaining - 1
        return step


class TakeWhile(AsyncBaseIter[T], fused=True):
    __slots__ = ("_data", "_predicate", "_done")

    def __init__(self, data: AsyncBaseIter[T], predicate: AsyncPredicate[T]) -> None:
        self._data = data
        self._predicate = predicate
        self._done = False

    async def pull(self) -> Step[T]:
        if self._done:
            return Step.done()
        step = await self._data.pull()
        if not step.is_done and await resolve(self._predicate(step.value)):
            return step
        self._done = True
        return Step.done()


def to_inner(value: object) -> AsyncBaseIter[object]:
    """Convert a flattened value into an async inner sequence.

    Elements of sync iterables are awaited when awaitable, as with from_sync().
    """
    if isinstance(value, AsyncBaseIter):
        return value._fused()
    if isinstance(value, AsyncIterable):
        return AsyncIter(aiter(value))
    if isinstance(value, BaseIter) or (isinstance(value, Iterable) and not isinstance(value, ATOMIC_TYPES)):
        return SyncIter(iter(value))
    return Once(value)


class Flatten(AsyncBaseIter[T], fused=True):
    __slots__ = ("_data", "_current", "_done")

    def __init__(self, data: AsyncBaseIter[object]) -> None:
        self._data = data
        self._current: AsyncBaseIter[T] = Empty()
        self._done = False

    async def _inner(self, value: object) -> AsyncBaseIter[T]:
        return to_inner(value)  # type: ignore[return-value]

    async def pull(self) -> Step[T]:
        while not self._done:
            step = await self._current.pull()
            if not step.is_done:
                return step
            outer = await self._data.pull()
            if outer.is_done:
                self._done = True
            else:
                self._current = await self._inner(outer.value)
        return Step.done()


class FlatMap(Flatten[U]):
    """Flatten over f(value); an awaitable result of f is awaited first."""

    __slots__ = ("_f",)

    def __init__(self, data: AsyncBaseIter[T], f: Callable[[T], object]) -> None:
        super().__init__(data)
        self._f = f

    async def _inner(self, value: object) -> AsyncBaseIter[U]:
        return to_inner(await resolve(self._f(value)))  # type: ignore[arg-type, return-value]


class Chunks(AsyncBaseIter[list[T]], fused=True):
    __slots__ = ("_data", "_size", "_done")

    def __init__(self, data: AsyncBaseIter[T], size: int) -> None:
        require_positive("chunks", "size", size, ErrorCode.INVALID_SIZE)
        self._data = data
        self._size = size
        self._done = False

    async def pull(self) -> Step[list[T]]:
        if self._done:
            return Step.done()
        chunk: list[T] = []
        while len(chunk) < self._size:
            step = await self._data.pull()
            if step.is_done:
                self._done = True
                break
            chunk.append(step.value)
        return Step.item(chunk) if chunk else Step.done()


class ChunksExact(AsyncBaseIter[list[T]], fused=True):
    """Lists of exactly size items; a short final group is kept in ``remainder``."""

    __slots__ = ("_data", "_size", "_done", "remainder")

    def __init__(self, data: AsyncBaseIter[T], size: int) -> None:
        require_positive("chunks_exact", "size", size, ErrorCode.INVALID_SIZE)
        self._data = data
        self._size = size
        self._done = False
        self.remainder: list[T] = []

    async def pull(self) -> Step[list[T]]:
        if self._done:
            return Step.done()
        chunk: list[T] = []
        while len(chunk) < self._size:
            step = await self._data.pull()
            if step.is_done:
                self._done = True
                self.remainder = chunk
                if chunk:
                    _log.debug("remainder captured", operation="chunks_exact", size=self._size, remainder=len(chunk))
                return Step.done()
            chunk.append(step.value)
        return Step.item(chunk)
