"""Base combinator algebra for synchronous lazy sequences.

Every sequence implements a single abstract operation, ``pull()``, returning a
Step. BaseIter layers on top of it:

- native iteration (``for x in seq``)
- combinator methods that build new sequences owning this one
- terminal operations that drive pulls (collect, fold, count, find, ...)
- advance_by, the one primitive used for all "discard n items" logic

Nothing is pulled until a terminal operation (or native iteration) runs.

Example:
    >>> from iterkit import seq
    >>> seq([1, 2, 3, 4]).filter(lambda x: x % 2 == 0).map(str).join(", ")
    '2, 4'
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Callable, ClassVar, TypeVar

from .step import Step

if TYPE_CHECKING:
    from iterkit.aio.base import AsyncBaseIter

    from .stateful import Chunks, ChunksExact, FlatMap, Flatten, Peekable, Skip, SkipWhile, StepBy, Take, TakeWhile
    from .stateless import Chain, Enumerate, Filter, FilterMap, Inspect, Map, Zip

T = TypeVar("T")
U = TypeVar("U")

Predicate = Callable[[T], bool]


class BaseIter(Iterator[T]):
    """Single-consumer, pull-based lazy sequence.

    Subclasses implement pull(). Pulling is destructive. Sequences declared
    with ``fused=True`` keep reporting done after their first done step; any
    other sequence is put behind a fused Wrap before a combinator or an
    ingestion adapter consumes it.
    """

    __slots__ = ()

    fused: ClassVar[bool] = False

    def __init_subclass__(cls, fused: bool | None = None, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if fused is not None:
            cls.fused = fused

    @abstractmethod
    def pull(self) -> Step[T]:
        """Produce the next Step."""

    def __iter__(self) -> BaseIter[T]:
        return self

    def __next__(self) -> T:
        step = self.pull()
        if step.is_done:
            raise StopIteration
        return step.value

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"

    def _fused(self) -> BaseIter[T]:
        """This sequence, or a fused Wrap over its pull when it is not fused."""
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

    def filter(self, predicate: Predicate[T]) -> Filter[T]:
        from .stateless import Filter
        return Filter(self._fused(), predicate)

    def filter_map(self, predicate: Predicate[T], f: Callable[[T], U]) -> FilterMap[T, U]:
        from .stateless import FilterMap
        return FilterMap(self._fused(), predicate, f)

    def enumerate(self) -> Enumerate[T]:
        from .stateless import Enumerate
        return Enumerate(self._fused())

    def inspect(self, f: Callable[[T], object]) -> Inspect[T]:
        from .stateless import Inspect
        return Inspect(self._fused(), f)

    def chain(self, extension: Iterable[T]) -> Chain[T]:
        from .sources import seq
        from .stateless import Chain
        return Chain(self._fused(), seq(extension))

    def zip(self, other: Iterable[U]) -> Zip[T, U]:
        from .sources import seq
        from .stateless import Zip
        return Zip(self._fused(), seq(other))

    # ─────────────────────────────────────────────────────────────────
    # Stateful Combinators
    # ─────────────────────────────────────────────────────────────────

    def peekable(self) -> Peekable[T]:
        from .stateful import Peekable
        return Peekable(self._fused())

    def skip(self, n: int) -> Skip[T]:
        from .stateful import Skip
        return Skip(self._fused(), n)

    def skip_while(self, predicate: Predicate[T]) -> SkipWhile[T]:
        from .stateful import SkipWhile
        return SkipWhile(self._fused(), predicate)

    def step_by(self, step: int) -> StepBy[T]:
        from .stateful import StepBy
        return StepBy(self._fused(), step)

    def take(self, limit: int) -> Take[T]:
        from .stateful import Take
        return Take(self._fused(), limit)

    def take_while(self, predicate: Predicate[T]) -> TakeWhile[T]:
        from .stateful import TakeWhile
        return TakeWhile(self._fused(), predicate)

    def flatten(self) -> Flatten[T]:
        from .stateful import Flatten
        return Flatten(self._fused())

    def flat_map(self, f: Callable[[T], Iterable[U] | U]) -> FlatMap[T, U]:
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

    def advance_by(self, n: int) -> bool:
        """Pull and discard up to n items.

        Stops at the first done step. Negative n is treated as 0.

        Returns:
            True if all n items were discarded, False if the sequence ran out
        """
        for _ in range(max(n, 0)):
            if self.pull().is_done:
                return False
        return True

    # ─────────────────────────────────────────────────────────────────
    # Terminal Operations
    # ─────────────────────────────────────────────────────────────────

    def collect(self) -> list[T]:
        """Materialize the remaining items into a new list."""
        return list(self)

    def fold(self, f: Callable[[U, T], U], start: U) -> U:
        acc = start
        for value in self:
            acc = f(acc, value)
        return acc

    def count(self) -> int:
        return self.fold(lambda n, _: n + 1, 0)

    def last(self) -> T | None:
        return self.fold(lambda _, x: x, None)

    def nth(self, n: int) -> T | None:
        """Item at zero-based position n, or None when the sequence is shorter.

        Negative n is treated as 0.
        """
        if not self.advance_by(n):
            return None
        return self.pull().value_or(None)

    def join(self, separator: str = "") -> str:
        return separator.join(str(value) for value in self)

    def partition(self, predicate: Predicate[T]) -> tuple[list[T], list[T]]:
        """Split into (matching, rest), both in pull order."""
        matching: list[T] = []
        rest: list[T] = []
        for value in self:
            (matching if predicate(value) else rest).append(value)
        return matching, rest

    def all(self, predicate: Predicate[T]) -> bool:
        for value in self:
            if not predicate(value):
                return False
        return True

    def some(self, predicate: Predicate[T]) -> bool:
        for value in self:
            if predicate(value):
                return True
        return False

    def find(self, predicate: Predicate[T]) -> T | None:
        for value in self:
            if predicate(value):
                return value
        return None

    def for_each(self, f: Callable[[T], object]) -> None:
        for value in self:
            f(value)

    def consume(self) -> None:
        """Drain the sequence without keeping any item."""
        while not self.pull().is_done:
            pass

    # ─────────────────────────────────────────────────────────────────
    # Bridges
    # ─────────────────────────────────────────────────────────────────

    def to_async(self) -> AsyncBaseIter[T]:
        """Asynchronous view of this sequence; items are awaited when awaitable."""
        from iterkit.aio.sources import from_sync
        return from_sync(self)
