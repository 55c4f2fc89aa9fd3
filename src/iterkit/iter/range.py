"""Arithmetic range producer and range helpers.

irange(end), irange(start, end) and irange(start, end, step) yield integers
from start (inclusive) to end (exclusive). A negative step counts down.
Reversed bounds produce an empty range; a zero step is rejected.

Example:
    >>> irange(3).collect()
    [0, 1, 2]
    >>> irange(5, 0, -2).collect()
    [5, 3, 1]
    >>> reduce_range(irange(4), lambda total, value, index: total + value * index)
    14
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, TypeVar

from iterkit.foundation.errors import ConstructionError, ErrorCode
from iterkit.runtime.observability import get_logger

from .base import BaseIter
from .step import Step

if TYPE_CHECKING:
    from .stateless import Map

T = TypeVar("T")

_log = get_logger("iterkit.iter.range")


class Range(BaseIter[int], fused=True):
    """Lazy integer range with a direction-aware end check."""

    __slots__ = ("start", "end", "step", "ascending", "_cursor")

    def __init__(self, start: int, end: int | None = None, step: int | None = None) -> None:
        if end is None:
            start, end = 0, start
        step = 1 if step is None else step

        if step == 0:
            _log.debug("rejected range", start=start, end=end, step=step)
            raise ConstructionError.create("irange", "step can't be 0", ErrorCode.INVALID_STEP,
                                           details=f"start={start} end={end}")

        self.start = start
        self.end = end
        self.step = step
        self.ascending = step > 0
        self._cursor = start

    def pull(self) -> Step[int]:
        i = self._cursor
        if (i < self.end) if self.ascending else (i > self.end):
            self._cursor = i + self.step
            return Step.item(i)
        return Step.done()

    def __len__(self) -> int:
        """Number of values not yet pulled."""
        span = (self.end - self._cursor) if self.ascending else (self._cursor - self.end)
        return max(0, -(-span // abs(self.step)))

    def __repr__(self) -> str:
        return f"Range({self.start}, {self.end}, {self.step})"


def irange(start: int, end: int | None = None, step: int | None = None) -> Range:
    """Create a Range. With a single argument the range goes from 0 to start.

    Raises:
        ConstructionError: If step is 0
    """
    return Range(start, end, step)


def map_range(rng: Range, f: Callable[[int], T]) -> Map[int, T]:
    """Lazily map every value of a range."""
    return rng.map(f)


def reduce_range(rng: Range, f: Callable[[T, int, int], T], total: T = 0) -> T:  # type: ignore[assignment]
    """Fold a range with ``f(total, value, index)``; total defaults to 0."""
    return rng.enumerate().fold(lambda acc, pair: f(acc, pair[1], pair[0]), total)


def range_to_array(rng: Range) -> list[int]:
    """Materialize the remaining values of a range."""
    return rng.collect()
