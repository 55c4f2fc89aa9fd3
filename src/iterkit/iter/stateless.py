"""Stateless combinators: Map, Filter, FilterMap, Enumerate, Inspect, Chain, Zip.

Each holds its upstream exclusively and computes the next Step from at most
a flag or counter plus upstream pulls. Caller-supplied functions run inside
pull() and their exceptions propagate unchanged.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from .base import BaseIter, Predicate
from .step import Step

T = TypeVar("T")
U = TypeVar("U")

Enumerated = tuple[int, T]
Zipped = tuple[T, U]

__all__ = ["Map", "Filter", "FilterMap", "Enumerate", "Inspect", "Chain", "Zip", "Enumerated", "Zipped"]


class Map(BaseIter[U], fused=True):
    """One upstream pull per pull, f applied to items."""

    __slots__ = ("_data", "_f")

    def __init__(self, data: BaseIter[T], f: Callable[[T], U]) -> None:
        self._data = data
        self._f = f

    def pull(self) -> Step[U]:
        return self._data.pull().map(self._f)


class Filter(BaseIter[T], fused=True):
    """Pulls until an item matches the predicate or upstream is exhausted."""

    __slots__ = ("_data", "_predicate")

    def __init__(self, data: BaseIter[T], predicate: Predicate[T]) -> None:
        self._data = data
        self._predicate = predicate

    def pull(self) -> Step[T]:
        while not (step := self._data.pull()).is_done:
            if self._predicate(step.value):
                return step
        return step


class FilterMap(BaseIter[U], fused=True):
    __slots__ = ("_filter", "_f")

    def __init__(self, data: BaseIter[T], predicate: Predicate[T], f: Callable[[T], U]) -> None:
        self._filter = Filter(data, predicate)
        self._f = f

    def pull(self) -> Step[U]:
        return self._filter.pull().map(self._f)


class Enumerate(BaseIter[Enumerated[T]], fused=True):
    """Pairs items with a zero-based index local to this instance."""

    __slots__ = ("_data", "_index")

    def __init__(self, data: BaseIter[T]) -> None:
        self._data = data
        self._index = 0

    def pull(self) -> Step[Enumerated[T]]:
        step = self._data.pull()
        if step.is_done:
            return Step.done()
        i, self._index = self._index, self._index + 1
        return Step.item((i, step.value))


class Inspect(BaseIter[T], fused=True):
    """Calls f on every item passing through, without altering it."""

    __slots__ = ("_data", "_f")

    def __init__(self, data: BaseIter[T], f: Callable[[T], object]) -> None:
        self._data = data
        self._f = f

    def pull(self) -> Step[T]:
        step = self._data.pull()
        if not step.is_done:
            self._f(step.value)
        return step


class Chain(BaseIter[T], fused=True):
    """Exhausts the first sequence, then switches to the second for good."""

    __slots__ = ("_a", "_b", "_switched")

    def __init__(self, data: BaseIter[T], extension: BaseIter[T]) -> None:
        self._a = data
        self._b = extension
        self._switched = False

    def pull(self) -> Step[T]:
        if not self._switched:
            step = self._a.pull()
            if not step.is_done:
                return step
            self._switched = True
        return self._b.pull()


class Zip(BaseIter[Zipped[T, U]], fused=True):
    """Pulls both sides once per pull; done as soon as either side is done.

    After the first done step neither side is pulled again.
    """

    __slots__ = ("_a", "_b", "_done")

    def __init__(self, data: BaseIter[T], other: BaseIter[U]) -> None:
        self._a = data
        self._b = other
        self._done = False

    def pull(self) -> Step[Zipped[T, U]]:
        if self._done:
            return Step.done()
        a, b = self._a.pull(), self._b.pull()
        if a.is_done or b.is_done:
            self._done = True
            return Step.done()
        return Step.item((a.value, b.value))
