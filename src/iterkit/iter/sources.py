"""Leaf producers and ingestion adapters.

Every value that enters the combinator algebra passes through one of these:

    - seq: adapt any Python iterable
    - wrap: adapt a raw pull producer (``pull()``/``next()`` returning
      ``{"done": ..., "value": ...}``-shaped results)
    - empty, once, repeat, from_fn: built-in leaves

All of them are fused: after the first done step they never touch the
underlying producer again.

Example:
    >>> class Countdown:
    ...     def __init__(self): self.n = 3
    ...     def next(self):
    ...         self.n -= 1
    ...         return {"value": self.n} if self.n >= 0 else {"done": True}
    >>> wrap(Countdown()).collect()
    [2, 1, 0]
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Callable, TypeVar

from iterkit.foundation.errors import ConstructionError, ErrorCode
from iterkit.runtime.observability import get_logger

from .base import BaseIter
from .step import Step

T = TypeVar("T")

_log = get_logger("iterkit.iter.sources")

__all__ = [
    "Iter",
    "Wrap",
    "Empty",
    "Once",
    "Repeat",
    "FromFn",
    "seq",
    "wrap",
    "empty",
    "once",
    "repeat",
    "from_fn",
]


class Iter(BaseIter[T], fused=True):
    """Sequence over a native Python iterator."""

    __slots__ = ("_data", "_done")

    def __init__(self, data: Iterator[T]) -> None:
        self._data = data
        self._done = False

    def pull(self) -> Step[T]:
        if self._done:
            return Step.done()
        try:
            value = next(self._data)
        except StopIteration:
            self._done = True
            return Step.done()
        return Step.item(value)


class Wrap(BaseIter[T], fused=True):
    """Sequence over a raw pull producer, normalizing each result with Step.of()."""

    __slots__ = ("_pull", "_name", "_done")

    def __init__(self, pull: Callable[[], object], name: str = "producer") -> None:
        self._pull = pull
        self._name = name
        self._done = False

    def pull(self) -> Step[T]:
        if self._done:
            return Step.done()
        step = Step.of(self._pull())
        if step.is_done:
            self._done = True
            _log.debug("wrapped producer exhausted", producer=self._name)
        return step  # type: ignore[return-value]


class Empty(BaseIter[T], fused=True):
    __slots__ = ()

    def pull(self) -> Step[T]:
        return Step.done()


class Once(BaseIter[T], fused=True):
    __slots__ = ("_item", "_done")

    def __init__(self, item: T) -> None:
        self._item = item
        self._done = False

    def pull(self) -> Step[T]:
        if self._done:
            return Step.done()
        self._done = True
        return Step.item(self._item)


class Repeat(BaseIter[T], fused=True):
    """Infinite sequence of the same value."""

    __slots__ = ("_item",)

    def __init__(self, item: T) -> None:
        self._item = item

    def pull(self) -> Step[T]:
        return Step.item(self._item)


class FromFn(BaseIter[T], fused=True):
    """Infinite sequence calling a zero-argument function on every pull."""

    __slots__ = ("_f",)

    def __init__(self, f: Callable[[], T]) -> None:
        self._f = f

    def pull(self) -> Step[T]:
        return Step.item(self._f())


# ─────────────────────────────────────────────────────────────────────────────
# Factories
# ─────────────────────────────────────────────────────────────────────────────


def seq(data: Iterable[T]) -> BaseIter[T]:
    """Adapt an iterable; fused sequences are returned unchanged."""
    if isinstance(data, BaseIter):
        return data._fused()
    return Iter(iter(data))


def wrap(producer: object) -> BaseIter[object]:
    """Adapt a raw pull producer.

    The producer exposes ``pull()`` or ``next()`` (or is itself a zero-argument
    callable) returning Steps, mappings or objects with optional ``done`` and
    ``value``. A missing ``done`` means "not done".

    Raises:
        ConstructionError: If the producer has no usable pull method
    """
    if isinstance(producer, BaseIter):
        return producer._fused()
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


def from_fn(f: Callable[[], T]) -> FromFn[T]:
    return FromFn(f)
