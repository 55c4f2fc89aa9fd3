"""Stateful combinators.

Each combinator is an explicit state machine over its upstream:

    - Peekable: one-slot lookahead buffer
    - Skip, SkipWhile, StepBy: first-pull flags driving advance_by
    - Take, TakeWhile: counters and permanent done flags
    - Flatten, FlatMap: current inner sequence cursor
    - Chunks, ChunksExact: bounded N-slot accumulators

Size arguments are validated eagerly, so a bad size fails where the
pipeline is built rather than where it is drained.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Callable, TypeVar

from iterkit.foundation.errors import ConstructionError, ErrorCode
from iterkit.runtime.observability import get_logger

from .base import BaseIter, Predicate
from .sources import Empty, Iter, Once
from .step import Step

T = TypeVar("T")
U = TypeVar("U")

_log = get_logger("iterkit.iter.stateful")

# Iterable, but flattened as single values
ATOMIC_TYPES: tuple[type, ...] = (str, bytes, bytearray)

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


def require_positive(operation: str, name: str, n: int, code: ErrorCode) -> None:
    if n < 1:
        _log.debug("rejected argument", operation=operation, **{name: n})
        raise ConstructionError.create(operation, f"{name} must be at least 1", code, details=f"{name}={n}")


# ─────────────────────────────────────────────────────────────────────────────
# Lookahead
# ─────────────────────────────────────────────────────────────────────────────


class Peekable(BaseIter[T], fused=True):
    """Sequence with a one-slot lookahead.

    peek() pulls upstream only when the slot is empty; pull() always drains
    the slot before pulling upstream.
    """

    __slots__ = ("_data", "_peeked")

    def __init__(self, data: BaseIter[T]) -> None:
        self._data = data
        self._peeked: Step[T] | None = None

    def peek(self) -> Step[T]:
        if self._peeked is None:
            self._peeked = self._data.pull()
        return self._peeked

    def pull(self) -> Step[T]:
        step, self._peeked = self._peeked, None
        return step if step is not None else self._data.pull()


# ─────────────────────────────────────────────────────────────────────────────
# Skipping
# ─────────────────────────────────────────────────────────────────────────────


class Skip(BaseIter[T], fused=True):
    """Discards n items on the first pull, then passes through."""

    __slots__ = ("_data", "_n", "_skipped")

    def __init__(self, data: BaseIter[T], n: int) -> None:
        self._data = data
        self._n = n
        self._skipped = False

    def pull(self) -> Step[T]:
        if not self._skipped:
            self._skipped = True
            if not self._data.advance_by(self._n):
                return Step.done()
        return self._data.pull()


class SkipWhile(BaseIter[T], fused=True):
    """Discards items while predicate holds, on the first pull only.

    Once an item fails the predicate the combinator unlocks for good; later
    items are never tested.
    """

    __slots__ = ("_data", "_predicate", "_unlocked")

    def __init__(self, data: BaseIter[T], predicate: Predicate[T]) -> None:
        self._data = data
        self._predicate = predicate
        self._unlocked = False

    def pull(self) -> Step[T]:
        if self._unlocked:
            return self._data.pull()
        while not (step := self._data.pull()).is_done:
            if not self._predicate(step.value):
                break
        self._unlocked = True
        return step


class StepBy(BaseIter[T], fused=True):
    """First item, then every step-th item after it."""

    __slots__ = ("_data", "_step", "_first")

    def __init__(self, data: BaseIter[T], step: int) -> None:
        require_positive("step_by", "step", step, ErrorCode.INVALID_STEP)
        self._data = data
        self._step = step
        self._first = True

    def pull(self) -> Step[T]:
        if self._first:
            self._first = False
            return self._data.pull()
        if not self._data.advance_by(self._step - 1):
            return Step.done()
        return self._data.pull()


# ─────────────────────────────────────────────────────────────────────────────
# Limiting
# ─────────────────────────────────────────────────────────────────────────────


class Take(BaseIter[T], fused=True):
    """At most limit items; never pulls upstream once the limit is reached."""

    __slots__ = ("_data", "_remaining")

    def __init__(self, data: BaseIter[T], limit: int) -> None:
        self._data = data
        self._remaining = limit

    def pull(self) -> Step[T]:
        if self._remaining <= 0:
            return Step.done()
        step = self._data.pull()
        self._remaining = 0 if step.is_done else self._remaining - 1
        return step


class TakeWhile(BaseIter[T], fused=True):
    """Items while predicate holds.

    The first rejected item is consumed from upstream and discarded; after
    it upstream is never pulled again.
    """

    __slots__ = ("_data", "_predicate", "_done")

    def __init__(self, data: BaseIter[T], predicate: Predicate[T]) -> None:
        self._data = data
        self._predicate = predicate
        self._done = False

    def pull(self) -> Step[T]:
        if self._done:
            return Step.done()
        step = self._data.pull()
        if not step.is_done and self._predicate(step.value):
            return step
        self._done = True
        return Step.done()


# ─────────────────────────────────────────────────────────────────────────────
# Flattening
# ─────────────────────────────────────────────────────────────────────────────


def to_inner(value: object) -> BaseIter[object]:
    """Convert a flattened value into an inner sequence.

    Sequences are used fused, other iterables (except str/bytes) are adapted,
    anything else becomes a single-item sequence.
    """
    if isinstance(value, BaseIter):
        return value._fused()
    if isinstance(value, Iterable) and not isinstance(value, ATOMIC_TYPES):
        return Iter(iter(value))
    return Once(value)


class Flatten(BaseIter[T], fused=True):
    __slots__ = ("_data", "_current", "_done")

    def __init__(self, data: BaseIter[object]) -> None:
        self._data = data
        self._current: BaseIter[T] = Empty()
        self._done = False

    def _inner(self, value: object) -> BaseIter[T]:
        return to_inner(value)  # type: ignore[return-value]

    def pull(self) -> Step[T]:
        while not self._done:
            step = self._current.pull()
            if not step.is_done:
                return step
            outer = self._data.pull()
            if outer.is_done:
                self._done = True
            else:
                self._current = self._inner(outer.value)
        return Step.done()


class FlatMap(Flatten[U]):
    """Flatten over f(value) for every outer value."""

    __slots__ = ("_f",)

    def __init__(self, data: BaseIter[T], f: Callable[[T], Iterable[U] | U]) -> None:
        super().__init__(data)
        self._f = f

    def _inner(self, value: object) -> BaseIter[U]:
        return to_inner(self._f(value))  # type: ignore[arg-type, return-value]


# ─────────────────────────────────────────────────────────────────────────────
# Chunking
# ─────────────────────────────────────────────────────────────────────────────


class Chunks(BaseIter[list[T]], fused=True):
    """Lists of size items; the last list may be shorter."""

    __slots__ = ("_data", "_size", "_done")

    def __init__(self, data: BaseIter[T], size: int) -> None:
        require_positive("chunks", "size", size, ErrorCode.INVALID_SIZE)
        self._data = data
        self._size = size
        self._done = False

    def pull(self) -> Step[list[T]]:
        if self._done:
            return Step.done()
        chunk: list[T] = []
        while len(chunk) < self._size:
            step = self._data.pull()
            if step.is_done:
                self._done = True
                break
            chunk.append(step.value)
        return Step.item(chunk) if chunk else Step.done()


class ChunksExact(BaseIter[list[T]], fused=True):
    """Lists of exactly size items.

    A short final group is not emitted; it is stored in ``remainder`` once
    upstream exhaustion has been observed. ``remainder`` is empty until then,
    and stays empty when the items divide evenly.
    """

    __slots__ = ("_data", "_size", "_done", "remainder")

    def __init__(self, data: BaseIter[T], size: int) -> None:
        require_positive("chunks_exact", "size", size, ErrorCode.INVALID_SIZE)
        self._data = data
        self._size = size
        self._done = False
        self.remainder: list[T] = []

    def pull(self) -> Step[list[T]]:
        if self._done:
            return Step.done()
        chunk: list[T] = []
        while len(chunk) < self._size:
            step = self._data.pull()
            if step.is_done:
                self._done = True
                self.remainder = chunk
                if chunk:
                    _log.debug("remainder captured", operation="chunks_exact", size=self._size, remainder=len(chunk))
                return Step.done()
            chunk.append(step.value)
        return Step.item(chunk)
