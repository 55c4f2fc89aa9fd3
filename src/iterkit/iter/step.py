"""Tagged pull result for lazy sequences.

A Step is either an item (``done=False`` with a value) or the exhausted
marker (``done=True``, no value). Raw results coming from foreign producers
are normalized once, by Step.of(), at the ingestion boundary:

- a missing or ``None`` ``done`` means "not done"
- ``value`` is never read when ``done`` is true

Example:
    >>> Step.item(3).map(lambda x: x + 1)
    Step.item(4)
    >>> Step.of({"value": 1})
    Step.item(1)
    >>> Step.of({"done": True}) is DONE
    True
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Callable, Generic, TypeVar, cast

T = TypeVar("T")
U = TypeVar("U")


class Step(Generic[T]):
    """Discriminated union of "next item" and "exhausted".

    Notes:
        - Uses __slots__, immutable by convention
        - The exhausted variant is the shared DONE singleton
        - ``value`` raises on a done step, use value_or() for a default
    """

    __slots__ = ("_value", "_done")

    def __init__(self, value: T | None, done: bool) -> None:
        """Private constructor. Use Step.item() or Step.done() instead."""
        self._value = value
        self._done = done

    # ─────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def item(value: U) -> Step[U]:
        return Step(value, False)

    @staticmethod
    def done() -> Step[U]:
        return cast("Step[U]", DONE)

    @staticmethod
    def of(raw: object) -> Step[object]:
        """Normalize a raw pull result into a Step.

        Accepts a Step, a mapping with optional ``done``/``value`` keys, or any
        object exposing ``done``/``value`` attributes.
        """
        if isinstance(raw, Step):
            return raw
        if isinstance(raw, Mapping):
            if raw.get("done"):
                return DONE
            return Step(raw.get("value"), False)
        if getattr(raw, "done", None):
            return DONE
        return Step(getattr(raw, "value", None), False)

    # ─────────────────────────────────────────────────────────────────
    # Inspection
    # ─────────────────────────────────────────────────────────────────

    @property
    def is_done(self) -> bool:
        return self._done

    @property
    def is_item(self) -> bool:
        return not self._done

    @property
    def value(self) -> T:
        """Item value.

        Raises:
            RuntimeError: If the step is done
        """
        if self._done:
            raise RuntimeError("Done step has no value")
        return cast(T, self._value)

    def value_or(self, default: U) -> T | U:
        return default if self._done else cast(T, self._value)

    def map(self, f: Callable[[T], U]) -> Step[U]:
        """Apply f to an item; done steps pass through untouched."""
        if self._done:
            return cast("Step[U]", self)
        return Step(f(cast(T, self._value)), False)

    # ─────────────────────────────────────────────────────────────────
    # Protocol Methods
    # ─────────────────────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Step):
            return NotImplemented
        if self._done or other._done:
            return self._done == other._done
        return bool(self._value == other._value)

    def __hash__(self) -> int:
        return hash((self._done, None if self._done else self._value))

    def __repr__(self) -> str:
        return "Step.done()" if self._done else f"Step.item({self._value!r})"


DONE: Step[object] = Step(None, True)
