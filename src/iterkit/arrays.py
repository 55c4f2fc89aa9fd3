"""List helpers: swapping, shuffling, generation and padding.

Everything except swap() returns a new list and leaves its input untouched.

Example:
    >>> generate(4, lambda i: i * i)
    [0, 1, 4, 9]
    >>> right_pad([1, 2], 4, 0)
    [1, 2, 0, 0]
"""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from typing import Callable, TypeVar, Union

from iterkit.foundation.errors import ConstructionError, ErrorCode
from iterkit.runtime.observability import get_logger

T = TypeVar("T")
U = TypeVar("U")

Fill = Union[T, Callable[[int], T]]

_log = get_logger("iterkit.arrays")

__all__ = ["swap", "shuffle", "last_index", "last", "random_index", "generate", "right_pad"]


def swap(items: list[T], a: int, b: int) -> None:
    """Swap two elements in place."""
    items[a], items[b] = items[b], items[a]


def shuffle(items: Sequence[T]) -> list[T]:
    """Shuffled copy of items, made of 2 * len(items) random pair swaps."""
    shuffled = list(items)
    for _ in range(len(shuffled) * 2):
        swap(shuffled, random_index(shuffled), random_index(shuffled))
    return shuffled


def last_index(items: Sequence[object]) -> int:
    return len(items) - 1


def last(items: Sequence[T]) -> T | None:
    """Last element, or None for an empty sequence."""
    return items[-1] if items else None


def random_index(items: Sequence[object]) -> int:
    return math.floor(random.random() * len(items))


def generate(length: int, fill: Fill[T]) -> list[T]:
    """New list of length elements.

    Args:
        length: Number of elements, at least 1
        fill: Value for every element, or a function of the element index

    Raises:
        ConstructionError: If length is less than 1
    """
    if length < 1:
        _log.debug("rejected length", operation="generate", length=length)
        raise ConstructionError.create("generate", "length can't be less than 1", ErrorCode.INVALID_LENGTH,
                                       details=f"length={length}")
    if callable(fill):
        return [fill(i) for i in range(length)]
    return [fill] * length


def right_pad(items: Sequence[T], length: int, fill: Fill[U]) -> list[T | U]:
    """Copy of items extended to length; never shortened.

    Padding indices passed to a fill function start at 0.
    """
    if len(items) >= length:
        return list(items)
    return [*items, *generate(length - len(items), fill)]
