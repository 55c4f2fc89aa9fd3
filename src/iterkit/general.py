"""Scalar helpers: async delay and bounded random numbers."""

from __future__ import annotations

import asyncio
import math
import random

from iterkit.foundation.errors import ConstructionError, ErrorCode

__all__ = ["sleep", "randfloat", "randint"]


async def sleep(ms: float) -> None:
    """Suspend for at least ms milliseconds."""
    await asyncio.sleep(ms / 1000)


def randfloat(low: float, high: float | None = None) -> float:
    """Random float in [low, high); with one argument, in [0, low).

    Equal bounds return that bound.

    Raises:
        ConstructionError: If low is greater than high
    """
    if high is None:
        low, high = 0, low
    if low > high:
        raise ConstructionError.create("randfloat", "lower bound must be smaller than upper bound",
                                       ErrorCode.INVALID_BOUNDS, details=f"low={low} high={high}")
    if low == high:
        return low
    return low + random.random() * (high - low)


def randint(low: float, high: float | None = None) -> int:
    """Random integer, floor of randfloat(low, high)."""
    return math.floor(randfloat(low, high))
