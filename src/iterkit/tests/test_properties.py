"""Behavioural properties that must hold for every pipeline.

Each scenario runs twice: directly on the synchronous algebra, and bridged
through the asynchronous mirror, which must produce the same output.
"""

from __future__ import annotations

from typing import Callable

import pytest

from iterkit import BaseIter, Step, irange, seq, wrap
from iterkit.aio import from_sync

Scenario = Callable[[], BaseIter[object]]


def _producer() -> object:
    class Producer:
        def __init__(self) -> None:
            self.i = -1

        def next(self) -> dict[str, object]:
            self.i += 1
            return {"value": self.i} if self.i <= 3 else {"done": True}

    return Producer()


SCENARIOS: dict[str, Scenario] = {
    "take": lambda: irange(10).take(3),
    "skip": lambda: irange(5).skip(2),
    "map_take": lambda: seq([0, 1, 2, 3]).map(lambda x: x * 2).take(2),
    "chunks_exact_odd": lambda: irange(5).chunks_exact(2),
    "chunks_exact_even": lambda: irange(6).chunks_exact(2),
    "zip": lambda: seq([0, 1]).zip([2, 3, 4]),
    "wrap": lambda: wrap(_producer()),
    "flatten": lambda: seq([[0, 1], 2, irange(3, 5)]).flatten(),
    "step_by": lambda: irange(10).step_by(4),
    "skip_while_take_while": lambda: irange(20).skip_while(lambda x: x < 5).take_while(lambda x: x < 9),
    "chunks": lambda: irange(7).filter(lambda x: x != 3).chunks(4),
}


# ═════════════════════════════════════════════════════════════════════════════
# Counting Properties
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("n", [0, 1, 4, 9, 20])
@pytest.mark.parametrize("size", [0, 3, 9])
def test_take_count_is_bounded(n: int, size: int) -> None:
    """count(take(S, n)) == min(n, count(S))"""
    assert irange(size).take(n).count() == min(n, size)


@pytest.mark.parametrize("n", [0, 1, 4, 9, 20])
@pytest.mark.parametrize("size", [0, 3, 9])
def test_skip_drops_prefix(n: int, size: int) -> None:
    """collect(skip(S, n)) == collect(S)[min(n, len(S)):]"""
    items = list(range(size))
    assert seq(items).skip(n).collect() == items[min(n, size):]


def test_map_take_is_lazy() -> None:
    calls: list[int] = []

    def f(x: int) -> int:
        calls.append(x)
        return x

    pipeline = seq([0, 1, 2, 3]).map(f).take(2)
    assert calls == []

    assert pipeline.collect() == [0, 1]
    assert calls == [0, 1]


def test_peek_then_pull() -> None:
    p = irange(3).peekable()
    first, second = p.peek(), p.peek()

    assert first == second == Step.item(0)
    assert p.pull() == first
    assert p.pull() == Step.item(1)


# ═════════════════════════════════════════════════════════════════════════════
# Concrete Outputs
# ═════════════════════════════════════════════════════════════════════════════


def test_chunks_exact_outputs() -> None:
    odd = irange(5).chunks_exact(2)
    assert odd.collect() == [[0, 1], [2, 3]]
    assert odd.remainder == [4]

    even = irange(6).chunks_exact(2)
    assert even.collect() == [[0, 1], [2, 3], [4, 5]]
    assert even.remainder == []


def test_zip_output() -> None:
    assert seq([0, 1]).zip([2, 3, 4]).collect() == [(0, 2), (1, 3)]


def test_wrapped_producer_output() -> None:
    assert wrap(_producer()).collect() == [0, 1, 2, 3]


@pytest.mark.parametrize("name", sorted(SCENARIOS))
def test_fused_termination(name: str) -> None:
    s = SCENARIOS[name]()
    s.consume()
    assert all(s.pull().is_done for _ in range(3))


# ═════════════════════════════════════════════════════════════════════════════
# Sync / Async Parity
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize("name", sorted(SCENARIOS))
async def test_async_bridge_parity(name: str) -> None:
    expected = SCENARIOS[name]().collect()
    assert await SCENARIOS[name]().to_async().collect() == expected


@pytest.mark.asyncio
async def test_async_mirror_parity() -> None:
    """Same pipeline built on the async algebra directly."""
    sync = irange(12).filter(lambda x: x % 2 == 0).map(lambda x: x + 1).chunks(2).collect()
    mirrored = await from_sync(range(12)).filter(lambda x: x % 2 == 0).map(lambda x: x + 1).chunks(2).collect()
    assert mirrored == sync


@pytest.mark.asyncio
async def test_async_chunks_exact_remainder_parity() -> None:
    c = from_sync(range(5)).chunks_exact(2)
    assert await c.collect() == [[0, 1], [2, 3]]
    assert c.remainder == [4]
