"""Tests for synchronous sources, combinators and terminal operations."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from iterkit import ConstructionError, ErrorCode, Step, empty, from_fn, irange, once, repeat, seq, wrap
from iterkit.iter import BaseIter, ChunksExact, Peekable


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────


class Counted(BaseIter[int]):
    """Sequence over a list that records how often it was pulled."""

    __slots__ = ("_items", "_i", "pulls")

    def __init__(self, items: list[int]) -> None:
        self._items = items
        self._i = 0
        self.pulls = 0

    def pull(self) -> Step[int]:
        self.pulls += 1
        if self._i >= len(self._items):
            return Step.done()
        self._i += 1
        return Step.item(self._items[self._i - 1])


class Unfused:
    """Raw producer that keeps yielding after it reported done."""

    def __init__(self) -> None:
        self.calls = 0

    def next(self) -> dict[str, object]:
        self.calls += 1
        return {"done": True} if self.calls == 3 else {"value": self.calls}


class Flaky(BaseIter[int]):
    """Sequence that yields again after reporting done."""

    __slots__ = ("_steps",)

    def __init__(self) -> None:
        self._steps = [Step.item(1), Step.done(), Step.item(3), Step.item(4)]

    def pull(self) -> Step[int]:
        return self._steps.pop(0) if self._steps else Step.done()


@pytest.fixture
def counted() -> Counted:
    return Counted([0, 1, 2, 3, 4])


# ─────────────────────────────────────────────────────────────────────────────
# Sources
# ─────────────────────────────────────────────────────────────────────────────


def test_seq_adapts_iterables() -> None:
    assert seq([1, 2]).collect() == [1, 2]
    assert seq("ab").collect() == ["a", "b"]
    assert seq(x * 2 for x in range(3)).collect() == [0, 2, 4]


def test_seq_returns_fused_sequences_unchanged() -> None:
    s = irange(3)
    assert seq(s) is s
    assert wrap(s) is s


def test_seq_and_wrap_fuse_foreign_sequences() -> None:
    assert not Flaky.fused
    for adapt in (seq, wrap):
        s = adapt(Flaky())
        assert s.collect() == [1]
        assert s.pull().is_done
        assert s.pull().is_done


def test_leaves() -> None:
    assert empty().collect() == []
    assert once(5).collect() == [5]
    assert repeat("x").take(3).collect() == ["x", "x", "x"]

    n = iter(range(100))
    assert from_fn(lambda: next(n)).take(4).collect() == [0, 1, 2, 3]


def test_once_is_fused() -> None:
    s = once(1)
    assert s.pull() == Step.item(1)
    assert s.pull().is_done
    assert s.pull().is_done


def test_native_iteration() -> None:
    assert list(irange(3)) == [0, 1, 2]
    assert [x for x in seq("ab").enumerate()] == [(0, "a"), (1, "b")]


def test_wrap_next_producer() -> None:
    class Producer:
        def __init__(self) -> None:
            self.i = -1

        def next(self) -> dict[str, object]:
            self.i += 1
            return {"value": self.i} if self.i < 4 else {"done": True}

    assert wrap(Producer()).collect() == [0, 1, 2, 3]


def test_wrap_pull_producer_and_callable() -> None:
    class Producer:
        def __init__(self) -> None:
            self.items = iter([1, 2])

        def pull(self) -> Step[int]:
            return Step.item(v) if (v := next(self.items, None)) is not None else Step.done()

    assert wrap(Producer()).collect() == [1, 2]

    items = iter("xy")
    assert wrap(lambda: {"value": c} if (c := next(items, None)) else {"done": True}).collect() == ["x", "y"]


def test_wrap_fuses_unfused_producer() -> None:
    producer = Unfused()
    s = wrap(producer)

    assert s.collect() == [1, 2]
    assert s.pull().is_done
    assert s.pull().is_done
    assert producer.calls == 3


def test_wrap_rejects_non_producer() -> None:
    with pytest.raises(ConstructionError) as exc_info:
        wrap(42)
    assert exc_info.value.code is ErrorCode.INVALID_PRODUCER


# ─────────────────────────────────────────────────────────────────────────────
# Range
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        ((4,), [0, 1, 2, 3]),
        ((2, 5), [2, 3, 4]),
        ((0, 10, 3), [0, 3, 6, 9]),
        ((5, 0, -2), [5, 3, 1]),
        ((3, 3), []),
        ((5, 0), []),
        ((0, 5, -1), []),
        ((-3,), []),
    ],
)
def test_irange(args: tuple[int, ...], expected: list[int]) -> None:
    assert irange(*args).collect() == expected


def test_irange_len_tracks_cursor() -> None:
    r = irange(0, 10, 3)
    assert len(r) == 4
    r.pull()
    assert len(r) == 3
    assert len(irange(5, 0)) == 0


def test_irange_zero_step() -> None:
    with pytest.raises(ConstructionError, match="step can't be 0") as exc_info:
        irange(0, 10, 0)
    assert exc_info.value.code is ErrorCode.INVALID_STEP


def test_range_helpers() -> None:
    from iterkit import map_range, range_to_array, reduce_range

    assert map_range(irange(3), lambda n: n * 10).collect() == [0, 10, 20]
    assert reduce_range(irange(1, 4), lambda total, value, index: total + value) == 6
    assert reduce_range(irange(4), lambda total, value, index: total + value * index) == 14
    assert reduce_range(irange(3), lambda total, value, index: f"{total}{value}", "") == "012"
    assert range_to_array(irange(3, 0, -1)) == [3, 2, 1]


# ─────────────────────────────────────────────────────────────────────────────
# Stateless Combinators
# ─────────────────────────────────────────────────────────────────────────────


def test_map_filter_filter_map() -> None:
    assert seq([1, 2, 3]).map(lambda x: x * 2).collect() == [2, 4, 6]
    assert seq(range(10)).filter(lambda x: x % 3 == 0).collect() == [0, 3, 6, 9]
    assert seq(range(6)).filter_map(lambda x: x % 2 == 1, str).collect() == ["1", "3", "5"]


def test_enumerate_index_is_local() -> None:
    s = seq("abc").enumerate()
    assert s.pull() == Step.item((0, "a"))
    assert seq("xy").enumerate().collect() == [(0, "x"), (1, "y")]
    assert s.collect() == [(1, "b"), (2, "c")]


def test_inspect_sees_every_item() -> None:
    seen: list[int] = []
    assert seq([1, 2]).inspect(seen.append).collect() == [1, 2]
    assert seen == [1, 2]


def test_chain_never_returns_to_first(counted: Counted) -> None:
    s = counted.chain([9])
    assert s.collect() == [0, 1, 2, 3, 4, 9]
    pulls = counted.pulls
    assert s.pull().is_done
    assert counted.pulls == pulls


def test_zip_stops_on_shorter_side() -> None:
    assert seq([0, 1, 2]).zip("ab").collect() == [(0, "a"), (1, "b")]
    assert seq([]).zip([1]).collect() == []


def test_zip_latches_done() -> None:
    left, right = Counted([1, 2, 3]), Counted([1])
    z = left.zip(right)

    assert z.collect() == [(1, 1)]
    pulls = (left.pulls, right.pulls)
    assert z.pull().is_done
    assert (left.pulls, right.pulls) == pulls


def test_consumer_exceptions_propagate() -> None:
    def boom(x: int) -> int:
        raise KeyError(x)

    with pytest.raises(KeyError):
        seq([1]).map(boom).collect()
    with pytest.raises(KeyError):
        seq([1]).filter(boom).collect()


# ─────────────────────────────────────────────────────────────────────────────
# Stateful Combinators
# ─────────────────────────────────────────────────────────────────────────────


def test_peekable_is_idempotent(counted: Counted) -> None:
    p = counted.peekable()
    assert isinstance(p, Peekable)

    assert p.peek() == Step.item(0)
    assert p.peek() == Step.item(0)
    assert counted.pulls == 1
    assert p.pull() == Step.item(0)
    assert p.pull() == Step.item(1)
    assert counted.pulls == 2


def test_peekable_done() -> None:
    p = empty().peekable()
    assert p.peek().is_done
    assert p.pull().is_done
    assert p.pull().is_done


@pytest.mark.parametrize(("n", "expected"), [(0, [0, 1, 2, 3, 4]), (2, [2, 3, 4]), (5, []), (9, []), (-1, [0, 1, 2, 3, 4])])
def test_skip(counted: Counted, n: int, expected: list[int]) -> None:
    assert counted.skip(n).collect() == expected


def test_skip_is_lazy(counted: Counted) -> None:
    counted.skip(3)
    assert counted.pulls == 0


def test_skip_while_unlocks_once() -> None:
    assert seq([1, 2, 5, 1, 7]).skip_while(lambda x: x < 3).collect() == [5, 1, 7]
    assert seq([1, 2]).skip_while(lambda x: x < 3).collect() == []


@pytest.mark.parametrize(("step", "expected"), [(1, [0, 1, 2, 3, 4]), (2, [0, 2, 4]), (3, [0, 3]), (10, [0])])
def test_step_by(counted: Counted, step: int, expected: list[int]) -> None:
    assert counted.step_by(step).collect() == expected


@pytest.mark.parametrize("step", [0, -2])
def test_step_by_rejects_small_steps(step: int) -> None:
    with pytest.raises(ConstructionError) as exc_info:
        irange(3).step_by(step)
    assert exc_info.value.code is ErrorCode.INVALID_STEP


def test_take_stops_pulling(counted: Counted) -> None:
    t = counted.take(2)
    assert t.collect() == [0, 1]
    assert t.pull().is_done
    assert counted.pulls == 2


@pytest.mark.parametrize("limit", [0, -3])
def test_take_non_positive_never_pulls(counted: Counted, limit: int) -> None:
    assert counted.take(limit).collect() == []
    assert counted.pulls == 0


def test_take_while_discards_rejected_item(counted: Counted) -> None:
    t = counted.take_while(lambda x: x < 2)
    assert t.collect() == [0, 1]
    assert t.pull().is_done
    assert counted.pulls == 3
    assert counted.collect() == [3, 4]


def test_flatten_mixed_values() -> None:
    s = seq([[1, 2], [], irange(3, 5), 6, "ab", (7,)])
    assert s.flatten().collect() == [1, 2, 3, 4, 6, "ab", 7]


def test_flatten_empty_inners() -> None:
    assert seq([[], [], []]).flatten().collect() == []
    assert empty().flatten().collect() == []


def test_flatten_is_single_level() -> None:
    assert seq([[1, [2]], [[3]]]).flatten().collect() == [1, [2], [3]]


def test_flat_map() -> None:
    assert seq([1, 2, 3]).flat_map(lambda n: [n] * n).collect() == [1, 2, 2, 3, 3, 3]
    assert seq([1, 2]).flat_map(lambda n: n * 10).collect() == [10, 20]


def test_flat_map_is_lazy_over_infinite_outer() -> None:
    assert repeat(2).flat_map(lambda n: irange(n)).take(5).collect() == [0, 1, 0, 1, 0]


def test_chunks() -> None:
    assert irange(5).chunks(2).collect() == [[0, 1], [2, 3], [4]]
    assert irange(4).chunks(2).collect() == [[0, 1], [2, 3]]
    assert empty().chunks(3).collect() == []


def test_chunks_exact_remainder() -> None:
    c = irange(5).chunks_exact(2)
    assert isinstance(c, ChunksExact)
    assert c.remainder == []

    assert c.collect() == [[0, 1], [2, 3]]
    assert c.remainder == [4]


def test_chunks_exact_remainder_set_only_after_exhaustion() -> None:
    c = irange(3).chunks_exact(2)
    assert c.pull() == Step.item([0, 1])
    assert c.remainder == []
    assert c.pull().is_done
    assert c.remainder == [2]


@pytest.mark.parametrize("size", [0, -1])
def test_chunk_sizes_validated(size: int) -> None:
    with pytest.raises(ConstructionError) as exc_info:
        irange(3).chunks(size)
    assert exc_info.value.code is ErrorCode.INVALID_SIZE
    with pytest.raises(ConstructionError):
        irange(3).chunks_exact(size)


# ─────────────────────────────────────────────────────────────────────────────
# Terminal Operations
# ─────────────────────────────────────────────────────────────────────────────


def test_advance_by(counted: Counted) -> None:
    assert counted.advance_by(2)
    assert counted.pull() == Step.item(2)
    assert not counted.advance_by(5)
    assert counted.advance_by(0)
    assert counted.advance_by(-1)


def test_fold_count_last() -> None:
    assert irange(5).fold(lambda acc, x: acc + x, 0) == 10
    assert irange(5).fold(lambda acc, x: [*acc, x], []) == [0, 1, 2, 3, 4]
    assert irange(7).count() == 7
    assert irange(7).last() == 6
    assert empty().last() is None
    assert empty().count() == 0


@pytest.mark.parametrize(("n", "expected"), [(0, 0), (3, 3), (4, 4), (5, None), (-2, 0)])
def test_nth(counted: Counted, n: int, expected: int | None) -> None:
    assert counted.nth(n) == expected


def test_nth_consumes_prefix(counted: Counted) -> None:
    assert counted.nth(1) == 1
    assert counted.nth(1) == 3


def test_join() -> None:
    assert irange(4).join(", ") == "0, 1, 2, 3"
    assert irange(3).join() == "012"
    assert empty().join("-") == ""
    assert seq([None, 1.5]).join("|") == "None|1.5"


def test_partition() -> None:
    assert irange(6).partition(lambda x: x % 2 == 0) == ([0, 2, 4], [1, 3, 5])
    assert empty().partition(bool) == ([], [])


def test_all_some_find_short_circuit(counted: Counted) -> None:
    assert counted.some(lambda x: x == 1)
    assert counted.pulls == 2

    assert not seq([1, 2, 3]).all(lambda x: x < 2)
    assert seq([]).all(lambda x: False)
    assert not seq([]).some(lambda x: True)
    assert seq([1, 2, 3]).find(lambda x: x > 1) == 2
    assert seq([1, 2, 3]).find(lambda x: x > 5) is None


def test_for_each_and_consume(counted: Counted) -> None:
    seen: list[int] = []
    irange(3).for_each(seen.append)
    assert seen == [0, 1, 2]

    counted.consume()
    assert counted.pull().is_done


def test_collect_returns_new_list() -> None:
    data = [1, 2]
    result = seq(data).collect()
    assert result == data
    assert result is not data


def test_repr() -> None:
    assert repr(irange(0, 4, 2)) == "Range(0, 4, 2)"
    assert repr(seq([1]).map(str)) == "<Map>"


# ─────────────────────────────────────────────────────────────────────────────
# Fusing
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("build", "expected"),
    [
        (lambda s: s.map(lambda x: x * 10), [10]),
        (lambda s: s.filter(lambda x: x > 0), [1]),
        (lambda s: s.enumerate(), [(0, 1)]),
        (lambda s: s.peekable(), [1]),
        (lambda s: s.skip(0), [1]),
        (lambda s: s.step_by(1), [1]),
        (lambda s: s.take(10), [1]),
        (lambda s: s.skip_while(lambda x: x > 5), [1]),
    ],
)
def test_combinators_stay_done_over_foreign_sequence(
    build: Callable[[BaseIter[int]], BaseIter[object]], expected: list[object]
) -> None:
    s = build(Flaky())
    assert s.collect() == expected
    assert s.pull().is_done
    assert s.pull().is_done


def test_flatten_fuses_foreign_inner_sequences() -> None:
    assert seq([Flaky(), Flaky()]).flatten().collect() == [1, 1]
    assert seq([0, 1]).flat_map(lambda _: Flaky()).collect() == [1, 1]
