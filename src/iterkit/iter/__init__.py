"""Synchronous lazy sequences.

A sequence is any object with a ``pull()`` method returning a Step. Sources
create sequences, combinator methods wrap them, terminal operations drain them:

    >>> from iterkit.iter import irange, seq
    >>> irange(10).filter(lambda n: n % 3 == 0).map(str).join(",")
    '0,3,6,9'
    >>> seq("abcde").chunks_exact(2).collect()
    [['a', 'b'], ['c', 'd']]
"""

from .base import BaseIter, Predicate
from .range import Range, irange, map_range, range_to_array, reduce_range
from .sources import Empty, FromFn, Iter, Once, Repeat, Wrap, empty, from_fn, once, repeat, seq, wrap
from .stateful import (
    Chunks,
    ChunksExact,
    FlatMap,
    Flatten,
    Peekable,
    Skip,
    SkipWhile,
    StepBy,
    Take,
    TakeWhile,
)
from .stateless import Chain, Enumerate, Filter, FilterMap, Inspect, Map, Zip
from .step import DONE, Step

__all__ = [
    # Protocol
    "Step", "DONE", "BaseIter", "Predicate",
    # Sources
    "Iter", "Wrap", "Empty", "Once", "Repeat", "FromFn",
    "seq", "wrap", "empty", "once", "repeat", "from_fn",
    # Range
    "Range", "irange", "map_range", "reduce_range", "range_to_array",
    # Stateless
    "Map", "Filter", "FilterMap", "Enumerate", "Inspect", "Chain", "Zip",
    # Stateful
    "Peekable", "Skip", "SkipWhile", "StepBy", "Take", "TakeWhile",
    "Flatten", "FlatMap", "Chunks", "ChunksExact",
]
