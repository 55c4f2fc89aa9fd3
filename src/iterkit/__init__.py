"""iterkit - Lazy sequence combinators with a synchronous and an asynchronous algebra.

Every sequence exposes a single ``pull()`` returning a Step (an item or done).
Combinators wrap sequences lazily; nothing is pulled until a terminal
operation such as collect(), fold() or find() runs.

Quick Start:
    >>> from iterkit import irange, seq
    >>>
    >>> irange(10).map(lambda n: n * n).filter(lambda n: n % 2 == 0).collect()
    [0, 4, 16, 36, 64]
    >>> seq([1, 2, 3]).zip("abc").collect()
    [(1, 'a'), (2, 'b'), (3, 'c')]

Foreign Producers:
    >>> from iterkit import wrap
    >>>
    >>> class Counter:
    ...     def __init__(self): self.i = 0
    ...     def next(self):
    ...         self.i += 1
    ...         return {"value": self.i} if self.i <= 3 else {"done": True}
    >>> wrap(Counter()).collect()
    [1, 2, 3]

Async Mirror:
    >>> import asyncio
    >>> from iterkit import from_sync
    >>>
    >>> async def main():
    ...     return await from_sync(range(6)).chunks_exact(4).collect()
    >>> asyncio.run(main())
    [[0, 1, 2, 3]]

Configuration (environment):
    ITERKIT_LOG_LEVEL=DEBUG ITERKIT_LOG_FORMAT=json
"""

from __future__ import annotations

__version__ = "0.3.0"

# Sequences
from .iter import (
    DONE,
    BaseIter,
    Range,
    Step,
    empty,
    from_fn,
    irange,
    map_range,
    once,
    range_to_array,
    reduce_range,
    repeat,
    seq,
    wrap,
)

# Async mirror
from .aio import AsyncBaseIter, aseq, from_sync

# Errors
from .foundation.errors import ConstructionError, ErrorCode, IterError, IterException

# Configuration
from .foundation.config import IterkitSettings, LoggingSettings, clear_settings_cache, get_settings

# Observability
from .runtime.observability import configure_from_settings, configure_logging, get_logger

# Helpers
from . import arrays, general

__all__ = [
    "__version__",
    # Sequences
    "Step", "DONE", "BaseIter", "Range",
    "seq", "wrap", "empty", "once", "repeat", "from_fn",
    "irange", "map_range", "reduce_range", "range_to_array",
    # Async mirror
    "AsyncBaseIter", "aseq", "from_sync",
    # Errors
    "ConstructionError", "ErrorCode", "IterError", "IterException",
    # Configuration
    "IterkitSettings", "LoggingSettings", "clear_settings_cache", "get_settings",
    # Observability
    "configure_logging", "configure_from_settings", "get_logger",
    # Helpers
    "arrays", "general",
]
