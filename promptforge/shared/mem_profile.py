"""Memory accounting for the vertex-heavy stages (M2 geometry, M5 skinning).

``tracemalloc_snapshot(label)`` wraps a block, yields a ``MemoryDelta`` that
is filled in on exit and logs ``[mem] <label>: ...``.  The pipeline uses it
per request when ``PipelineConfig.trace_memory`` is on.

``@profile_memory`` hands a kernel to ``memory_profiler`` for a line table,
but only under ``PROFILE_MEMORY=1``::

    PROFILE_MEMORY=1 python main.py "a fractal cathedral"
"""
from __future__ import annotations

import contextlib
import logging
import os
import tracemalloc
from dataclasses import dataclass
from typing import Iterator

log = logging.getLogger(__name__)

_ENABLED_VALUES = ("1", "true", "yes", "on")
_PROFILE_ACTIVE = os.environ.get("PROFILE_MEMORY", "").strip().lower() in _ENABLED_VALUES

_KB = 1024
_MB = 1024 * 1024


@dataclass(slots=True)
class MemoryDelta:
    label: str
    before: int = 0      # bytes traced when the block was entered
    after: int = 0
    peak: int = 0        # highest traced size seen while the block ran

    @property
    def growth(self) -> int:
        return self.after - self.before


def is_profiling_enabled() -> bool:
    return _PROFILE_ACTIVE


@contextlib.contextmanager
def tracemalloc_snapshot(label: str, top_n: int = 5) -> Iterator[MemoryDelta]:
    """Measure the traced heap across the block.

    Nested calls share the outer trace; only the call that started
    ``tracemalloc`` stops it.  The biggest allocation sites are logged at
    DEBUG.
    """
    owner = not tracemalloc.is_tracing()
    if owner:
        tracemalloc.start(10)
    else:
        tracemalloc.reset_peak()

    delta = MemoryDelta(label)
    baseline = tracemalloc.take_snapshot()
    delta.before = tracemalloc.get_traced_memory()[0]
    try:
        yield delta
    finally:
        delta.after, delta.peak = tracemalloc.get_traced_memory()
        log.info("[mem] %s: %+d KB, peak %.2f MB", label, delta.growth // _KB, delta.peak / _MB)

        if log.isEnabledFor(logging.DEBUG):
            changes = tracemalloc.take_snapshot().compare_to(baseline, "lineno")
            for stat in [s for s in changes if s.size_diff][:top_n]:
                where = stat.traceback[0] if stat.traceback else "?"
                log.debug("[mem]    %+9.1f KB  %s", stat.size_diff / _KB, where)

        if owner:
            tracemalloc.stop()


def profile_memory(fn):
    """Line-level RAM table from ``memory_profiler`` under ``PROFILE_MEMORY=1``.

    Returns ``fn`` untouched when the variable is unset, or when the
    optional ``profiling`` extra is not installed (with a warning).
    """
    if not _PROFILE_ACTIVE:
        return fn
    try:
        from memory_profiler import profile  # type: ignore[import-untyped]
    except ImportError:
        log.warning("[mem] PROFILE_MEMORY is set but memory-profiler is missing; "
                    "install promptforge[profiling] to profile %s", fn.__qualname__)
        return fn
    log.debug("[mem] profiling %s.%s", fn.__module__, fn.__qualname__)
    return profile(fn)
