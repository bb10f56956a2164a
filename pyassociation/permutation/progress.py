"""
Progress observation and cancellation for permutation tests.
"""

from __future__ import annotations

import threading
from typing import Callable


class PermutationProgress:
    """
    Thread-safe observer of a running permutation test.

    The engine advances `completed` after each evaluated batch of
    replicates; callers read it from any thread and may call cancel().
    Workers check for cancellation between iterations and the test then
    raises PermutationCancelled.

    Usage:
        progress = PermutationProgress(lambda done, total: print(done, total))
        threading.Timer(5.0, progress.cancel).start()
        permutation_test(df, ['a', 'b'], progress=progress)
    """

    def __init__(self, callback: Callable[[int, int], None] | None = None):
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._callback = callback
        self._completed = 0
        self._total = 0

    @property
    def completed(self) -> int:
        """Iterations finished so far; never decreases during a run."""
        with self._lock:
            return self._completed

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    @property
    def fraction(self) -> float:
        with self._lock:
            return self._completed / self._total if self._total else 0.0

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._cancel.set()

    def start(self, total: int) -> None:
        with self._lock:
            self._completed = 0
            self._total = int(total)

    def advance(self, k: int) -> None:
        with self._lock:
            self._completed += int(k)
            done, total = self._completed, self._total
        if self._callback is not None:
            self._callback(done, total)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "running"
        return f"PermutationProgress({self.completed}/{self.total}, {state})"
