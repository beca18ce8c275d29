"""Background model operations polled from the game tick."""

from __future__ import annotations

from concurrent.futures import Executor, Future, ThreadPoolExecutor
import time
from typing import Any, Callable


class ModelTask:
    """A model load/train/save running off the tick thread.

    The tick loop polls :meth:`done` and collects the outcome with
    :meth:`result`. There is no cancellation; a task past its timeout keeps
    running but its result is ignored.
    """

    def __init__(self, name: str, future: Future, timeout: float | None = None):
        self.name = name
        self.future = future
        self.timeout = timeout
        self.started_at = time.monotonic()

    @classmethod
    def submit(
        cls,
        executor: Executor,
        name: str,
        fn: Callable[..., Any],
        *args: Any,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> "ModelTask":
        return cls(name, executor.submit(fn, *args, **kwargs), timeout=timeout)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    @property
    def timed_out(self) -> bool:
        return self.timeout is not None and not self.future.done() and self.elapsed > self.timeout

    def done(self) -> bool:
        return self.future.done() or self.timed_out

    def result(self) -> Any:
        """Return the task's value, re-raising its exception or a ``TimeoutError``."""
        if self.timed_out:
            raise TimeoutError(f"{self.name} did not finish within {self.timeout:.1f}s")
        return self.future.result()


def build_model_executor() -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix="GorillasModel")
