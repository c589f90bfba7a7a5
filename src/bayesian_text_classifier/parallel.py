"""Task runners for independent, pure units of work.

A runner takes a function and a list of argument tuples, runs every call,
and returns the results in submission order once all of them have finished.
If any call raises, the runner stops waiting for the rest, cancels work that
has not started, and raises ``TaskError`` carrying the index of the failed
task. Runners never share mutable state between tasks.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from concurrent.futures import (
    FIRST_EXCEPTION,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from typing import Any, Optional

logger = logging.getLogger(__name__)


class TaskError(Exception):
    """A single task failed; ``__cause__`` holds the original exception."""

    def __init__(self, index: int, error: BaseException) -> None:
        super().__init__(f"Task {index} failed: {error!r}")
        self.index = index
        self.error = error


class TaskRunner(ABC):
    """Run independent computations and collect every result."""

    @abstractmethod
    def run(self, fn: Callable[..., Any], arg_list: Sequence[tuple]) -> list[Any]:
        """Call ``fn(*args)`` for each entry of ``arg_list``.

        Args:
            fn: A pure function. Must be picklable for process-based runners.
            arg_list: One argument tuple per task.

        Returns:
            Results in the same order as ``arg_list``.

        Raises:
            TaskError: If any task raised.
        """
        ...


class SerialRunner(TaskRunner):
    """Runs tasks one after another in the calling thread."""

    def run(self, fn: Callable[..., Any], arg_list: Sequence[tuple]) -> list[Any]:
        results = []
        for index, args in enumerate(arg_list):
            try:
                results.append(fn(*args))
            except Exception as exc:
                raise TaskError(index, exc) from exc
        return results


class PoolRunner(TaskRunner):
    """Runs tasks on a ``concurrent.futures`` pool.

    Args:
        max_workers: Pool size. Defaults to half the CPU count (at least 1).
        use_processes: Use a process pool (default) instead of threads.
    """

    def __init__(self, max_workers: Optional[int] = None, use_processes: bool = True) -> None:
        self.max_workers = max_workers or max(1, (os.cpu_count() or 2) // 2)
        self.use_processes = use_processes

    def _make_executor(self) -> Executor:
        if self.use_processes:
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(max_workers=self.max_workers)

    def run(self, fn: Callable[..., Any], arg_list: Sequence[tuple]) -> list[Any]:
        if not arg_list:
            return []

        kind = "process" if self.use_processes else "thread"
        logger.debug("Dispatching %d tasks to a %s pool of %d", len(arg_list), kind, self.max_workers)

        with self._make_executor() as executor:
            futures: list[Future] = [executor.submit(fn, *args) for args in arg_list]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            for index, future in enumerate(futures):
                if future in done and future.exception() is not None:
                    for other in pending:
                        other.cancel()
                    error = future.exception()
                    raise TaskError(index, error) from error

        return [future.result() for future in futures]
