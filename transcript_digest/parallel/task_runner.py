"""
Task runner used by the chunk orchestrator.

Submits (task_id, payload) pairs to an ExecutorStrategy and collects one
TaskResult per task in completion order. A task that raises is recorded
as a failed TaskResult; it never aborts the others.

Usage:
    runner = ParallelTaskRunner(
        strategy=SequentialStrategy(),
        on_task_complete=lambda task_id, result: print(f"{task_id} done"),
    )
    results = runner.run(process_chunk, [("chunk-0", chunk0), ("chunk-1", chunk1)])
"""

import threading
from concurrent.futures import as_completed
from dataclasses import dataclass
from typing import Any, Callable

from transcript_digest.logging_config import error
from transcript_digest.parallel.executor_strategy import ExecutorStrategy


@dataclass
class TaskResult:
    """
    Outcome of one submitted task.

    Attributes:
        task_id: Identifier supplied with the payload.
        success: True if the task returned normally.
        result: Return value when success is True.
        error: Exception raised when success is False.
    """
    task_id: str
    success: bool
    result: Any = None
    error: Exception | None = None


class ParallelTaskRunner:
    """
    Runs a function over payloads with a pluggable ExecutorStrategy.

    Args:
        strategy: How the work is executed.
        on_task_complete: Called as (task_id, result) after each successful
            task. Exceptions from the callback are logged, not raised.
    """

    def __init__(
        self,
        strategy: ExecutorStrategy,
        on_task_complete: Callable[[str, Any], None] | None = None,
    ):
        self.strategy = strategy
        self.on_task_complete = on_task_complete
        self._cancel_event = threading.Event()

    def run(self, fn: Callable[[Any], Any], items: list[tuple[str, Any]]) -> list[TaskResult]:
        """
        Run fn over every payload.

        Returns:
            TaskResults in completion order. Tasks not submitted because of
            cancellation have no result.
        """
        if not items:
            return []

        futures = {}
        for task_id, payload in items:
            if self._cancel_event.is_set():
                break
            futures[self.strategy.submit(fn, payload)] = task_id

        results = []
        for future in as_completed(futures):
            task_id = futures[future]
            try:
                value = future.result()
            except Exception as e:
                results.append(TaskResult(task_id=task_id, success=False, error=e))
                continue

            results.append(TaskResult(task_id=task_id, success=True, result=value))
            if self.on_task_complete:
                try:
                    self.on_task_complete(task_id, value)
                except Exception as e:
                    error(f"[TaskRunner] Completion callback failed for {task_id}: {e}")

        return results

    def cancel(self):
        """Stop submitting new work; tasks already running finish on their own."""
        self._cancel_event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()
