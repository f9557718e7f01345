"""
Parallel execution utilities.

ExecutorStrategy decides how chunk work runs (SequentialStrategy or
ThreadPoolStrategy); ParallelTaskRunner submits the work and gathers one
TaskResult per chunk, whatever order they finish in.
"""

from transcript_digest.parallel.executor_strategy import (
    ExecutorStrategy,
    SequentialStrategy,
    ThreadPoolStrategy,
    create_strategy,
)
from transcript_digest.parallel.task_runner import ParallelTaskRunner, TaskResult

__all__ = [
    'ExecutorStrategy',
    'ParallelTaskRunner',
    'SequentialStrategy',
    'TaskResult',
    'ThreadPoolStrategy',
    'create_strategy',
]
