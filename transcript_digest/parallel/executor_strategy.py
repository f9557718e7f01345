"""
Execution strategies for chunk processing.

Chunks of one transcript are independent, so they can be processed one
after another (the default) or on a thread pool. Engine calls are network
or model bound and release the GIL, which is what makes threads worthwhile
here.

Usage:
    strategy = ThreadPoolStrategy(max_workers=3)   # concurrent chunks
    strategy = SequentialStrategy()                # one chunk at a time, deterministic

    results = list(strategy.map(process_chunk, chunks))
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterator, TypeVar

from transcript_digest.config import PARALLEL_DEFAULT_MAX_WORKERS

T = TypeVar('T')
R = TypeVar('R')


class ExecutorStrategy(ABC):
    """
    How submitted work is executed.

    Attributes:
        max_workers: Number of concurrent workers (1 for sequential).
    """

    max_workers: int

    @abstractmethod
    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        """Run fn(item) and return a Future holding its result or exception."""

    @abstractmethod
    def map(self, fn: Callable[[T], R], items: list[T]) -> Iterator[R]:
        """Apply fn to every item, yielding results in submission order."""

    @abstractmethod
    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """
        Release workers.

        Args:
            wait: Block until running work finishes.
            cancel_futures: Drop work that has not started yet.
        """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=True)
        return False


class ThreadPoolStrategy(ExecutorStrategy):
    """
    Runs work on a ThreadPoolExecutor.

    Args:
        max_workers: Concurrent threads. Defaults to min(cpu_count, 4).
    """

    def __init__(self, max_workers: int | None = None):
        if max_workers is None:
            max_workers = PARALLEL_DEFAULT_MAX_WORKERS
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="digest-chunk")
        self.max_workers = max_workers

    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        return self._executor.submit(fn, item)

    def map(self, fn: Callable[[T], R], items: list[T]) -> Iterator[R]:
        return self._executor.map(fn, items)

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)


class SequentialStrategy(ExecutorStrategy):
    """
    Runs each submission immediately on the calling thread.

    submit() returns an already completed Future, so code written against
    ExecutorStrategy behaves the same, just without interleaving. Tests use
    it for deterministic ordering.
    """

    def __init__(self):
        self.max_workers = 1

    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(item))
        except Exception as e:
            future.set_exception(e)
        return future

    def map(self, fn: Callable[[T], R], items: list[T]) -> Iterator[R]:
        for item in items:
            yield fn(item)

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        pass


def create_strategy(max_workers: int) -> ExecutorStrategy:
    """SequentialStrategy for a single worker, otherwise a thread pool."""
    if max_workers <= 1:
        return SequentialStrategy()
    return ThreadPoolStrategy(max_workers=max_workers)
