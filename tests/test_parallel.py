"""
Tests for chunk execution strategies and the task runner.
"""

import threading

import pytest

from transcript_digest.config import PARALLEL_DEFAULT_MAX_WORKERS
from transcript_digest.parallel import (
    ParallelTaskRunner,
    SequentialStrategy,
    ThreadPoolStrategy,
    create_strategy,
)


class TestSequentialStrategy:
    """Work runs on the calling thread, in order."""

    def test_map_preserves_order(self):
        assert list(SequentialStrategy().map(lambda n: n * 3, [1, 2, 3])) == [3, 6, 9]

    def test_submit_returns_finished_future(self):
        future = SequentialStrategy().submit(str.upper, "chunk")
        assert future.done()
        assert future.result() == "CHUNK"

    def test_submit_stores_exception(self):
        def explode(_):
            raise ValueError("bad chunk")

        future = SequentialStrategy().submit(explode, None)
        with pytest.raises(ValueError, match="bad chunk"):
            future.result()

    def test_runs_on_calling_thread(self):
        caller = threading.get_ident()
        future = SequentialStrategy().submit(lambda _: threading.get_ident(), None)
        assert future.result() == caller


class TestThreadPoolStrategy:

    def test_default_workers(self):
        with ThreadPoolStrategy() as strategy:
            assert strategy.max_workers == PARALLEL_DEFAULT_MAX_WORKERS

    def test_work_overlaps(self):
        """Two tasks that wait for each other can only finish on a pool."""
        barrier = threading.Barrier(2, timeout=5)

        def meet(n):
            barrier.wait()
            return n

        with ThreadPoolStrategy(max_workers=2) as strategy:
            assert sorted(strategy.map(meet, [1, 2])) == [1, 2]

    def test_submit(self):
        with ThreadPoolStrategy(max_workers=2) as strategy:
            assert strategy.submit(len, "four").result(timeout=1) == 4


def test_create_strategy():
    assert isinstance(create_strategy(1), SequentialStrategy)
    assert isinstance(create_strategy(0), SequentialStrategy)
    strategy = create_strategy(3)
    try:
        assert isinstance(strategy, ThreadPoolStrategy)
        assert strategy.max_workers == 3
    finally:
        strategy.shutdown()


class TestParallelTaskRunner:
    """Test result collection, failure isolation and callbacks."""

    def test_collects_every_result(self):
        runner = ParallelTaskRunner(strategy=SequentialStrategy())
        results = runner.run(lambda n: n + 1, [("0", 10), ("1", 20)])

        assert {r.task_id: r.result for r in results} == {"0": 11, "1": 21}
        assert all(r.success for r in results)

    def test_empty_input(self):
        assert ParallelTaskRunner(strategy=SequentialStrategy()).run(lambda n: n, []) == []

    def test_failure_does_not_stop_other_tasks(self):
        def halve(n):
            if n % 2:
                raise ValueError(f"odd payload {n}")
            return n // 2

        results = ParallelTaskRunner(strategy=SequentialStrategy()).run(halve, [("a", 4), ("b", 3), ("c", 8)])

        failed = [r for r in results if not r.success]
        assert [r.task_id for r in failed] == ["b"]
        assert isinstance(failed[0].error, ValueError)
        assert sorted(r.result for r in results if r.success) == [2, 4]

    def test_callback_only_for_successes(self):
        seen = []

        def fail_on_b(value):
            if value == "b":
                raise RuntimeError("no")
            return value

        runner = ParallelTaskRunner(strategy=SequentialStrategy(), on_task_complete=lambda i, r: seen.append(i))
        runner.run(fail_on_b, [("1", "a"), ("2", "b"), ("3", "c")])
        assert sorted(seen) == ["1", "3"]

    def test_callback_errors_are_logged_not_raised(self):
        def broken(task_id, result):
            raise RuntimeError("progress display closed")

        runner = ParallelTaskRunner(strategy=SequentialStrategy(), on_task_complete=broken)
        results = runner.run(lambda n: n, [("0", 1), ("1", 2)])
        assert len(results) == 2

    def test_cancel_before_run_submits_nothing(self):
        calls = []
        runner = ParallelTaskRunner(strategy=SequentialStrategy())
        runner.cancel()

        assert runner.run(calls.append, [("0", 1), ("1", 2)]) == []
        assert calls == []
        assert runner.is_cancelled

    def test_thread_pool_results(self):
        with ThreadPoolStrategy(max_workers=3) as strategy:
            results = ParallelTaskRunner(strategy=strategy).run(lambda n: n * n, [(str(n), n) for n in range(6)])
        assert sorted(r.result for r in results) == [0, 1, 4, 9, 16, 25]
