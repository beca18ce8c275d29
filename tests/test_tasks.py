import threading
import time

import pytest

from gorillas_ai.train.tasks import ModelTask, build_model_executor


def test_task_returns_the_worker_result():
    executor = build_model_executor()
    try:
        task = ModelTask.submit(executor, "add", lambda a, b: a + b, 2, 3)
        assert task.future.result(timeout=5) == 5
        assert task.done()
        assert task.result() == 5
    finally:
        executor.shutdown(wait=True)


def test_task_reraises_worker_errors(immediate_executor):
    def fail():
        raise ValueError("boom")

    task = ModelTask.submit(immediate_executor, "fail", fail)

    assert task.done()
    with pytest.raises(ValueError):
        task.result()


def test_slow_task_times_out():
    release = threading.Event()
    executor = build_model_executor()
    try:
        task = ModelTask.submit(executor, "load", release.wait, 5, timeout=0.01)
        time.sleep(0.05)

        assert task.timed_out
        assert task.done()
        with pytest.raises(TimeoutError):
            task.result()
    finally:
        release.set()
        executor.shutdown(wait=True)
