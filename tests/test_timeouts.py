# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: test_timeouts.py
# -----------------------------------------------------------------------------
import threading

import pytest

from utility.errors import CallTimeoutError
from utility.timeouts import TimeoutRunner, call_with_timeout


@pytest.fixture
def release():
    event = threading.Event()
    yield event
    # let hung workers finish so the pools can drain
    event.set()


def test_result_is_returned_within_timeout():
    assert call_with_timeout(lambda a, b: a + b, 1.0, 2, 3) == 5


def test_no_timeout_runs_inline():
    caller = threading.current_thread()
    assert call_with_timeout(threading.current_thread, None) is caller


def test_errors_propagate_unchanged():
    def boom():
        raise ValueError("bad request")

    with pytest.raises(ValueError, match="bad request"):
        call_with_timeout(boom, 1.0)


def test_slow_call_raises_call_timeout(release):
    runner = TimeoutRunner(name="test-slow", max_workers=1)

    with pytest.raises(CallTimeoutError):
        runner.call(release.wait, 0.05)
    assert runner.abandoned == 1

    release.set()
    runner._executor.shutdown(wait=True)
    assert runner.abandoned == 0


def test_hung_runner_does_not_starve_another(release):
    hung = TimeoutRunner(name="test-hung", max_workers=1)
    other = TimeoutRunner(name="test-other", max_workers=1)

    with pytest.raises(CallTimeoutError):
        hung.call(release.wait, 0.05)
    # the only worker is still held, so queued calls time out too
    with pytest.raises(CallTimeoutError):
        hung.call(lambda: "late", 0.05)

    assert other.call(lambda: "ok", 1.0) == "ok"
