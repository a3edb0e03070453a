# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: timeouts.py
# -----------------------------------------------------------------------------
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Any, Callable, TypeVar

from settings import CALL_POOL_WORKERS
from utility.errors import CallTimeoutError
from utility.logging_utils import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class TimeoutRunner:
    """
    Races blocking SDK calls against a timer on a private thread pool.

    A timed out call cannot be interrupted: its worker stays busy until the SDK
    returns and the result is discarded. While every worker is held by a hung
    provider, new calls wait in the queue and that wait counts against their
    timeout. Each client owns its own runner so a hang in one provider only
    exhausts that provider's workers.
    """

    def __init__(self, name: str = "docqa-call", max_workers: int = CALL_POOL_WORKERS) -> None:
        self.name = name
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._lock = threading.Lock()
        self._abandoned = 0

    @property
    def abandoned(self) -> int:
        """Timed out calls whose worker has not returned yet."""
        with self._lock:
            return self._abandoned

    def _release(self, _future) -> None:
        with self._lock:
            self._abandoned -= 1

    def call(self, fn: Callable[..., T], timeout_s: float | None, *args: Any, **kwargs: Any) -> T:
        """
        Run fn(*args, **kwargs) and wait at most timeout_s seconds for it.
        Exceptions raised by fn propagate unchanged.
        timeout_s of None or <= 0 runs fn inline with no bound.
        """
        if timeout_s is None or timeout_s <= 0:
            return fn(*args, **kwargs)

        future = self._executor.submit(fn, *args, **kwargs)
        try:
            return future.result(timeout=timeout_s)
        except FutureTimeout as e:
            name = getattr(fn, "__qualname__", repr(fn))
            if not future.cancel():
                with self._lock:
                    self._abandoned += 1
                future.add_done_callback(self._release)
            busy = self.abandoned
            if busy >= self.max_workers:
                logger.warning("%s: all %d workers held by timed out calls", self.name, self.max_workers)
            raise CallTimeoutError(f"{name} timed out after {timeout_s:.2f}s") from e


_SHARED = TimeoutRunner()


def call_with_timeout(fn: Callable[..., T], timeout_s: float | None, *args: Any, **kwargs: Any) -> T:
    """call() on the shared runner, for one-off probes that have no client of their own."""
    return _SHARED.call(fn, timeout_s, *args, **kwargs)
