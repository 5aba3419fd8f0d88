# factorkit/background.py
# Run factorizations off the caller's thread, with cooperative cancel.

from __future__ import annotations
import concurrent.futures
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .factorize import analyze

_shared_executor: Optional[concurrent.futures.ThreadPoolExecutor] = None
_shared_lock = threading.Lock()


def _default_executor() -> concurrent.futures.ThreadPoolExecutor:
    global _shared_executor
    with _shared_lock:
        if _shared_executor is None:
            _shared_executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=2, thread_name_prefix="factorkit")
        return _shared_executor


@dataclass
class FactorTask:
    n: int
    future: "concurrent.futures.Future[Dict[str, Any]]"
    cancel_event: threading.Event

    def cancel(self) -> None:
        """Stop the task at the next split boundary or rho poll."""
        self.cancel_event.set()
        self.future.cancel()

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        return self.future.result(timeout=timeout)


def submit_factorization(n: int, executor: Optional[concurrent.futures.Executor] = None,
                         **kwargs: Any) -> FactorTask:
    """
    Schedule analyze(n, **kwargs) on a worker thread.

    If cancel() lands while the work is running the future raises
    FactorizationCancelled; before it starts, concurrent.futures.CancelledError.
    """
    ev = threading.Event()
    ex = executor or _default_executor()
    fut = ex.submit(analyze, n, cancel=ev, **kwargs)
    return FactorTask(n=n, future=fut, cancel_event=ev)
