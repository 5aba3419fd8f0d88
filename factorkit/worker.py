# factorkit/worker.py
# RQ job entry points. Start a worker with:
#   rq worker factor --url $REDIS_URL

from __future__ import annotations
import logging
import time
from typing import Any, Dict, Optional

from rq import get_current_job

from .config import Settings
from .errors import FactorizationCancelled
from .factorize import analyze
from .numtext import int_brief
from .validate import parse_positive_int

log = logging.getLogger(__name__)


class _JobHook:
    """
    Cancel hook backed by the RQ job's meta. The abort endpoint sets
    meta["abort"]; this side refreshes meta, stamps a heartbeat and reports
    the flag. Polled often by the factorizer, so Redis is hit at most every
    `every_s` seconds.
    """

    def __init__(self, job, every_s: float = 2.0):
        self.job = job
        self.every_s = every_s
        self._last = 0.0
        self._abort = False

    def is_set(self) -> bool:
        if self.job is None or self._abort:
            return self._abort
        now = time.monotonic()
        if now - self._last < self.every_s:
            return False
        self._last = now
        try:
            meta = self.job.get_meta(refresh=True)
            self._abort = bool(meta.get("abort"))
            self.job.meta["heartbeat"] = time.time()
            self.job.save_meta()
        except Exception as e:
            log.debug("job meta refresh failed: %s", e)
        return self._abort


def factor_job(N, rounds: Optional[int] = None, max_attempts: Optional[int] = None,
               max_splits: Optional[int] = None) -> Dict[str, Any]:
    """
    Factor N inside an rq worker. Returns the analyze() dict plus timing.
    Aborting sets meta["abort"], which stops the walk at its next poll.
    """
    settings = Settings.from_env()
    n = parse_positive_int(N, max_bits=settings.job_max_bits, name="N")
    job = get_current_job()
    hook = _JobHook(job)
    t0 = time.perf_counter()
    log.info("factor_job start n=%s bits=%d", int_brief(n), n.bit_length())
    try:
        out = analyze(n,
                      rounds=settings.rounds if rounds is None else rounds,
                      max_attempts=settings.rho_attempts if max_attempts is None else max_attempts,
                      max_splits=settings.max_splits if max_splits is None else max_splits,
                      cancel=hook)
    except FactorizationCancelled:
        log.info("factor_job cancelled n=%s", int_brief(n))
        raise
    out["elapsed_ms"] = int((time.perf_counter() - t0) * 1000)
    if job is not None:
        job.meta["status"] = out["status"]
        job.meta["splits"] = out["splits"]
        try:
            job.save_meta()
        except Exception as e:
            log.debug("save_meta failed: %s", e)
    log.info("factor_job done n=%s status=%s in %dms", int_brief(n), out["status"], out["elapsed_ms"])
    return out
