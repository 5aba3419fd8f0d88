from __future__ import annotations
import logging
import random
import time
from typing import Any, Dict, Optional

import requests

log = logging.getLogger(__name__)


class APIError(Exception):
    def __init__(self, status: int, body: Any):
        self.status = status
        self.body = body
        msg = body.get("error") if isinstance(body, dict) else body
        super().__init__(f"HTTP {status}: {msg}")


class FactorClient:
    """
    Thin client for the factorkit HTTP API.

    Transport errors and 5xx responses are retried with exponential backoff
    plus jitter; 4xx responses raise APIError straight away.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8082",
                 session: Optional[requests.Session] = None,
                 timeout: float = 90.0, max_tries: int = 4,
                 backoff_cap: float = 15.0, sleep=time.sleep):
        if max_tries < 1:
            raise ValueError("max_tries must be >= 1")
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "factorkit-client/1.0"})
        self.timeout = timeout
        self.max_tries = max_tries
        self.backoff_cap = backoff_cap
        self._sleep = sleep

    def _request(self, method: str, path: str, **kw) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        last: Optional[Exception] = None
        for t in range(1, self.max_tries + 1):
            try:
                r = self.session.request(method, url, timeout=self.timeout, **kw)
            except requests.RequestException as e:
                log.warning("%s %s try=%d failed: %r", method, url, t, e)
                last = e
            else:
                try:
                    body = r.json()
                except ValueError:
                    body = (r.text or "")[:500]
                if r.status_code < 500:
                    if r.status_code >= 400:
                        raise APIError(r.status_code, body)
                    return body
                log.warning("%s %s try=%d HTTP %d", method, url, t, r.status_code)
                last = APIError(r.status_code, body)
            if t < self.max_tries:
                self._sleep(min(self.backoff_cap, (2 ** t) + random.uniform(0, 2)))
        if last is None:
            raise RuntimeError(f"{method} {url}: no attempt made")
        raise last

    def is_prime(self, n: int, rounds: Optional[int] = None) -> bool:
        payload: Dict[str, Any] = {"n": str(n)}
        if rounds is not None:
            payload["rounds"] = rounds
        return bool(self._request("POST", "/api/is_prime", json=payload)["is_probable_prime"])

    def factor(self, n: int) -> Dict[str, Any]:
        return self._request("POST", "/api/factor", json={"n": str(n)})

    def submit(self, n: int) -> Dict[str, Any]:
        return self._request("POST", "/api/jobs", json={"n": str(n)})

    def job(self, job_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/jobs/{job_id}")

    def wait(self, job_id: str, poll_s: float = 1.0, timeout_s: float = 600.0) -> Dict[str, Any]:
        """Poll a queued job until it finishes, fails or is cancelled."""
        deadline = time.monotonic() + timeout_s
        while True:
            j = self.job(job_id)
            if j.get("status") in ("finished", "failed", "canceled", "stopped"):
                return j
            if time.monotonic() > deadline:
                raise TimeoutError(f"job {job_id} still {j.get('status')} after {timeout_s}s")
            self._sleep(poll_s)
