import pytest

import factorkit.worker as worker
from factorkit import FactorizationCancelled, InvalidInput


class FakeJob:
    def __init__(self, meta=None):
        self.meta = dict(meta or {})
        self.saved = 0

    def get_meta(self, refresh=True):
        return self.meta

    def save_meta(self):
        self.saved += 1


def test_factor_job_outside_worker():
    out = worker.factor_job("360")
    assert out["status"] == "composite"
    assert out["factors"] == ["2", "2", "2", "3", "3", "5"]
    assert out["elapsed_ms"] >= 0


def test_factor_job_records_meta(monkeypatch):
    job = FakeJob()
    monkeypatch.setattr(worker, "get_current_job", lambda: job)
    out = worker.factor_job(8051, rounds=12)
    assert out["factors"] == ["83", "97"]
    assert job.meta["status"] == "composite"
    assert job.meta["splits"] == 1
    assert "heartbeat" in job.meta
    assert job.saved >= 1


def test_factor_job_abort_flag(monkeypatch):
    job = FakeJob({"abort": True})
    monkeypatch.setattr(worker, "get_current_job", lambda: job)
    with pytest.raises(FactorizationCancelled):
        worker.factor_job(360)


def test_factor_job_bit_ceiling(monkeypatch):
    monkeypatch.setenv("FACTORKIT_JOB_MAX_BITS", "32")
    with pytest.raises(InvalidInput):
        worker.factor_job(2**40)


def test_explicit_zero_rounds_is_rejected(monkeypatch):
    monkeypatch.setattr(worker, "get_current_job", lambda: None)
    with pytest.raises(ValueError):
        worker.factor_job(97, rounds=0)


def test_explicit_knobs_are_passed_through(monkeypatch):
    seen = {}

    def fake_analyze(n, **kw):
        seen.update(kw)
        return {"status": "prime", "splits": 0}

    monkeypatch.setattr(worker, "analyze", fake_analyze)
    monkeypatch.setattr(worker, "get_current_job", lambda: None)
    worker.factor_job(97, rounds=12, max_attempts=1, max_splits=0)
    assert (seen["rounds"], seen["max_attempts"], seen["max_splits"]) == (12, 1, 0)
