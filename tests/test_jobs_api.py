import itertools
from datetime import datetime, timezone

import pytest

from factorkit.config import Settings
from factorkit.jobs_api import QUEUE_KEY
from factorkit.web import create_app


class StubJob:
    def __init__(self, job_id, args, meta):
        self.id = job_id
        self.args = args
        self.meta = meta
        self.status = "queued"
        self.enqueued_at = datetime.now(timezone.utc)
        self.started_at = None
        self.ended_at = None
        self.exc_info = None
        self.result = None
        self.saved = 0

    def get_status(self):
        return self.status

    @property
    def is_finished(self):
        return self.status == "finished"

    @property
    def is_failed(self):
        return self.status == "failed"

    def return_value(self):
        return self.result

    def save_meta(self):
        self.saved += 1

    def cancel(self):
        self.status = "canceled"


class StubRegistry:
    def __init__(self, queue):
        self.queue = queue

    def get_job_ids(self):
        return [j.id for j in self.queue.jobs.values() if j.status == "started"]


class StubQueue:
    name = "factor"

    def __init__(self):
        self.jobs = {}
        self.enqueued = []
        self._ids = itertools.count(1)
        self.started_job_registry = StubRegistry(self)

    def enqueue(self, func, *args, meta=None, **kw):
        job = StubJob(f"job-{next(self._ids)}", args, dict(meta or {}))
        self.jobs[job.id] = job
        self.enqueued.append((func, args))
        return job

    def get_job_ids(self):
        return [j.id for j in self.jobs.values() if j.status == "queued"]

    def fetch_job(self, job_id):
        return self.jobs.get(job_id)


@pytest.fixture
def queue():
    return StubQueue()


@pytest.fixture
def client(queue):
    app = create_app(Settings(job_max_bits=64))
    app.testing = True
    app.extensions[QUEUE_KEY] = queue
    return app.test_client()


def test_submit_and_status(client, queue):
    r = client.post("/api/jobs", json={"n": "8051"})
    assert r.status_code == 202
    body = r.get_json()
    assert body["job_id"] == "job-1"
    assert body["queue_position"] == 1
    assert body["bits"] == 13
    assert queue.enqueued == [("factorkit.worker.factor_job", ("8051", 10))]

    r = client.get("/api/jobs/job-1")
    assert r.status_code == 200
    assert r.get_json()["status"] == "queued"
    assert "ip" not in r.get_json()["meta"]

    job = queue.jobs["job-1"]
    job.status = "finished"
    job.result = {"status": "composite", "factors": ["83", "97"]}
    assert client.get("/api/jobs/job-1").get_json()["result"]["factors"] == ["83", "97"]


def test_one_active_job_per_ip(client):
    assert client.post("/api/jobs", json={"n": "91"}).status_code == 202
    r = client.post("/api/jobs", json={"n": "93"})
    assert r.status_code == 429
    r = client.post("/api/jobs", json={"n": "93"}, headers={"X-Forwarded-For": "10.0.0.9"})
    assert r.status_code == 202


def test_submit_rejects_bad_input(client):
    assert client.post("/api/jobs", json={"n": "-4"}).status_code == 400
    assert client.post("/api/jobs", json={"n": str(2**70)}).status_code == 400
    assert client.post("/api/jobs", json={"n": "91", "rounds": 0}).status_code == 400


def test_unknown_job(client):
    assert client.get("/api/jobs/nope").status_code == 404
    assert client.post("/api/jobs/nope/abort").status_code == 404


def test_abort_queued_and_started(client, queue):
    client.post("/api/jobs", json={"n": "91"})
    r = client.post("/api/jobs/job-1/abort")
    assert r.status_code == 200
    assert r.get_json()["status"] == "canceled"

    client.post("/api/jobs", json={"n": "93"})
    job = queue.jobs["job-2"]
    job.status = "started"
    r = client.post("/api/jobs/job-2/abort")
    assert r.status_code == 200
    assert job.meta["abort"] is True
    assert job.saved == 1

    job.status = "finished"
    assert client.post("/api/jobs/job-2/abort").status_code == 409


def test_queue_info(client):
    client.post("/api/jobs", json={"n": "91"})
    body = client.get("/api/queue").get_json()
    assert body == {"queue": "factor", "size": 1, "head": ["job-1"]}


def test_submit_rejects_non_object_body(client, queue):
    r = client.post("/api/jobs", json=[91])
    assert r.status_code == 400
    assert "object" in r.get_json()["error"]
    assert queue.enqueued == []
