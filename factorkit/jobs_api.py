from __future__ import annotations
import time
from datetime import datetime
from typing import Optional

from flask import Blueprint, current_app, jsonify, request
from redis import Redis
from rq import Queue
from rq.job import Job

from .config import Settings
from .errors import InvalidInput
from .validate import parse_positive_int

jobs_bp = Blueprint("jobs_bp", __name__)

QUEUE_KEY = "factorkit.queue"


def get_queue() -> Queue:
    """The app's RQ queue, created on first use from its Settings."""
    q = current_app.extensions.get(QUEUE_KEY)
    if q is None:
        settings: Settings = current_app.config["FACTORKIT"]
        conn = Redis.from_url(settings.redis_url)
        q = Queue(settings.queue_name, connection=conn, default_timeout=settings.job_timeout)
        current_app.extensions[QUEUE_KEY] = q
    return q


# ------------------ helpers ------------------
def _age_secs(dt: Optional[datetime]) -> Optional[float]:
    if not dt:
        return None
    return max(0.0, time.time() - dt.timestamp())


def _job_dict(job: Job) -> dict:
    d = {
        "job_id": job.id,
        "status": job.get_status(),
        "meta": {k: v for k, v in (job.meta or {}).items() if k != "ip"},
        "enqueued_at": job.enqueued_at.isoformat() if job.enqueued_at else None,
        "started_at": job.started_at.isoformat() if job.started_at else None,
        "ended_at": job.ended_at.isoformat() if job.ended_at else None,
        "age_sec": _age_secs(job.enqueued_at),
    }
    if job.is_finished:
        d["result"] = job.return_value()
    if job.is_failed:
        d["exc_info"] = (job.exc_info or "")[-1024:]
    return d


def _client_ip() -> str:
    xff = request.headers.get("X-Forwarded-For", "")
    return xff.split(",")[0].strip() if xff else (request.remote_addr or "")


def ip_can_start(q: Queue, ip: str) -> bool:
    """Allow only one active (queued or started) job per IP."""
    ids = list(q.started_job_registry.get_job_ids()) + list(q.get_job_ids())
    for jid in ids:
        j = q.fetch_job(jid)
        if j is not None and (j.meta or {}).get("ip") == ip:
            return False
    return True


# ------------------ API ------------------
@jobs_bp.get("/api/queue")
def queue_info():
    q = get_queue()
    ids = q.get_job_ids()
    return jsonify({"queue": q.name, "size": len(ids), "head": ids[:10]})


@jobs_bp.post("/api/jobs")
def job_submit():
    settings: Settings = current_app.config["FACTORKIT"]
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({"error": "JSON body must be an object"}), 400
    try:
        n = parse_positive_int(data.get("n", ""), max_bits=settings.job_max_bits)
        rounds = int(data.get("rounds", settings.rounds))
    except (InvalidInput, TypeError, ValueError) as e:
        return jsonify({"error": str(e)}), 400
    if rounds < 1 or rounds > 256:
        return jsonify({"error": "rounds must be between 1 and 256"}), 400

    q = get_queue()
    ip = _client_ip()
    if not ip_can_start(q, ip):
        return jsonify({"error": "One active job per IP. Wait or abort the running job."}), 429

    bits = n.bit_length()
    job = q.enqueue("factorkit.worker.factor_job", str(n), rounds,
                    meta={"bits": bits, "ip": ip, "submitted": time.time()})
    ids = q.get_job_ids()
    pos = ids.index(job.id) + 1 if job.id in ids else 1
    current_app.logger.info("queued job %s bits=%d ip=%s", job.id, bits, ip)
    return jsonify({"job_id": job.id, "status": job.get_status(), "bits": bits,
                    "queue_position": pos}), 202


@jobs_bp.get("/api/jobs/<job_id>")
def job_status(job_id):
    job = get_queue().fetch_job(job_id)
    if job is None:
        return jsonify({"error": "unknown job"}), 404
    return jsonify(_job_dict(job))


@jobs_bp.post("/api/jobs/<job_id>/abort")
def job_abort(job_id):
    job = get_queue().fetch_job(job_id)
    if job is None:
        return jsonify({"error": "unknown job"}), 404
    status = job.get_status()
    if status == "started":
        # the worker polls meta["abort"] between rho steps
        job.meta["abort"] = True
        job.save_meta()
    elif status in ("queued", "deferred", "scheduled"):
        job.cancel()
    else:
        return jsonify({"error": f"job already {status}"}), 409
    current_app.logger.info("abort requested for job %s (was %s)", job_id, status)
    return jsonify({"ok": True, "job_id": job_id, "status": job.get_status()})
