from __future__ import annotations
import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name, "") or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    redis_url: str = "redis://localhost:6379/0"
    queue_name: str = "factor"
    rounds: int = 10
    rho_attempts: int = 20
    max_splits: int = 4096
    max_bits: int = 512          # synchronous API
    job_max_bits: int = 1024     # queued jobs
    job_timeout: int = 60 * 60

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            redis_url=os.getenv("REDIS_URL", cls.redis_url) or cls.redis_url,
            queue_name=os.getenv("FACTORKIT_QUEUE", cls.queue_name) or cls.queue_name,
            rounds=_env_int("FACTORKIT_ROUNDS", cls.rounds),
            rho_attempts=_env_int("FACTORKIT_RHO_ATTEMPTS", cls.rho_attempts),
            max_splits=_env_int("FACTORKIT_MAX_SPLITS", cls.max_splits),
            max_bits=_env_int("FACTORKIT_MAX_BITS", cls.max_bits),
            job_max_bits=_env_int("FACTORKIT_JOB_MAX_BITS", cls.job_max_bits),
            job_timeout=_env_int("FACTORKIT_JOB_TIMEOUT", cls.job_timeout),
        )
