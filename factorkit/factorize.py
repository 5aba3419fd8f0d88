# factorkit/factorize.py
# Decomposition of n into primes:
# - Miller–Rabin decides the base case
# - Pollard's Rho splits composites, rotating the polynomial constant on failure
# - explicit worklist, no recursion

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import Settings
from .errors import FactorizationCancelled, FactorizationIncomplete, InvalidInput
from .numtext import int_brief, int_text
from .primality import DEFAULT_ROUNDS, RandomSource, is_probable_prime
from .rho import pollard_rho

log = logging.getLogger(__name__)


@dataclass
class FactorResult:
    n: int
    factors: List[int] = field(default_factory=list)
    unsplit: List[int] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)
    splits: int = 0

    @property
    def complete(self) -> bool:
        return not self.unsplit

    @property
    def status(self) -> str:
        if self.n == 1:
            return "unit"
        if not self.complete:
            return "incomplete"
        if self.factors == [self.n]:
            return "prime"
        return "composite"


def _check_n(n: Any) -> int:
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidInput(f"n must be an int, got {type(n).__name__}")
    if n < 1:
        raise InvalidInput(f"n must be >= 1, got {int_brief(n)}")
    return n


def _cancelled(cancel) -> bool:
    return cancel is not None and cancel.is_set()


def split(n: int, max_attempts: int, cancel=None) -> Optional[int]:
    """
    Nontrivial divisor of composite n, trying f(x) = x^2 + c for
    c = 1 .. max_attempts. None when every constant fails.
    """
    for c in range(1, max_attempts + 1):
        # c = n-2 gives x^2 - 2, a degenerate map
        if c % n in (0, n - 2):
            continue
        d = pollard_rho(n, c=c, cancel=cancel)
        if d is not None:
            if c > 1:
                log.debug("split %s: found %s after %d constants", int_brief(n), int_brief(d), c)
            return d
    return None


def factor_result(n: int, rounds: int = DEFAULT_ROUNDS,
                  rng: Optional[RandomSource] = None,
                  max_attempts: Optional[int] = None,
                  max_splits: Optional[int] = None,
                  cancel=None) -> FactorResult:
    """
    Factor n as far as the splitter gets.

    Composites the splitter cannot break end up in `unsplit`; they are never
    reported as prime. Exceeding `max_splits` raises FactorizationIncomplete
    with whatever was found so far.
    """
    n = _check_n(n)
    if max_attempts is None or max_splits is None:
        settings = Settings.from_env()
        if max_attempts is None:
            max_attempts = settings.rho_attempts
        if max_splits is None:
            max_splits = settings.max_splits

    res = FactorResult(n=n)
    work = [n]
    while work:
        if _cancelled(cancel):
            raise FactorizationCancelled(f"factorization of {int_brief(n)} cancelled after {res.splits} splits")
        m = work.pop()
        if m == 1:
            continue
        if is_probable_prime(m, rounds=rounds, rng=rng):
            res.factors.append(m)
            continue
        if res.splits >= max_splits:
            res.unsplit.extend([m] + work)
            res.steps.append(f"split guard hit after {res.splits} splits")
            res.factors.sort(); res.unsplit.sort()
            raise FactorizationIncomplete(res, reason=f"more than {max_splits} splits")
        d = split(m, max_attempts, cancel=cancel)
        if d is None:
            log.warning("no divisor of %s after %d rho constants; leaving it unsplit", int_brief(m), max_attempts)
            res.steps.append(f"rho failed on {int_brief(m)}")
            res.unsplit.append(m)
            continue
        res.splits += 1
        res.steps.append(f"{int_brief(m)} = {int_brief(d)} × {int_brief(m // d)}")
        work.append(d)
        work.append(m // d)

    res.factors.sort()
    res.unsplit.sort()
    return res


def factorize(n: int, rounds: int = DEFAULT_ROUNDS,
              rng: Optional[RandomSource] = None,
              max_attempts: Optional[int] = None,
              max_splits: Optional[int] = None,
              cancel=None) -> List[int]:
    """
    Prime factors of n, ascending, with repetition. factorize(1) == [].

    Raises FactorizationIncomplete if any composite piece could not be
    split; the partial result rides along on the exception.
    """
    res = factor_result(n, rounds=rounds, rng=rng, max_attempts=max_attempts,
                        max_splits=max_splits, cancel=cancel)
    if not res.complete:
        raise FactorizationIncomplete(res)
    return res.factors


def _pretty(res: FactorResult) -> str:
    if res.status == "unit":
        return "1 has no prime factors"
    if res.status == "prime":
        return f"{int_brief(res.n)} is (probably) prime"
    parts = " × ".join(int_brief(p) for p in res.factors)
    if res.status == "incomplete":
        rest = " × ".join(f"[{int_brief(u)}]" for u in res.unsplit)
        return f"{int_brief(res.n)} = {parts + ' × ' if parts else ''}{rest}  (incomplete)"
    return f"{int_brief(res.n)} = {parts}"


def analyze(n: int, rounds: int = DEFAULT_ROUNDS,
            rng: Optional[RandomSource] = None,
            max_attempts: Optional[int] = None,
            max_splits: Optional[int] = None,
            cancel=None) -> Dict[str, Any]:
    """Verdict plus factorization as a JSON-ready dict (big ints as strings)."""
    try:
        res = factor_result(n, rounds=rounds, rng=rng, max_attempts=max_attempts,
                            max_splits=max_splits, cancel=cancel)
    except FactorizationIncomplete as e:
        res = e.result
    return {
        "n": int_text(res.n),
        "bits": res.n.bit_length(),
        "is_probable_prime": res.status == "prime",
        "status": res.status,
        "factors": [int_text(p) for p in res.factors],
        "unsplit": [int_text(u) for u in res.unsplit],
        "steps": res.steps,
        "splits": res.splits,
        "pretty": _pretty(res),
    }
