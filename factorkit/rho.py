# factorkit/rho.py
# Pollard's Rho with Floyd cycle detection on f(x) = x^2 + c (mod n).

from __future__ import annotations
import logging
from typing import Optional

from .errors import FactorizationCancelled
from .modmath import gcd
from .numtext import int_brief

log = logging.getLogger(__name__)

# how many walk steps between cancel checks
CANCEL_POLL = 1024


def pollard_rho(n: int, c: int = 1, x0: int = 2,
                max_iterations: Optional[int] = None, cancel=None) -> Optional[int]:
    """
    Return a nontrivial divisor of n, or None when the walk fails.

    Failure means the slow and fast pointers met modulo n itself (gcd == n)
    or `max_iterations` ran out. `cancel` is anything with is_set(); it is
    polled every CANCEL_POLL steps and raises FactorizationCancelled.
    """
    if n % 2 == 0:
        return 2
    if n < 3:
        return None
    f = lambda x: (x * x + c) % n
    slow = fast = x0 % n
    d = 1
    it = 0
    while d == 1:
        slow = f(slow)
        fast = f(f(fast))
        d = gcd(slow - fast, n)
        it += 1
        if max_iterations is not None and it >= max_iterations and d == 1:
            log.debug("rho n=%s c=%d: iteration budget %d spent", int_brief(n), c, max_iterations)
            return None
        if cancel is not None and it % CANCEL_POLL == 0 and cancel.is_set():
            raise FactorizationCancelled(f"rho walk on {int_brief(n)} cancelled after {it} steps")
    if d == n:
        log.debug("rho n=%s c=%d: cycle closed without a factor (%d steps)", int_brief(n), c, it)
        return None
    return d
