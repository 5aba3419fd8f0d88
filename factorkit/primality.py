# factorkit/primality.py
# Miller–Rabin probable-prime test.
# - fixed small-prime witnesses first
# - random witnesses from [2, n-2] once the fixed list runs out

from __future__ import annotations
import random
from typing import Optional, Protocol, Tuple

from .modmath import mod_pow

WITNESS_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23)
DEFAULT_ROUNDS = 10


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def decompose(n: int) -> Tuple[int, int]:
    """Write n-1 = 2**r * d with d odd. Returns (r, d)."""
    d = n - 1
    r = (d & -d).bit_length() - 1  # v2(n-1)
    return r, d >> r


def _witness_passes(n: int, a: int, r: int, d: int) -> bool:
    """One strong round for base a. False means a proves n composite."""
    x = mod_pow(a, d, n)
    if x == 1 or x == n - 1:
        return True
    for _ in range(r - 1):
        x = mod_pow(x, 2, n)
        if x == n - 1:
            return True
    return False


def witness_bases(n: int, rounds: int, rng: RandomSource):
    for i in range(rounds):
        if i < len(WITNESS_BASES):
            yield WITNESS_BASES[i]
        else:
            yield rng.randint(2, n - 2)


def is_probable_prime(n: int, rounds: int = DEFAULT_ROUNDS,
                      rng: Optional[RandomSource] = None) -> bool:
    """
    Miller–Rabin with `rounds` witnesses.

    False is definitive. True means every witness passed; each random
    witness lets a composite through with probability at most 1/4.
    `rng` needs only `randint`; by default each call gets its own
    SystemRandom so nothing is shared between threads.
    """
    if rounds < 1:
        raise ValueError("rounds must be >= 1")
    if n < 2:
        return False
    if n in (2, 3):
        return True
    if n % 2 == 0:
        return False
    if rng is None:
        rng = random.SystemRandom()
    r, d = decompose(n)
    for a in witness_bases(n, rounds, rng):
        if a % n == 0:
            continue
        if not _witness_passes(n, a, r, d):
            return False
    return True
