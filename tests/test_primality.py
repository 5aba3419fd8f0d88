import random

import pytest
import sympy

from factorkit import WITNESS_BASES, is_probable_prime
from factorkit.primality import decompose


def _trial(n):
    if n < 2:
        return False
    if n % 2 == 0:
        return n == 2
    f = 3
    while f * f <= n:
        if n % f == 0:
            return False
        f += 2
    return True


class RecordingRandom:
    def __init__(self, seed=0):
        self._r = random.Random(seed)
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return self._r.randint(a, b)


def test_small_cases():
    assert not is_probable_prime(-7)
    assert not is_probable_prime(0)
    assert not is_probable_prime(1)
    assert is_probable_prime(2)
    assert is_probable_prime(3)
    assert not is_probable_prime(4)
    assert is_probable_prime(5)
    assert not is_probable_prime(10**50)


def test_agrees_with_sympy_below_10k():
    rng = random.Random(7)
    for n in range(-3, 10_000):
        assert is_probable_prime(n, rng=rng) == sympy.isprime(n), n


def test_agrees_with_trial_division_near_million():
    rng = random.Random(11)
    for n in range(990_001, 1_000_001, 2):
        assert is_probable_prime(n, rng=rng) == _trial(n), n
    sample = random.Random(3).sample(range(10_000, 1_000_000), 2000)
    for n in sample:
        assert is_probable_prime(n, rng=rng) == _trial(n), n


@pytest.mark.parametrize("n", [561, 1105, 1729, 2465, 2821, 6601, 8911, 41041, 825265])
def test_carmichael_numbers_are_composite(n):
    assert not is_probable_prime(n)


def test_strong_pseudoprimes_to_small_bases():
    # spsp(2,3,5,7); base 11 catches it
    assert not is_probable_prime(3215031751)
    assert not is_probable_prime(2047)


def test_fixed_witnesses_alone_can_be_fooled():
    # smallest strong pseudoprime to every base 2..23
    psi9 = 3825123056546413051
    assert is_probable_prime(psi9, rounds=len(WITNESS_BASES))
    assert not is_probable_prime(psi9, rounds=40, rng=random.Random(1))


@pytest.mark.parametrize("p", [104729, 2147483647, 2**61 - 1, 2**89 - 1, 2**127 - 1, 2**521 - 1])
def test_known_primes(p):
    assert is_probable_prime(p)


def test_big_composites():
    assert not is_probable_prime((2**61 - 1) * (2**89 - 1))
    assert not is_probable_prime((2**127 - 1) ** 2)
    assert not is_probable_prime(2**64 + 1)


def test_random_bases_only_after_fixed_list():
    p = 2**61 - 1
    rng = RecordingRandom()
    assert is_probable_prime(p, rounds=len(WITNESS_BASES), rng=rng)
    assert rng.calls == []
    assert is_probable_prime(p, rounds=len(WITNESS_BASES) + 3, rng=rng)
    assert rng.calls == [(2, p - 2)] * 3


def test_seeded_rng_reproducible():
    ns = [int(sympy.randprime(10**30, 10**31)) for _ in range(3)] + [10**30 + 1, 2**64 + 1]
    a = [is_probable_prime(n, rounds=25, rng=random.Random(42)) for n in ns]
    b = [is_probable_prime(n, rounds=25, rng=random.Random(42)) for n in ns]
    assert a == b == [True, True, True, False, False]


def test_rounds_must_be_positive():
    with pytest.raises(ValueError):
        is_probable_prime(97, rounds=0)


def test_decompose():
    assert decompose(97) == (5, 3)      # 96 = 2^5 * 3
    assert decompose(561) == (4, 35)    # 560 = 2^4 * 35
    r, d = decompose(2**89 - 1)
    assert d % 2 == 1 and (d << r) == 2**89 - 2
