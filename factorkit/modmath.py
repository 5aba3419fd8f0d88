# factorkit/modmath.py
# Modular arithmetic helpers shared by the primality test and the splitter.

from __future__ import annotations
import math

from .errors import ModulusError

try:
    import gmpy2
    HAVE_GMPY2 = True
    def _gcd(a: int, b: int) -> int: return int(gmpy2.gcd(a, b))
except Exception:
    HAVE_GMPY2 = False
    def _gcd(a: int, b: int) -> int: return math.gcd(a, b)


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """
    base**exponent mod modulus by square-and-multiply.

    O(log exponent) multiplications, each on values below modulus**2, so it
    stays usable for moduli with hundreds of digits. Result is in [0, modulus).
    """
    if modulus <= 0:
        raise ModulusError(f"modulus must be positive, got {modulus}")
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    if modulus == 1:
        return 0
    result = 1
    base %= modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        exponent >>= 1
        base = (base * base) % modulus
    return result


def gcd(a: int, b: int) -> int:
    return _gcd(abs(a), abs(b))
