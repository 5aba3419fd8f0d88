from __future__ import annotations
from typing import Any, Optional

from .errors import InvalidInput
from .numtext import int_brief


def parse_positive_int(value: Any, max_bits: Optional[int] = None, name: str = "n") -> int:
    """
    Boundary check for anything that reaches the numeric core.

    Accepts an int or decimal text ("  +1_000 " is fine); rejects bools,
    floats, zero, negatives and values wider than max_bits.
    """
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be an integer, not a boolean")
    if isinstance(value, int):
        n = value
    elif isinstance(value, (str, bytes, bytearray)):
        if isinstance(value, (bytes, bytearray)):
            value = value.decode("ascii", errors="replace")
        s = value.strip().replace("_", "")
        if s.startswith("+"):
            s = s[1:]
        if not s.isdigit() or not s.isascii():
            sign = "positive " if s.startswith("-") and s[1:].isdigit() else ""
            raise InvalidInput(f"{name} must be a {sign}integer, got {value.strip()!r}"[:200])
        try:
            n = int(s)
        except ValueError:
            # interpreter cap on decimal digits (sys.set_int_max_str_digits)
            raise InvalidInput(f"{name} has {len(s)} digits; too long to parse as decimal")
    else:
        raise InvalidInput(f"{name} must be an integer, got {type(value).__name__}")
    if n < 1:
        raise InvalidInput(f"{name} must be a positive integer, got {int_brief(n)}")
    if max_bits is not None and n.bit_length() > max_bits:
        raise InvalidInput(f"{name} has {n.bit_length()} bits; max is {max_bits}")
    return n
