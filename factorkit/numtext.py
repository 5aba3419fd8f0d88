from __future__ import annotations
import math
import sys

# integers above this many bits are summarized rather than spelled out in step logs
STEP_TEXT_BITS = 256


def _decimal_bits() -> int:
    """Widest int (in bits) the interpreter will still convert to decimal."""
    get_limit = getattr(sys, "get_int_max_str_digits", None)
    limit = get_limit() if get_limit else 0
    if not limit:
        return -1
    return int((limit - 1) / math.log10(2))


def int_text(m: int) -> str:
    """
    Decimal text for m, or "0x..." hex when m has more digits than the
    interpreter's int/str conversion limit allows.
    """
    max_bits = _decimal_bits()
    if max_bits < 0 or m.bit_length() <= max_bits:
        return str(m)
    return hex(m)


def int_brief(m: int) -> str:
    """Short label for step logs and messages."""
    if m.bit_length() <= STEP_TEXT_BITS:
        return str(m)
    return f"<{m.bit_length()}-bit>"
