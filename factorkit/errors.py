from __future__ import annotations
from typing import TYPE_CHECKING, List

from .numtext import int_brief

if TYPE_CHECKING:
    from .factorize import FactorResult


class FactorkitError(Exception):
    """Base class for everything raised by factorkit."""


class InvalidInput(FactorkitError, ValueError):
    """Input rejected at the boundary (not an integer, < 1, too large)."""


class ModulusError(FactorkitError, ValueError):
    """mod_pow called with a non-positive modulus."""


class FactorizationCancelled(FactorkitError):
    pass


class FactorizationIncomplete(FactorkitError):
    """
    Splitter could not break every composite, or the split guard tripped.
    `.result` is the partial FactorResult; `.remainders` are the pieces
    that are still composite (or were never examined).
    """

    def __init__(self, result: "FactorResult", reason: str = "splitter exhausted"):
        self.result = result
        self.reason = reason
        self.remainders: List[int] = list(result.unsplit)
        shown = ", ".join(int_brief(m) for m in self.remainders[:5])
        more = "" if len(self.remainders) <= 5 else f" (+{len(self.remainders) - 5} more)"
        super().__init__(f"factorization of {int_brief(result.n)} incomplete ({reason}); "
                         f"unsplit: [{shown}]{more}")
