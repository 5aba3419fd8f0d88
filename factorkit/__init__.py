from .errors import (
    FactorizationCancelled,
    FactorizationIncomplete,
    FactorkitError,
    InvalidInput,
    ModulusError,
)
from .modmath import gcd, mod_pow
from .primality import WITNESS_BASES, is_probable_prime
from .rho import pollard_rho
from .factorize import FactorResult, analyze, factor_result, factorize
from .validate import parse_positive_int

__version__ = "0.3.0"
__all__ = [
    "FactorResult", "FactorizationCancelled", "FactorizationIncomplete",
    "FactorkitError", "InvalidInput", "ModulusError", "WITNESS_BASES",
    "analyze", "factor_result", "factorize", "gcd", "is_probable_prime",
    "mod_pow", "parse_positive_int", "pollard_rho",
]
