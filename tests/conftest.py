import sys

import pytest


@pytest.fixture
def decimal_digit_cap():
    """Pin the interpreter's int/str digit cap at its stock value."""
    if not hasattr(sys, "set_int_max_str_digits"):
        pytest.skip("interpreter has no int/str digit cap")
    old = sys.get_int_max_str_digits()
    sys.set_int_max_str_digits(4300)
    yield 4300
    sys.set_int_max_str_digits(old)
