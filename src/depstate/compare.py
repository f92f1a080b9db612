"""Identity comparison for dependency lists and state values.

Same-value for primitives, same-object for everything else. NaN is equal
to itself and 0.0 is distinct from -0.0, so a dependency list holding a
NaN never looks changed and a sign flip on zero always does.
"""

from __future__ import annotations

import math
from typing import Sequence

# Types compared by value. Anything else must be the same object.
_VALUE_TYPES = (int, float, complex, str, bytes, bool, type(None))


def _floats_equal(a: float, b: float) -> bool:
    if a != a and b != b:
        return True
    if a == 0.0 and b == 0.0:
        return math.copysign(1.0, a) == math.copysign(1.0, b)
    return a == b


def values_equal(prev: object, next: object) -> bool:
    """True if prev and next are the same value or the same object."""
    if prev is next:
        return True
    # bool is an int subclass and 1 == 1.0; neither counts as the same value.
    if type(prev) is not type(next) or not isinstance(prev, _VALUE_TYPES):
        return False
    if isinstance(prev, float):
        return _floats_equal(prev, next)
    if isinstance(prev, complex):
        return _floats_equal(prev.real, next.real) and _floats_equal(prev.imag, next.imag)
    return prev == next


def sequences_equal(prev: Sequence[object], next: Sequence[object]) -> bool:
    """True if both sequences have the same length and every slot is values_equal."""
    if len(prev) != len(next):
        return False
    return all(values_equal(p, n) for p, n in zip(prev, next))
