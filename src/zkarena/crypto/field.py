"""
Scalar field of BN254.

Every circuit value is an element of this field. The element type is py_ecc's
prime-field element bound to the BN254 group order.
"""

from typing import Union

from py_ecc.bn128 import curve_order
from py_ecc.fields.field_elements import FQ

FIELD_MODULUS = curve_order


class FieldElement(FQ):
    """Element of the BN254 scalar field."""

    field_modulus = FIELD_MODULUS


IntOrElement = Union[int, FieldElement]


def to_int(value: IntOrElement) -> int:
    """Return the canonical integer representative of a field value."""
    if isinstance(value, FQ):
        return value.n
    return int(value) % FIELD_MODULUS


def field_inverse(value: IntOrElement) -> int:
    """Multiplicative inverse, with 0 mapped to 0."""
    n = to_int(value)
    if n == 0:
        return 0
    return to_int(FieldElement.one() / FieldElement(n))


def is_canonical(value: int) -> bool:
    """True if ``value`` is an integer in ``[0, p)``."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < FIELD_MODULUS
