"""
Baby Jubjub key derivation and ownership gadgets.

The public key is recomputed from the secret key by fixed-base double-and-add
over precomputed multiples ``2^i * BASE8``. Because every addend is a known
point, selecting it by a scalar bit is linear and only the additions cost
constraints.
"""

from typing import Tuple

from ..crypto.babyjub import A, D, SCALAR_BITS, base_powers
from ..crypto.field import FieldElement
from .comparators import is_equal, num2bits_strict
from .constraint_system import ConstraintType, Signal, SignalLike, system_of

PointSignals = Tuple[Signal, Signal]


def _divide(numerator: int, denominator: int) -> int:
    if denominator == 0:
        return 0
    return (FieldElement(numerator) / FieldElement(denominator)).n


def babyjub_add(p1: Tuple[SignalLike, SignalLike], p2: Tuple[SignalLike, SignalLike]) -> PointSignals:
    """Twisted Edwards addition in six constraints."""
    cs = system_of(p1, p2)
    x1, y1 = cs.lift(p1[0]), cs.lift(p1[1])
    x2, y2 = cs.lift(p2[0]), cs.lift(p2[1])

    with cs.namespace("babyjub_add"):
        beta = x1 * y2
        gamma = y1 * x2
        delta = (y1 - x1 * A) * (x2 + y2)
        tau = beta * gamma

        x_num = beta + gamma
        x_den = 1 + tau * D
        y_num = delta + beta * A - gamma
        y_den = 1 - tau * D

        x3 = cs.alloc("x", _divide(x_num.value, x_den.value))
        y3 = cs.alloc("y", _divide(y_num.value, y_den.value))
        cs.enforce(x3, x_den, x_num, ConstraintType.CURVE, "x")
        cs.enforce(y3, y_den, y_num, ConstraintType.CURVE, "y")
    return x3, y3


def derive_public_key(sk: Signal) -> PointSignals:
    """Compute ``sk * BASE8`` from the strict 254-bit decomposition of ``sk``."""
    cs = system_of(sk)
    with cs.namespace("derive_public_key"):
        bits = num2bits_strict(sk)
        acc: Tuple[SignalLike, SignalLike] = (cs.constant(0), cs.constant(1))
        for bit, power in zip(bits, base_powers(SCALAR_BITS)):
            # bit ? power : identity
            addend = (bit * power.x, bit * (power.y - 1) + 1)
            acc = babyjub_add(acc, addend)
    return acc


def prove_ownership(pk: Tuple[Signal, Signal], sk: Signal) -> Signal:
    """1 if ``sk`` derives ``pk`` (both coordinates), else 0."""
    cs = system_of(pk, sk)
    with cs.namespace("ownership"):
        derived_x, derived_y = derive_public_key(sk)
        x_match = is_equal(derived_x, pk[0])
        y_match = is_equal(derived_y, pk[1])
        valid = x_match * y_match
    return valid


def assert_ownership(pk: Tuple[Signal, Signal], sk: Signal) -> None:
    """Reject the proof unless ``sk`` derives ``pk``."""
    cs = system_of(pk, sk)
    cs.assert_equal(prove_ownership(pk, sk), 1, "ownership", ConstraintType.CURVE)
