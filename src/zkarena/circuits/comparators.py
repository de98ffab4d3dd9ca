"""
Bit decomposition, comparisons and bounded arithmetic.

Comparisons are only meaningful on operands already known to fit in the
stated bit width; callers range-check first.
"""

from typing import List, Sequence, Tuple

from ..config import FIELD_BITS, MAX_SAFE_BITS
from ..crypto.field import FIELD_MODULUS, field_inverse
from ..errors import InputShapeError
from .constraint_system import ConstraintType, Signal, SignalLike, system_of


def _check_width(k: int, limit: int = MAX_SAFE_BITS) -> None:
    if not 1 <= k <= limit:
        raise InputShapeError(
            f"bit width must be in [1, {limit}]", field="bits", value=k
        )


def num2bits(x: Signal, k: int) -> List[Signal]:
    """Decompose ``x`` into ``k`` little-endian bits.

    Unsatisfiable when ``x >= 2^k``.
    """
    _check_width(k)
    cs = system_of(x)
    value = x.value
    bits = []
    for i in range(k):
        bit = cs.alloc(f"bit[{i}]", (value >> i) & 1)
        cs.assert_bool(bit)
        bits.append(bit)
    cs.assert_equal(
        cs.weighted_sum(bits, [1 << i for i in range(k)]),
        x,
        f"num2bits[{k}]",
        ConstraintType.RANGE,
    )
    return bits


def bits2num(bits: Sequence[Signal]) -> Signal:
    cs = system_of(bits)
    return cs.weighted_sum(bits, [1 << i for i in range(len(bits))])


def range_check(x: Signal, k: int) -> None:
    """Constrain ``x < 2^k``."""
    num2bits(x, k)


def assert_less_than_constant(bits: Sequence[Signal], bound: int) -> None:
    """Constrain the integer read from little-endian ``bits`` to be ``< bound``.

    Walks from the most significant bit keeping ``eq`` (all higher bits match
    ``bound``) and accumulating the steps where the prefix first drops below.
    """
    cs = system_of(bits)
    n = len(bits)
    if bound >= 1 << n:
        return
    if bound <= 0:
        raise InputShapeError("bound must be positive", field="bound", value=bound)

    eq = cs.constant(1)
    below = []
    for i in reversed(range(n)):
        bit = bits[i]
        if (bound >> i) & 1:
            next_eq = eq * bit
            # prefix matched and this bit is 0 where bound has 1
            below.append(eq - next_eq)
        else:
            next_eq = eq * (1 - bit)
        eq = next_eq
    cs.assert_equal(cs.sum(below), 1, "less_than_constant", ConstraintType.RANGE)


def num2bits_strict(x: Signal) -> List[Signal]:
    """254-bit decomposition with a proof that the bit pattern is ``< p``."""
    cs = system_of(x)
    value = x.value
    bits = []
    for i in range(FIELD_BITS):
        bit = cs.alloc(f"bit[{i}]", (value >> i) & 1)
        cs.assert_bool(bit)
        bits.append(bit)
    cs.assert_equal(
        cs.weighted_sum(bits, [1 << i for i in range(FIELD_BITS)]),
        x,
        "num2bits_strict",
        ConstraintType.RANGE,
    )
    with cs.namespace("alias_check"):
        assert_less_than_constant(bits, FIELD_MODULUS)
    return bits


def is_zero(x: Signal) -> Signal:
    """1 if ``x == 0`` else 0."""
    cs = system_of(x)
    if x.is_constant:
        return cs.constant(1 if x.value == 0 else 0)

    inv = cs.alloc("inv", field_inverse(x.value))
    out = cs.alloc("is_zero", 1 if x.value == 0 else 0)
    cs.enforce(x, inv, 1 - out, ConstraintType.EQUALITY, "is_zero_inverse")
    cs.enforce(x, out, 0, ConstraintType.EQUALITY, "is_zero")
    return out


def is_equal(a: SignalLike, b: SignalLike) -> Signal:
    cs = system_of(a, b)
    return is_zero(cs.lift(a) - b)


def less_than(a: SignalLike, b: SignalLike, k: int) -> Signal:
    """1 if ``a < b`` for operands below ``2^k``."""
    _check_width(k, MAX_SAFE_BITS - 1)
    cs = system_of(a, b)
    bits = num2bits(cs.lift(a) + (1 << k) - b, k + 1)
    return 1 - bits[k]


def less_eq_than(a: SignalLike, b: SignalLike, k: int) -> Signal:
    cs = system_of(a, b)
    return less_than(a, cs.lift(b) + 1, k)


def greater_than(a: SignalLike, b: SignalLike, k: int) -> Signal:
    return less_than(b, a, k)


def greater_eq_than(a: SignalLike, b: SignalLike, k: int) -> Signal:
    cs = system_of(a, b)
    return less_than(b, cs.lift(a) + 1, k)


def select(a: SignalLike, b: SignalLike, sel: Signal) -> Signal:
    """``a`` when ``sel == 0``, ``b`` when ``sel == 1``."""
    cs = system_of(a, b, sel)
    a = cs.lift(a)
    return a + sel * (cs.lift(b) - a)


def mux_pair(a: SignalLike, b: SignalLike, sel: Signal) -> Tuple[Signal, Signal]:
    """``(a, b)`` when ``sel == 0``, ``(b, a)`` when ``sel == 1``."""
    cs = system_of(a, b, sel)
    a, b = cs.lift(a), cs.lift(b)
    delta = sel * (b - a)
    return a + delta, b - delta


def safe_add(a: Signal, b: Signal, k: int) -> Signal:
    cs = system_of(a, b)
    with cs.namespace("safe_add"):
        range_check(a, k)
        range_check(b, k)
        result = a + b
        range_check(result, k)
        cs.assert_equal(greater_eq_than(result, a, k), 1, "no_overflow")
    return result


def safe_sub(a: Signal, b: Signal, k: int) -> Signal:
    cs = system_of(a, b)
    with cs.namespace("safe_sub"):
        range_check(a, k)
        range_check(b, k)
        cs.assert_equal(greater_eq_than(a, b, k), 1, "no_underflow")
    return a - b


def safe_mul(a: Signal, b: Signal, k: int) -> Signal:
    """Product of two ``k``-bit values that must itself fit in ``k`` bits.

    ``k`` is at most 126 so that ``a * b`` stays below ``p``.
    """
    _check_width(k, (MAX_SAFE_BITS - 1) // 2)
    cs = system_of(a, b)
    with cs.namespace("safe_mul"):
        range_check(a, k)
        range_check(b, k)
        product = cs.lift(a) * b
        range_check(product, k)
        quotient = cs.alloc("quotient", product.value // b.value if b.value else 0)
        cs.enforce(quotient, b, product, annotation="quotient")
        nonzero = 1 - is_zero(b)
        cs.enforce(quotient - a, nonzero, 0, annotation="quotient_matches")
    return product


def checked_div_mod(
    dividend: Signal,
    divisor: SignalLike,
    dividend_bits: int,
    divisor_bits: int,
) -> Tuple[Signal, Signal]:
    """Integer division with witness quotient and remainder.

    Constrains ``quotient * divisor + remainder == dividend``,
    ``remainder < divisor`` and ``quotient < 2^dividend_bits``. The divisor
    must be nonzero; a constant zero divisor is rejected up front.

    Returns:
        ``(quotient, remainder)``
    """
    cs = system_of(dividend, divisor)
    divisor = cs.lift(divisor)
    if dividend_bits + divisor_bits > MAX_SAFE_BITS - 1:
        raise InputShapeError(
            "dividend_bits + divisor_bits too large for the field",
            field="bits",
            value=dividend_bits + divisor_bits,
        )
    if divisor.is_constant:
        if divisor.value == 0:
            raise InputShapeError("division by zero", field="divisor", value=0)
        if divisor.value >= 1 << divisor_bits:
            raise InputShapeError(
                "constant divisor exceeds divisor_bits",
                field="divisor",
                value=divisor.value,
            )

    n, d = dividend.value, divisor.value
    with cs.namespace("div_mod"):
        if not divisor.is_constant:
            range_check(divisor, divisor_bits)
            cs.assert_equal(is_zero(divisor), 0, "divisor_nonzero")

        quotient = cs.alloc("quotient", n // d if d else 0)
        remainder = cs.alloc("remainder", n % d if d else n)
        range_check(quotient, dividend_bits)
        range_check(remainder, divisor_bits)
        cs.assert_equal(quotient * divisor + remainder, dividend, "division_identity")
        cs.assert_equal(
            less_than(remainder, divisor, divisor_bits),
            1,
            "remainder_bound",
            ConstraintType.RANGE,
        )
    return quotient, remainder


def split_field(x: Signal, low_bits: int) -> Tuple[Signal, Signal]:
    """Canonically split ``x = hi * 2^low_bits + lo``.

    Both halves are range-checked and ``(hi, lo)`` is constrained to encode an
    integer below ``p``, so exactly one split exists for every field element.

    Returns:
        ``(hi, lo)``
    """
    _check_width(low_bits, MAX_SAFE_BITS - 1)
    cs = system_of(x)
    high_bits = FIELD_BITS - low_bits
    hi_max = (FIELD_MODULUS - 1) >> low_bits
    lo_max = (FIELD_MODULUS - 1) & ((1 << low_bits) - 1)

    value = x.value
    with cs.namespace(f"split_{low_bits}"):
        hi = cs.alloc("hi", value >> low_bits)
        lo = cs.alloc("lo", value & ((1 << low_bits) - 1))
        range_check(hi, high_bits)
        range_check(lo, low_bits)
        cs.assert_equal(hi * (1 << low_bits) + lo, x, "split_identity")

        hi_below = less_than(hi, hi_max, high_bits)
        hi_at_max = is_equal(hi, hi_max)
        lo_in_range = less_eq_than(lo, lo_max, low_bits)
        cs.assert_equal(
            hi_below + hi_at_max * lo_in_range, 1, "canonical", ConstraintType.RANGE
        )
    return hi, lo
