"""
Baby Jubjub twisted Edwards curve over the BN254 scalar field.

    a*x^2 + y^2 = 1 + d*x^2*y^2

Points are stored as canonical integer coordinates; arithmetic goes through
:class:`FieldElement`.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from ..errors import CryptographicError
from .field import FIELD_MODULUS, FieldElement

A = 168700
D = 168696

# Order of the prime subgroup generated by BASE8.
SUBGROUP_ORDER = 2736030358979909402780800718157159386076813972158567259200215660948447373041

BASE8_X = 5299619240641551281634865583518297030282874472190772894086521144482721001553
BASE8_Y = 16950150798460657717958625567821834550301663161624707787222815936182638968203

SCALAR_BITS = 254


@dataclass(frozen=True)
class Point:
    """Affine point on Baby Jubjub."""

    x: int
    y: int

    @classmethod
    def identity(cls) -> "Point":
        return cls(0, 1)

    @property
    def is_identity(self) -> bool:
        return self.x == 0 and self.y == 1

    def in_curve(self) -> bool:
        """Check the curve equation."""
        x2 = FieldElement(self.x) * self.x
        y2 = FieldElement(self.y) * self.y
        return A * x2 + y2 == 1 + D * x2 * y2

    def add(self, other: "Point") -> "Point":
        """Complete twisted Edwards addition."""
        x1, y1 = FieldElement(self.x), FieldElement(self.y)
        x2, y2 = FieldElement(other.x), FieldElement(other.y)
        tau = D * x1 * x2 * y1 * y2
        x3 = (x1 * y2 + y1 * x2) / (1 + tau)
        y3 = (y1 * y2 - A * x1 * x2) / (1 - tau)
        return Point(x3.n, y3.n)

    def double(self) -> "Point":
        return self.add(self)

    def negate(self) -> "Point":
        return Point((-FieldElement(self.x)).n, self.y)

    def mul(self, scalar: int) -> "Point":
        """Scalar multiplication by double-and-add."""
        if scalar < 0:
            return self.negate().mul(-scalar)

        result = Point.identity()
        addend = self
        while scalar:
            if scalar & 1:
                result = result.add(addend)
            addend = addend.double()
            scalar >>= 1
        return result

    def in_subgroup(self) -> bool:
        return self.in_curve() and self.mul(SUBGROUP_ORDER).is_identity

    def __add__(self, other: "Point") -> "Point":
        return self.add(other)

    def __mul__(self, scalar: int) -> "Point":
        return self.mul(scalar)

    __rmul__ = __mul__

    def to_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


BASE8 = Point(BASE8_X, BASE8_Y)


@lru_cache(maxsize=None)
def base_powers(bits: int = SCALAR_BITS) -> Tuple[Point, ...]:
    """``2^i * BASE8`` for ``i < bits``, used by fixed-base multiplication."""
    powers = [BASE8]
    for _ in range(bits - 1):
        powers.append(powers[-1].double())
    return tuple(powers)


def _sqrt(value: FieldElement) -> Optional[FieldElement]:
    """Tonelli-Shanks square root, or None for a non-residue."""
    p = FIELD_MODULUS
    n = value.n
    if n == 0:
        return FieldElement(0)
    if pow(n, (p - 1) // 2, p) != 1:
        return None

    q, s = p - 1, 0
    while q % 2 == 0:
        q //= 2
        s += 1

    z = 2
    while pow(z, (p - 1) // 2, p) != p - 1:
        z += 1

    m, c, t, r = s, pow(z, q, p), pow(n, q, p), pow(n, (q + 1) // 2, p)
    while t != 1:
        i, t2 = 0, t
        while t2 != 1:
            t2 = t2 * t2 % p
            i += 1
        b = pow(c, 1 << (m - i - 1), p)
        m, c = i, b * b % p
        t, r = t * c % p, r * b % p
    return FieldElement(r)


def pack_point(point: Point) -> bytes:
    """Compress a point to 32 bytes: little-endian y, sign of x in the top bit."""
    packed = bytearray(point.y.to_bytes(32, "little"))
    if point.x > FIELD_MODULUS // 2:
        packed[31] |= 0x80
    return bytes(packed)


def unpack_point(data: bytes) -> Point:
    """Inverse of :func:`pack_point`."""
    if len(data) != 32:
        raise CryptographicError("packed point must be 32 bytes", algorithm="babyjub")

    raw = bytearray(data)
    sign = bool(raw[31] & 0x80)
    raw[31] &= 0x7F
    y = int.from_bytes(bytes(raw), "little")
    if y >= FIELD_MODULUS:
        raise CryptographicError("y coordinate out of range", algorithm="babyjub")

    y_elem = FieldElement(y)
    y2 = y_elem * y_elem
    x2 = (1 - y2) / (A - D * y2)
    x = _sqrt(x2)
    if x is None:
        raise CryptographicError("packed point is not on the curve", algorithm="babyjub")

    if sign != (x.n > FIELD_MODULUS // 2):
        x = -x
    return Point(x.n, y)
