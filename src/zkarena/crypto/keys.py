"""
Baby Jubjub key pairs.

A private key is a scalar in ``[1, l)``; its public key is ``sk * BASE8``.
Addresses are the low 160 bits of ``Poseidon(pk.x, pk.y)``.
"""

import logging

logger = logging.getLogger(__name__)
import secrets
from dataclasses import dataclass
from typing import Tuple

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ..errors import CryptographicError, ValidationError
from .babyjub import BASE8, SUBGROUP_ORDER, Point, pack_point, unpack_point
from .poseidon import poseidon_hash

ADDRESS_BITS = 160
ADDRESS_MASK = (1 << ADDRESS_BITS) - 1


@dataclass(frozen=True)
class PrivateKey:
    """Immutable Baby Jubjub private key."""

    scalar: int

    def __post_init__(self) -> None:
        if not 0 < self.scalar < SUBGROUP_ORDER:
            raise ValidationError(
                "Private key scalar out of range",
                field="scalar",
                expected="integer in [1, l)",
            )

    @classmethod
    def generate(cls) -> "PrivateKey":
        """Generate a new random private key."""
        while True:
            scalar = int.from_bytes(secrets.token_bytes(32), "big") % SUBGROUP_ORDER
            if scalar:
                return cls(scalar)

    @classmethod
    def from_hex(cls, hex_string: str) -> "PrivateKey":
        """Create a private key from a hexadecimal string."""
        return cls(int(hex_string, 16))

    @classmethod
    def from_seed(cls, seed: bytes, info: bytes = b"zkarena-babyjub-key") -> "PrivateKey":
        """Deterministically derive a private key from seed material.

        Args:
            seed: At least 16 bytes of secret seed material.
            info: Context string separating independent key purposes.

        Returns:
            A key whose scalar is the HKDF-SHA256 output reduced into ``[1, l)``.
        """
        if len(seed) < 16:
            raise CryptographicError("Seed must be at least 16 bytes", algorithm="hkdf")

        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=64,
            salt=b"zkarena_key_derivation",
            info=info,
            backend=default_backend(),
        )
        okm = int.from_bytes(hkdf.derive(seed), "big")
        return cls(okm % (SUBGROUP_ORDER - 1) + 1)

    def to_hex(self) -> str:
        return format(self.scalar, "064x")

    def public_key(self) -> "PublicKey":
        return PublicKey.from_private(self)


@dataclass(frozen=True)
class PublicKey:
    """Baby Jubjub public key."""

    point: Point

    def __post_init__(self) -> None:
        if not self.point.in_curve():
            raise CryptographicError("Public key is not on the curve", algorithm="babyjub")

    @classmethod
    def from_private(cls, private_key: PrivateKey) -> "PublicKey":
        return cls(BASE8.mul(private_key.scalar))

    @classmethod
    def from_bytes(cls, data: bytes) -> "PublicKey":
        return cls(unpack_point(data))

    @property
    def x(self) -> int:
        return self.point.x

    @property
    def y(self) -> int:
        return self.point.y

    def to_bytes(self) -> bytes:
        return pack_point(self.point)

    def verify(self, private_key: PrivateKey) -> bool:
        """Check that ``private_key`` derives this public key."""
        return BASE8.mul(private_key.scalar) == self.point

    def to_address(self) -> int:
        return poseidon_hash([self.x, self.y]) & ADDRESS_MASK

    def to_tuple(self) -> Tuple[int, int]:
        return self.point.to_tuple()
