"""Prover-side key pairs and salts."""

import secrets
from dataclasses import dataclass
from typing import Optional, Tuple

from ..crypto.keys import PrivateKey, PublicKey

SALT_BYTES = 31


def random_salt() -> int:
    """31 random bytes, always below the field modulus."""
    return int.from_bytes(secrets.token_bytes(SALT_BYTES), "big")


@dataclass(frozen=True)
class Keypair:
    """A Baby Jubjub secret key with its public key."""

    private_key: PrivateKey
    public_key: PublicKey

    @classmethod
    def generate(cls) -> "Keypair":
        return cls.from_private(PrivateKey.generate())

    @classmethod
    def from_private(cls, private_key: PrivateKey) -> "Keypair":
        return cls(private_key, private_key.public_key())

    @classmethod
    def from_seed(cls, seed: bytes, info: Optional[bytes] = None) -> "Keypair":
        if info is None:
            return cls.from_private(PrivateKey.from_seed(seed))
        return cls.from_private(PrivateKey.from_seed(seed, info))

    @property
    def sk(self) -> int:
        return self.private_key.scalar

    @property
    def pk(self) -> Tuple[int, int]:
        return self.public_key.to_tuple()

    @property
    def address(self) -> int:
        return self.public_key.to_address()
