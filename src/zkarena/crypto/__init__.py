"""
Native (out-of-circuit) cryptography for zkarena.

Poseidon, Baby Jubjub and the Merkle tree here compute the same values as the
corresponding gadgets in :mod:`zkarena.circuits`.
"""

from .babyjub import BASE8, SUBGROUP_ORDER, Point, base_powers, pack_point, unpack_point
from .field import FIELD_MODULUS, FieldElement, field_inverse, to_int
from .keys import ADDRESS_MASK, PrivateKey, PublicKey
from .merkle import MerkleProof, MerkleTree
from .poseidon import PoseidonParameters, get_parameters, poseidon_hash

__all__ = [
    "FIELD_MODULUS",
    "FieldElement",
    "field_inverse",
    "to_int",
    "Point",
    "BASE8",
    "SUBGROUP_ORDER",
    "base_powers",
    "pack_point",
    "unpack_point",
    "PrivateKey",
    "PublicKey",
    "ADDRESS_MASK",
    "MerkleTree",
    "MerkleProof",
    "PoseidonParameters",
    "get_parameters",
    "poseidon_hash",
]
