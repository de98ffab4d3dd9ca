"""
Native note commitments and nullifiers.

Each note type hashes its fields in exactly the order the circuits use.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..crypto.poseidon import poseidon_hash
from .keypair import Keypair, random_salt

MASK_128 = (1 << 128) - 1


def compute_nullifier(item_id: int, salt: int, sk: int) -> int:
    return poseidon_hash([item_id, salt, sk])


def split_256_to_128(value: int) -> Tuple[int, int]:
    """``(value >> 128, value & (2^128 - 1))``."""
    return value >> 128, value & MASK_128


def pack_128(hi: int, lo: int) -> int:
    return (hi << 128) + lo


@dataclass(frozen=True)
class NFTNote:
    pk_x: int
    pk_y: int
    nft_id: int
    collection_address: int
    salt: int

    @classmethod
    def create(cls, owner: Keypair, nft_id: int, collection_address: int) -> "NFTNote":
        return cls(*owner.pk, nft_id, collection_address, random_salt())

    def hash(self) -> int:
        return poseidon_hash(
            [self.pk_x, self.pk_y, self.nft_id, self.collection_address, self.salt]
        )

    def nullifier(self, sk: int) -> int:
        return compute_nullifier(self.nft_id, self.salt, sk)


@dataclass(frozen=True)
class ItemNote:
    pk_x: int
    pk_y: int
    item_id: int
    item_type: int
    attributes: int
    game_id: int
    salt: int

    @classmethod
    def create(
        cls, owner: Keypair, item_id: int, item_type: int, attributes: int, game_id: int
    ) -> "ItemNote":
        return cls(*owner.pk, item_id, item_type, attributes, game_id, random_salt())

    def hash(self) -> int:
        return poseidon_hash(
            [
                self.pk_x,
                self.pk_y,
                self.item_id,
                self.item_type,
                self.attributes,
                self.game_id,
                self.salt,
            ]
        )

    def nullifier(self, sk: int) -> int:
        return compute_nullifier(self.item_id, self.salt, sk)


@dataclass(frozen=True)
class PaymentNote:
    pk_x: int
    pk_y: int
    price: int
    token: int
    salt: int

    def hash(self) -> int:
        """Payment hash, or 0 for a gift."""
        if self.price == 0:
            return 0
        return poseidon_hash([self.pk_x, self.pk_y, self.price, self.token, self.salt])


@dataclass(frozen=True)
class BoxNote:
    pk_x: int
    pk_y: int
    box_id: int
    box_type: int
    salt: int

    def hash(self) -> int:
        return poseidon_hash([self.pk_x, self.pk_y, self.box_id, self.box_type, self.salt])

    def nullifier(self, sk: int) -> int:
        return compute_nullifier(self.box_id, self.salt, sk)


@dataclass(frozen=True)
class OutcomeNote:
    pk_x: int
    pk_y: int
    item_id: int
    rarity: int
    salt: int

    def hash(self) -> int:
        return poseidon_hash([self.pk_x, self.pk_y, self.item_id, self.rarity, self.salt])


@dataclass(frozen=True)
class AssetNote:
    """
    Generic value note, ``Poseidon(owner0, owner1, value, token, vk0, vk1, salt)``.

    A regular note is owned by a public key (``owner = vk = (pk.x, pk.y)``). A
    smart note is owned by another note: its owner and viewing key are the
    high and low 128-bit halves of the parent note's hash.
    """

    owner0: int
    owner1: int
    value: int
    token: int
    vk0: int
    vk1: int
    salt: int

    @classmethod
    def for_owner(
        cls, owner: Keypair, value: int, token: int, salt: Optional[int] = None
    ) -> "AssetNote":
        pk_x, pk_y = owner.pk
        return cls(pk_x, pk_y, value, token, pk_x, pk_y, random_salt() if salt is None else salt)

    @classmethod
    def create_smart_note(cls, parent: "AssetNote", value: int, token: int, salt: int) -> "AssetNote":
        hi, lo = split_256_to_128(parent.hash())
        return cls(hi, lo, value, token, hi, lo, salt)

    def hash(self) -> int:
        return poseidon_hash(
            [self.owner0, self.owner1, self.value, self.token, self.vk0, self.vk1, self.salt]
        )

    def timelocked_hash(self, unlock_at: int) -> int:
        """Hash of the same note with an unlock timestamp appended."""
        return poseidon_hash(
            [
                self.owner0,
                self.owner1,
                self.value,
                self.token,
                self.vk0,
                self.vk1,
                self.salt,
                unlock_at,
            ]
        )

    @property
    def parent_hash(self) -> int:
        """For smart notes, the parent note hash reassembled from the owner fields."""
        return pack_128(self.owner0, self.owner1)

    @property
    def owner_address(self) -> int:
        """160-bit owner id: top 32 bits of the ``owner0`` half, then all of ``owner1``."""
        return (((self.owner0 & MASK_128) >> 96) << 128) | (self.owner1 & MASK_128)
