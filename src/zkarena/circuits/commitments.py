"""
Note commitments.

Each commitment is a Poseidon hash over a fixed, ordered preimage; a circuit
accepts a note hash only by recomputing it from the claimed preimage.
"""

from typing import Tuple

from ..config import DEFAULT_CONFIG
from .comparators import range_check, split_field
from .constraint_system import Signal, SignalLike, system_of
from .poseidon import poseidon


def address(pk: Tuple[Signal, Signal], bits: int = DEFAULT_CONFIG.address_bits) -> Signal:
    """Low ``bits`` bits of ``Poseidon(pk.x, pk.y)``.

    The truncation is a canonical split, so the discarded high part is
    range-checked and cannot wrap around the field.
    """
    cs = system_of(pk)
    with cs.namespace("address"):
        _, low = split_field(poseidon([pk[0], pk[1]]), bits)
    return low


def nft_note(pk_x: SignalLike, pk_y: SignalLike, nft_id: SignalLike, collection: SignalLike, salt: SignalLike) -> Signal:
    return poseidon([pk_x, pk_y, nft_id, collection, salt])


def payment_note(pk_x: SignalLike, pk_y: SignalLike, price: SignalLike, token: SignalLike, salt: SignalLike) -> Signal:
    return poseidon([pk_x, pk_y, price, token, salt])


def box_note(pk_x: SignalLike, pk_y: SignalLike, box_id: SignalLike, box_type: SignalLike, salt: SignalLike) -> Signal:
    return poseidon([pk_x, pk_y, box_id, box_type, salt])


def outcome_note(pk_x: SignalLike, pk_y: SignalLike, item_id: SignalLike, rarity: SignalLike, salt: SignalLike) -> Signal:
    return poseidon([pk_x, pk_y, item_id, rarity, salt])


def item_note(
    pk_x: SignalLike,
    pk_y: SignalLike,
    item_id: SignalLike,
    item_type: SignalLike,
    attributes: SignalLike,
    game_id: SignalLike,
    salt: SignalLike,
) -> Signal:
    return poseidon([pk_x, pk_y, item_id, item_type, attributes, game_id, salt])


def asset_note(
    owner0: SignalLike,
    owner1: SignalLike,
    value: SignalLike,
    token: SignalLike,
    vk0: SignalLike,
    vk1: SignalLike,
    salt: SignalLike,
) -> Signal:
    """Generic asset note; the owner and viewing key each span two fields."""
    return poseidon([owner0, owner1, value, token, vk0, vk1, salt])


def timelocked_note(
    owner0: SignalLike,
    owner1: SignalLike,
    value: SignalLike,
    token: SignalLike,
    vk0: SignalLike,
    vk1: SignalLike,
    salt: SignalLike,
    unlock_at: SignalLike,
) -> Signal:
    """Asset note that additionally binds an unlock timestamp."""
    return poseidon([owner0, owner1, value, token, vk0, vk1, salt, unlock_at])


def player_commitment(pk_x: SignalLike, pk_y: SignalLike, game_id: SignalLike) -> Signal:
    return poseidon([pk_x, pk_y, game_id])


def draw_commitment(card: SignalLike, draw_index: SignalLike, game_id: SignalLike, hand_salt: SignalLike) -> Signal:
    return poseidon([card, draw_index, game_id, hand_salt])


def split_256_to_128(x: Signal) -> Tuple[Signal, Signal]:
    """Split a field element into its high and low 128-bit halves."""
    return split_field(x, 128)


def pack_128(hi: Signal, lo: Signal) -> Signal:
    """``hi * 2^128 + lo`` with both halves range-checked to 128 bits."""
    cs = system_of(hi, lo)
    with cs.namespace("pack_128"):
        range_check(hi, 128)
        range_check(lo, 128)
    return hi * (1 << 128) + lo
