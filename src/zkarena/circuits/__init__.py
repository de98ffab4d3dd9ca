"""
Constraint systems, gadgets and application circuits.

Gadgets take :class:`Signal` arguments (plain ints are lifted to constants)
and add their constraints to the system those signals belong to.
"""

from .applications import CardDrawCircuit, ItemTradeCircuit, LootBoxCircuit, PrivateTransferCircuit
from .base import CircuitRegistry, ZKCircuit, registry
from .commitments import (
    address,
    asset_note,
    box_note,
    draw_commitment,
    item_note,
    nft_note,
    outcome_note,
    pack_128,
    payment_note,
    player_commitment,
    split_256_to_128,
    timelocked_note,
)
from .comparators import (
    assert_less_than_constant,
    bits2num,
    checked_div_mod,
    greater_eq_than,
    greater_than,
    is_equal,
    is_zero,
    less_eq_than,
    less_than,
    mux_pair,
    num2bits,
    num2bits_strict,
    range_check,
    safe_add,
    safe_mul,
    safe_sub,
    select,
    split_field,
)
from .constraint_system import (
    Constraint,
    ConstraintSystem,
    ConstraintType,
    Signal,
    Witness,
)
from .deck import deck_commitment
from .merkle import merkle_root, merkle_verify
from .nullifier import compute_nullifier
from .ownership import assert_ownership, babyjub_add, derive_public_key, prove_ownership
from .poseidon import poseidon
from .selectors import select_by_index, select_with, selector_bits, write_at_index
from .shuffle import shuffle_deck, verify_shuffle
from .vrf import rarity_tier, vrf, vrf_mod

__all__ = [
    "Constraint",
    "ConstraintSystem",
    "ConstraintType",
    "Signal",
    "Witness",
    "ZKCircuit",
    "CircuitRegistry",
    "registry",
    "PrivateTransferCircuit",
    "ItemTradeCircuit",
    "LootBoxCircuit",
    "CardDrawCircuit",
    "num2bits",
    "num2bits_strict",
    "bits2num",
    "range_check",
    "assert_less_than_constant",
    "is_zero",
    "is_equal",
    "less_than",
    "less_eq_than",
    "greater_than",
    "greater_eq_than",
    "select",
    "mux_pair",
    "safe_add",
    "safe_sub",
    "safe_mul",
    "checked_div_mod",
    "split_field",
    "selector_bits",
    "select_with",
    "select_by_index",
    "write_at_index",
    "poseidon",
    "babyjub_add",
    "derive_public_key",
    "prove_ownership",
    "assert_ownership",
    "address",
    "nft_note",
    "payment_note",
    "box_note",
    "outcome_note",
    "item_note",
    "asset_note",
    "timelocked_note",
    "player_commitment",
    "draw_commitment",
    "split_256_to_128",
    "pack_128",
    "compute_nullifier",
    "merkle_root",
    "merkle_verify",
    "shuffle_deck",
    "verify_shuffle",
    "deck_commitment",
    "vrf",
    "vrf_mod",
    "rarity_tier",
]
