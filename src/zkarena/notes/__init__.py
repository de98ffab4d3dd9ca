"""
Prover-side helpers: keys, notes, nullifiers and full circuit input sets.
"""

from .builders import (
    BoxOpenSetup,
    CardGameSetup,
    DrawSetup,
    TradeSetup,
    TransferSetup,
    prepare_draw,
    setup_box_open,
    setup_card_game,
    setup_trade,
    setup_transfer,
)
from .game import (
    RARITY_LABELS,
    card_name,
    compute_deck_commitment,
    compute_vrf,
    compute_vrf_mod,
    determine_rarity,
    fisher_yates_shuffle,
    rarity_label,
)
from .keypair import Keypair, random_salt
from .note import (
    AssetNote,
    BoxNote,
    ItemNote,
    NFTNote,
    OutcomeNote,
    PaymentNote,
    compute_nullifier,
    pack_128,
    split_256_to_128,
)

__all__ = [
    "Keypair",
    "random_salt",
    "NFTNote",
    "ItemNote",
    "PaymentNote",
    "BoxNote",
    "OutcomeNote",
    "AssetNote",
    "compute_nullifier",
    "split_256_to_128",
    "pack_128",
    "fisher_yates_shuffle",
    "compute_deck_commitment",
    "compute_vrf",
    "compute_vrf_mod",
    "determine_rarity",
    "rarity_label",
    "card_name",
    "RARITY_LABELS",
    "setup_transfer",
    "setup_trade",
    "setup_box_open",
    "setup_card_game",
    "prepare_draw",
    "TransferSetup",
    "TradeSetup",
    "BoxOpenSetup",
    "CardGameSetup",
    "DrawSetup",
]
