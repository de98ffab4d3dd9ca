"""
Native shuffle, deck commitment and rarity helpers.

These mirror the card-draw and loot-box circuits step for step so that
inputs built here satisfy them.
"""

from typing import List, Sequence

from ..config import DEFAULT_CONFIG
from ..crypto.poseidon import poseidon_hash
from ..errors import InputShapeError

RARITY_LABELS = ("Legendary", "Epic", "Rare", "Common")
SUITS = ("♠", "♥", "♦", "♣")
RANKS = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")


def fisher_yates_shuffle(
    seed: int, n: int = DEFAULT_CONFIG.deck_size, random_bits: int = DEFAULT_CONFIG.random_bits
) -> List[int]:
    """Shuffle ``[0, n)`` with ``j = (Poseidon(seed, step) mod 2^bits) mod (i + 1)``."""
    if n < 2 or n > 1 << random_bits:
        raise InputShapeError(f"deck size out of range: {n}", field="n", value=n)

    mask = (1 << random_bits) - 1
    deck = list(range(n))
    for step in range(n - 1):
        i = n - 1 - step
        j = (poseidon_hash([seed, step]) & mask) % (i + 1)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def compute_deck_commitment(cards: Sequence[int], salt: int) -> int:
    if len(cards) < 2:
        raise InputShapeError("deck needs at least two cards", field="cards", value=len(cards))
    h = poseidon_hash([cards[0], cards[1]])
    for card in cards[2:]:
        h = poseidon_hash([h, card])
    return poseidon_hash([h, salt])


def compute_vrf(sk: int, seed: int) -> int:
    return poseidon_hash([sk, seed])


def compute_vrf_mod(
    vrf_output: int,
    random_bits: int = DEFAULT_CONFIG.random_bits,
    scale: int = DEFAULT_CONFIG.rarity_scale,
) -> int:
    value = vrf_output & ((1 << random_bits) - 1)
    return value if value < scale else value - scale


def determine_rarity(vrf_mod: int, thresholds: Sequence[int] = DEFAULT_CONFIG.default_thresholds) -> int:
    """Index of the first threshold above ``vrf_mod``."""
    for tier, threshold in enumerate(thresholds):
        if vrf_mod < threshold:
            return tier
    return len(thresholds) - 1


def rarity_label(tier: int) -> str:
    if 0 <= tier < len(RARITY_LABELS):
        return RARITY_LABELS[tier]
    return f"Tier {tier}"


def card_name(index: int) -> str:
    """Display name of card ``index`` in ``[0, 52)``, e.g. ``"A♠"``."""
    if not 0 <= index < 52:
        raise InputShapeError("card index out of range", field="index", value=index)
    return f"{RANKS[index % 13]}{SUITS[index // 13]}"
