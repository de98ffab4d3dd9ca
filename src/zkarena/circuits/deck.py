"""Deck commitment: a left-fold Poseidon chain over the cards, closed by a salt."""

from typing import Sequence

from ..errors import InputShapeError
from .constraint_system import Signal, SignalLike, system_of
from .poseidon import poseidon


def deck_commitment(cards: Sequence[SignalLike], salt: SignalLike) -> Signal:
    """``h = P(c0, c1)``, ``h = P(h, c_k)`` for the rest, then ``P(h, salt)``."""
    if len(cards) < 2:
        raise InputShapeError(
            "deck commitment needs at least two cards", field="cards", value=len(cards)
        )
    cs = system_of(cards, salt)
    with cs.namespace("deck_commitment"):
        h = poseidon([cards[0], cards[1]])
        for card in cards[2:]:
            h = poseidon([h, card])
        return poseidon([h, salt])
