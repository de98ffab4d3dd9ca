"""Card draw from a committed, verifiably shuffled deck."""

from typing import Dict

from ...errors import InputShapeError
from ..base import InputValue, Signals, ZKCircuit, registry
from ..commitments import draw_commitment, player_commitment
from ..comparators import less_than, range_check
from ..constraint_system import ConstraintSystem, ConstraintType
from ..deck import deck_commitment
from ..ownership import assert_ownership
from ..selectors import select_by_index
from ..shuffle import verify_shuffle


@registry.register
class CardDrawCircuit(ZKCircuit):
    """
    Proves that ``drawCommitment`` commits the card at ``drawIndex`` of a deck
    that is the seeded Fisher-Yates shuffle of ``[0, N)`` and matches
    ``deckCommitment``, for a player bound by ``playerCommitment``.

    The deck is never consumed; the settlement side tracks used draw indices.
    """

    circuit_id = "card_draw"
    PUBLIC_INPUTS = ("deckCommitment", "drawCommitment", "drawIndex", "gameId", "playerCommitment")
    PRIVATE_INPUTS = (
        "playerPkX",
        "playerPkY",
        "playerSk",
        "shuffleSeed",
        "deckCards",
        "drawnCard",
        "handSalt",
        "deckSalt",
    )

    def array_inputs(self) -> Dict[str, int]:
        return {"deckCards": self.config.deck_size}

    def check_input_bounds(self, inputs: Dict[str, InputValue]) -> None:
        if inputs["drawIndex"] >= self.config.deck_size:
            raise InputShapeError(
                f"drawIndex must be below the deck size {self.config.deck_size}",
                field="drawIndex",
                value=inputs["drawIndex"],
            )

    def synthesize(self, cs: ConstraintSystem, signals: Signals) -> None:
        s = signals
        n = self.config.deck_size
        bits = max(n.bit_length(), 1)
        player_pk = (s["playerPkX"], s["playerPkY"])

        assert_ownership(player_pk, s["playerSk"])

        with cs.namespace("player"):
            commitment = player_commitment(*player_pk, s["gameId"])
            cs.assert_equal(
                commitment, s["playerCommitment"], "player_commitment", ConstraintType.HASH
            )

        verify_shuffle(s["shuffleSeed"], s["deckCards"], self.config.random_bits)

        with cs.namespace("deck"):
            deck_hash = deck_commitment(s["deckCards"], s["deckSalt"])
            cs.assert_equal(deck_hash, s["deckCommitment"], "deck_commitment", ConstraintType.HASH)

        with cs.namespace("draw"):
            for name in ("drawIndex", "drawnCard"):
                range_check(s[name], bits)
                cs.assert_equal(less_than(s[name], n, bits), 1, f"{name}_bound", ConstraintType.RANGE)

            card = select_by_index(s["deckCards"], s["drawIndex"])
            cs.assert_equal(card, s["drawnCard"], "drawn_card", ConstraintType.SELECTOR)

            commitment = draw_commitment(s["drawnCard"], s["drawIndex"], s["gameId"], s["handSalt"])
            cs.assert_equal(commitment, s["drawCommitment"], "draw_commitment", ConstraintType.HASH)
