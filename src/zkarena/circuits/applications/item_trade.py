"""Gaming item trade, optionally paid, optionally a gift."""

from ..base import Signals, ZKCircuit, registry
from ..commitments import item_note, payment_note
from ..comparators import is_zero
from ..constraint_system import ConstraintSystem, ConstraintType
from ..nullifier import compute_nullifier
from ..ownership import assert_ownership


@registry.register
class ItemTradeCircuit(ZKCircuit):
    """
    Transfers an item note from seller to buyer.

    When ``price`` is nonzero, ``paymentNoteHash`` must commit the seller's
    payment note ``Poseidon(sellerPkX, sellerPkY, price, paymentToken,
    paymentSalt)``. A zero price is a gift and requires ``paymentNoteHash == 0``.
    """

    circuit_id = "gaming_item_trade"
    PUBLIC_INPUTS = ("oldItemHash", "newItemHash", "paymentNoteHash", "gameId", "nullifier")
    PRIVATE_INPUTS = (
        "sellerPkX",
        "sellerPkY",
        "sellerSk",
        "oldSalt",
        "buyerPkX",
        "buyerPkY",
        "newSalt",
        "itemId",
        "itemType",
        "itemAttributes",
        "price",
        "paymentToken",
        "paymentSalt",
    )

    def synthesize(self, cs: ConstraintSystem, signals: Signals) -> None:
        s = signals
        seller_pk = (s["sellerPkX"], s["sellerPkY"])
        item = (s["itemId"], s["itemType"], s["itemAttributes"], s["gameId"])

        assert_ownership(seller_pk, s["sellerSk"])

        with cs.namespace("old_note"):
            old_hash = item_note(*seller_pk, *item, s["oldSalt"])
            cs.assert_equal(old_hash, s["oldItemHash"], "old_hash", ConstraintType.HASH)

        with cs.namespace("nullifier"):
            nullifier = compute_nullifier(s["itemId"], s["oldSalt"], s["sellerSk"])
            cs.assert_equal(nullifier, s["nullifier"], "nullifier", ConstraintType.HASH)

        with cs.namespace("new_note"):
            new_hash = item_note(s["buyerPkX"], s["buyerPkY"], *item, s["newSalt"])
            cs.assert_equal(new_hash, s["newItemHash"], "new_hash", ConstraintType.HASH)

        with cs.namespace("payment"):
            payment_hash = payment_note(
                *seller_pk, s["price"], s["paymentToken"], s["paymentSalt"]
            )
            has_price = 1 - is_zero(s["price"])
            cs.assert_equal(
                has_price * payment_hash,
                s["paymentNoteHash"],
                "payment_hash",
                ConstraintType.HASH,
            )
