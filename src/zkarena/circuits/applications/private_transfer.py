"""Private NFT transfer: spend an NFT note and re-issue it to a new owner."""

from ..base import Signals, ZKCircuit, registry
from ..commitments import nft_note
from ..constraint_system import ConstraintSystem, ConstraintType
from ..nullifier import compute_nullifier
from ..ownership import assert_ownership


@registry.register
class PrivateTransferCircuit(ZKCircuit):
    """
    Proves that the holder of ``oldOwnerSk`` owned the NFT committed in
    ``oldNftHash``, reveals its nullifier, and commits the same NFT to a new
    owner in ``newNftHash``.
    """

    circuit_id = "private_nft_transfer"
    PUBLIC_INPUTS = ("oldNftHash", "newNftHash", "nftId", "collectionAddress", "nullifier")
    PRIVATE_INPUTS = (
        "oldOwnerPkX",
        "oldOwnerPkY",
        "oldOwnerSk",
        "oldSalt",
        "newOwnerPkX",
        "newOwnerPkY",
        "newSalt",
    )

    def synthesize(self, cs: ConstraintSystem, signals: Signals) -> None:
        s = signals
        old_pk = (s["oldOwnerPkX"], s["oldOwnerPkY"])

        assert_ownership(old_pk, s["oldOwnerSk"])

        with cs.namespace("old_note"):
            old_hash = nft_note(*old_pk, s["nftId"], s["collectionAddress"], s["oldSalt"])
            cs.assert_equal(old_hash, s["oldNftHash"], "old_hash", ConstraintType.HASH)

        with cs.namespace("nullifier"):
            nullifier = compute_nullifier(s["nftId"], s["oldSalt"], s["oldOwnerSk"])
            cs.assert_equal(nullifier, s["nullifier"], "nullifier", ConstraintType.HASH)

        with cs.namespace("new_note"):
            new_hash = nft_note(
                s["newOwnerPkX"],
                s["newOwnerPkY"],
                s["nftId"],
                s["collectionAddress"],
                s["newSalt"],
            )
            cs.assert_equal(new_hash, s["newNftHash"], "new_hash", ConstraintType.HASH)
