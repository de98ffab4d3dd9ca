"""Loot-box opening with a VRF-driven rarity draw."""

from typing import Dict

from ..base import Signals, ZKCircuit, registry
from ..commitments import box_note, outcome_note
from ..constraint_system import ConstraintSystem, ConstraintType
from ..nullifier import compute_nullifier
from ..ownership import assert_ownership
from ..vrf import rarity_tier, vrf, vrf_mod


@registry.register
class LootBoxCircuit(ZKCircuit):
    """
    Opens a box note: proves ownership, reveals the box nullifier, evaluates
    ``vrf(sk, nullifier)`` and binds an outcome note whose rarity is the tier
    the VRF output falls into under the supplied thresholds.
    """

    circuit_id = "loot_box_open"
    PUBLIC_INPUTS = ("boxCommitment", "outcomeCommitment", "vrfOutput", "boxId", "nullifier")
    PRIVATE_INPUTS = (
        "ownerPkX",
        "ownerPkY",
        "ownerSk",
        "boxSalt",
        "boxType",
        "itemId",
        "itemRarity",
        "itemSalt",
        "rarityThresholds",
    )

    def array_inputs(self) -> Dict[str, int]:
        return {"rarityThresholds": self.config.num_tiers}

    def synthesize(self, cs: ConstraintSystem, signals: Signals) -> None:
        s = signals
        owner_pk = (s["ownerPkX"], s["ownerPkY"])

        assert_ownership(owner_pk, s["ownerSk"])

        with cs.namespace("box_note"):
            box_hash = box_note(*owner_pk, s["boxId"], s["boxType"], s["boxSalt"])
            cs.assert_equal(box_hash, s["boxCommitment"], "box_hash", ConstraintType.HASH)

        with cs.namespace("nullifier"):
            nullifier = compute_nullifier(s["boxId"], s["boxSalt"], s["ownerSk"])
            cs.assert_equal(nullifier, s["nullifier"], "nullifier", ConstraintType.HASH)

        with cs.namespace("vrf"):
            output = vrf(s["ownerSk"], nullifier)
            cs.assert_equal(output, s["vrfOutput"], "vrf_output", ConstraintType.HASH)
            reduced = vrf_mod(output, self.config.random_bits, self.config.rarity_scale)

        rarity_tier(
            reduced,
            s["rarityThresholds"],
            s["itemRarity"],
            self.config.random_bits,
            self.config.rarity_scale,
        )

        with cs.namespace("outcome_note"):
            outcome_hash = outcome_note(*owner_pk, s["itemId"], s["itemRarity"], s["itemSalt"])
            cs.assert_equal(
                outcome_hash, s["outcomeCommitment"], "outcome_hash", ConstraintType.HASH
            )
