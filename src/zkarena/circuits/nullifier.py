"""Spend nullifiers."""

from .constraint_system import Signal, SignalLike
from .poseidon import poseidon


def compute_nullifier(item_id: SignalLike, salt: SignalLike, sk: SignalLike) -> Signal:
    """``Poseidon(item_id, salt, sk)``.

    Two notes sharing ``(item_id, salt)`` under one key produce the same
    nullifier; the ledger rejects the second spend.
    """
    return poseidon([item_id, salt, sk])
