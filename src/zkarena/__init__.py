"""
zkarena: zero-knowledge circuits for private gaming assets.

Subpackages:
    crypto    native Poseidon, Baby Jubjub, keys and Merkle trees
    circuits  constraint system, gadgets and the application circuits
    notes     prover-side note, shuffle and circuit input builders
    proving   proof manager and reference backend
    errors    exception hierarchy
    logging   logging setup
"""

from .circuits import (
    CardDrawCircuit,
    ConstraintSystem,
    ItemTradeCircuit,
    LootBoxCircuit,
    PrivateTransferCircuit,
    registry,
)
from .config import DEFAULT_CONFIG, CircuitConfig
from .crypto import poseidon_hash
from .ledger import GameSettlement, NoteLedger, NoteState
from .proving import ProofManager, ProofStatus, ProverConfig

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CircuitConfig",
    "DEFAULT_CONFIG",
    "ConstraintSystem",
    "PrivateTransferCircuit",
    "ItemTradeCircuit",
    "LootBoxCircuit",
    "CardDrawCircuit",
    "registry",
    "poseidon_hash",
    "ProofManager",
    "ProverConfig",
    "ProofStatus",
    "GameSettlement",
    "NoteLedger",
    "NoteState",
]
