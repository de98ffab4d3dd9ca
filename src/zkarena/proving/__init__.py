"""
Proving facade.

Example:
    >>> from zkarena.proving import ProofManager
    >>> manager = ProofManager()
    >>> result = manager.prove("private_nft_transfer", inputs)
    >>> manager.verify(result.proof, result.proof.public_signals).is_valid
    True
"""

from .backends import ReferenceBackend
from .core import (
    BackendType,
    Proof,
    ProofResult,
    ProofStatus,
    ProverConfig,
    ProvingBackend,
    VerificationResult,
)
from .manager import ProofManager
from .verification import CacheEntry, ReplayProtection, VerificationCache

__all__ = [
    "BackendType",
    "ProofStatus",
    "ProverConfig",
    "Proof",
    "ProofResult",
    "VerificationResult",
    "ProvingBackend",
    "ReferenceBackend",
    "ProofManager",
    "VerificationCache",
    "CacheEntry",
    "ReplayProtection",
]
