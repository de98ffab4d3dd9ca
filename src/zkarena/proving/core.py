"""
Core proving types.

This module defines the proof container, the results returned by the proving
facade, the prover configuration and the backend interface.
"""

import hashlib
import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Sequence

from ..config import DEFAULT_CONFIG, CircuitConfig
from ..crypto.field import is_canonical
from ..errors import ConfigurationError, ValidationError


class BackendType(Enum):
    """Proving backends supported by the manager."""

    REFERENCE = "reference"


class ProofStatus(IntEnum):
    """Status codes for proving operations."""

    SUCCESS = 0
    INVALID_PROOF = 1
    INVALID_INPUT = 2
    UNSATISFIABLE = 3
    VERIFICATION_FAILED = 4
    GENERATION_FAILED = 5
    BACKEND_ERROR = 6
    REPLAY_DETECTED = 7
    MALFORMED_DATA = 8
    RESOURCE_EXHAUSTED = 9


@dataclass
class ProverConfig:
    """Configuration for the proof manager."""

    backend_type: BackendType = BackendType.REFERENCE
    backend_params: Dict[str, Any] = field(default_factory=dict)
    circuit_config: CircuitConfig = DEFAULT_CONFIG

    max_proof_size: int = 64 * 1024

    # Rejects a second verification of a proof whose nonce was already accepted
    enable_replay_protection: bool = False
    max_replay_window: int = 10000
    nonce_size: int = 32

    enable_verification_cache: bool = True
    cache_size: int = 1000
    cache_ttl: float = 3600.0

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.max_proof_size <= 0:
            raise ConfigurationError("max_proof_size must be positive", config_key="max_proof_size")
        if self.nonce_size < 16:
            raise ConfigurationError("nonce_size must be at least 16 bytes", config_key="nonce_size")
        if self.max_replay_window <= 0:
            raise ConfigurationError(
                "max_replay_window must be positive", config_key="max_replay_window"
            )
        if self.cache_size <= 0:
            raise ConfigurationError("cache_size must be positive", config_key="cache_size")
        if self.cache_ttl <= 0:
            raise ConfigurationError("cache_ttl must be positive", config_key="cache_ttl")
        self.circuit_config.validate()


@dataclass
class Proof:
    """A proof for one circuit and one ordered public vector."""

    circuit_id: str
    public_signals: List[int]
    proof_data: bytes
    nonce: bytes = b""
    timestamp: float = field(default_factory=time.time)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.circuit_id:
            raise ValidationError("circuit_id cannot be empty", field="circuit_id")
        if not self.proof_data:
            raise ValidationError("proof_data cannot be empty", field="proof_data")
        for value in self.public_signals:
            if not isinstance(value, int) or not is_canonical(value):
                raise ValidationError(
                    "public signal is not a field element", field="public_signals", value=value
                )

    def to_bytes(self) -> bytes:
        """Serialize proof to bytes."""
        data = {
            "circuit_id": self.circuit_id,
            "public_signals": [str(v) for v in self.public_signals],
            "proof_data": self.proof_data.hex(),
            "nonce": self.nonce.hex(),
            "timestamp": self.timestamp,
            "metadata": self.metadata,
        }
        return json.dumps(data, sort_keys=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "Proof":
        """Deserialize proof from bytes."""
        try:
            parsed = json.loads(data.decode("utf-8"))
            return cls(
                circuit_id=parsed["circuit_id"],
                public_signals=[int(v) for v in parsed["public_signals"]],
                proof_data=bytes.fromhex(parsed["proof_data"]),
                nonce=bytes.fromhex(parsed["nonce"]),
                timestamp=parsed["timestamp"],
                metadata=parsed["metadata"],
            )
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid proof data: {e}", field="proof", cause=e)

    def get_hash(self) -> str:
        """Get a unique hash for this proof."""
        return hashlib.sha256(self.to_bytes()).hexdigest()


@dataclass
class ProofResult:
    """Result of proof generation."""

    status: ProofStatus
    proof: Optional[Proof] = None
    error_message: Optional[str] = None
    generation_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        """Check if proof generation was successful."""
        return self.status == ProofStatus.SUCCESS and self.proof is not None


@dataclass
class VerificationResult:
    """Result of proof verification."""

    status: ProofStatus
    is_valid: bool = False
    error_message: Optional[str] = None
    verification_time: float = 0.0

    @property
    def is_success(self) -> bool:
        """Check if verification ran to a verdict."""
        return self.status == ProofStatus.SUCCESS

    def __bool__(self) -> bool:
        return self.is_valid


class ProvingBackend(ABC):
    """Abstract base class for proving backends."""

    def __init__(self, config: ProverConfig):
        self.config = config
        self.config.validate()
        self._initialized = False

    @abstractmethod
    def initialize(self) -> None:
        """Initialize the backend."""

    @abstractmethod
    def prove(self, circuit_id: str, inputs: Dict[str, Any], nonce: bytes) -> Proof:
        """Prove ``inputs`` satisfy ``circuit_id``; raises on malformed or unsatisfiable input."""

    @abstractmethod
    def verify(self, proof: Proof, public_inputs: Sequence[int]) -> bool:
        """Verify a proof against an ordered public vector."""

    @abstractmethod
    def get_circuit_info(self, circuit_id: str) -> Dict[str, Any]:
        """Get information about a circuit."""

    def cleanup(self) -> None:
        """Cleanup backend resources."""
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def validate_proof_size(self, proof_data: bytes) -> bool:
        return len(proof_data) <= self.config.max_proof_size
