"""
Proof manager.

The manager is the boundary where circuit exceptions become statuses: a
malformed input set yields ``INVALID_INPUT`` and an unsatisfiable one yields
``UNSATISFIABLE``. No partial proof is ever returned.
"""

import logging
import secrets
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..errors import (
    ConstraintViolationError,
    InputShapeError,
    ResourceError,
    ValidationError,
    ZKArenaError,
)
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
from .verification import ReplayProtection, VerificationCache

logger = logging.getLogger(__name__)


class ProofManager:
    """Main entry point for proving and verifying application circuits."""

    def __init__(self, config: Optional[ProverConfig] = None):
        self.config = config or ProverConfig()
        self.config.validate()
        self.backend: Optional[ProvingBackend] = None
        self._replay_protection: Optional[ReplayProtection] = None
        self._verification_cache: Optional[VerificationCache] = None
        self._initialized = False

    def initialize(self) -> None:
        """Initialize the backend and the security components."""
        if self._initialized:
            return

        self.backend = self._create_backend()
        self.backend.initialize()

        if self.config.enable_replay_protection:
            self._replay_protection = ReplayProtection(self.config.max_replay_window)

        if self.config.enable_verification_cache:
            self._verification_cache = VerificationCache(
                self.config.cache_size, self.config.cache_ttl
            )

        self._initialized = True
        logger.info("Proof manager initialized with %s backend", self.config.backend_type.value)

    def _ensure_initialized(self) -> ProvingBackend:
        if not self._initialized:
            self.initialize()
        return self.backend

    def prove(self, circuit_id: str, inputs: Mapping[str, Any]) -> ProofResult:
        """Generate a proof that ``inputs`` satisfy ``circuit_id``."""
        backend = self._ensure_initialized()
        nonce = secrets.token_bytes(self.config.nonce_size)

        start_time = time.time()
        try:
            proof = backend.prove(circuit_id, dict(inputs), nonce)
        except InputShapeError as e:
            status, message = ProofStatus.INVALID_INPUT, e.message
        except ConstraintViolationError as e:
            status, message = ProofStatus.UNSATISFIABLE, e.message
        except ResourceError as e:
            status, message = ProofStatus.RESOURCE_EXHAUSTED, e.message
        except ValidationError as e:
            status, message = ProofStatus.INVALID_INPUT, e.message
        except ZKArenaError as e:
            status, message = ProofStatus.GENERATION_FAILED, e.message
        else:
            return ProofResult(
                status=ProofStatus.SUCCESS,
                proof=proof,
                generation_time=time.time() - start_time,
            )

        logger.info(
            "Proof for %s rejected: %s (%s)",
            circuit_id,
            status.name,
            message,
            extra={"circuit_id": circuit_id},
        )
        return ProofResult(
            status=status,
            error_message=message,
            generation_time=time.time() - start_time,
        )

    def verify(self, proof: Proof, public_inputs: Sequence[int]) -> VerificationResult:
        """Verify ``proof`` against the ordered public vector; the verdict is boolean."""
        backend = self._ensure_initialized()

        replay = self._replay_protection
        cache = self._verification_cache
        if replay is not None and replay.is_replay(proof):
            logger.warning(
                "Replayed %s proof rejected", proof.circuit_id, extra={"circuit_id": proof.circuit_id}
            )
            return VerificationResult(
                status=ProofStatus.REPLAY_DETECTED,
                error_message="Replay attack detected",
            )

        if cache is not None:
            cached = cache.get(proof, public_inputs)
            if cached is not None:
                if cached.is_valid and replay is not None:
                    replay.record(proof)
                return cached

        start_time = time.time()
        is_valid = backend.verify(proof, public_inputs)
        result = VerificationResult(
            status=ProofStatus.SUCCESS,
            is_valid=is_valid,
            error_message=None if is_valid else "Proof rejected",
            verification_time=time.time() - start_time,
        )

        if cache is not None:
            cache.put(proof, public_inputs, result)
        if is_valid and replay is not None:
            replay.record(proof)
        return result

    def verify_batch(
        self, proofs: Sequence[Proof], public_inputs_list: Sequence[Sequence[int]]
    ) -> List[VerificationResult]:
        """Verify multiple proofs, one verdict each."""
        if len(proofs) != len(public_inputs_list):
            raise ValidationError("Number of proofs must match number of public input lists")
        return [self.verify(p, inputs) for p, inputs in zip(proofs, public_inputs_list)]

    def get_circuit_info(self, circuit_id: str) -> Dict[str, Any]:
        return self._ensure_initialized().get_circuit_info(circuit_id)

    def get_stats(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = {"initialized": self._initialized}
        if self._verification_cache is not None:
            stats["cache"] = self._verification_cache.get_stats()
        if self._replay_protection is not None:
            stats["replay_protection"] = self._replay_protection.get_stats()
        return stats

    def cleanup(self) -> None:
        """Cleanup manager resources."""
        if self.backend:
            self.backend.cleanup()
        if self._verification_cache is not None:
            self._verification_cache.clear()
        if self._replay_protection is not None:
            self._replay_protection.clear()
        self._initialized = False

    def _create_backend(self) -> ProvingBackend:
        if self.config.backend_type == BackendType.REFERENCE:
            return ReferenceBackend(self.config)
        raise ValidationError(f"Unsupported backend type: {self.config.backend_type}")

    @property
    def is_initialized(self) -> bool:
        return self._initialized
