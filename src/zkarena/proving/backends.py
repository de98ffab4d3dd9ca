"""
Proving backends.

``ReferenceBackend`` proves by generating the full witness and checking every
constraint. Its proof is an authentication tag over the circuit id, the
public vector, a digest of the witness and the nonce, keyed by a secret held
by the backend. It is not zero-knowledge and only the backend that issued a
proof can verify it; it stands in for a Groth16 prover behind the same
interface.
"""

import hashlib
import logging
import secrets
from typing import Any, Dict, Sequence

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from ..circuits.base import ZKCircuit, registry
from ..crypto.field import is_canonical
from .core import Proof, ProverConfig, ProvingBackend

logger = logging.getLogger(__name__)

DIGEST_SIZE = 32
PROOF_SIZE = 2 * DIGEST_SIZE


class ReferenceBackend(ProvingBackend):
    """Witness-checking backend with keyed proof tags."""

    def __init__(self, config: ProverConfig):
        super().__init__(config)
        secret = config.backend_params.get("secret")
        self._secret: bytes = secret if secret else secrets.token_bytes(32)
        self._circuits: Dict[str, ZKCircuit] = {}

    def initialize(self) -> None:
        self._initialized = True

    def _get_circuit(self, circuit_id: str) -> ZKCircuit:
        circuit = self._circuits.get(circuit_id)
        if circuit is None:
            circuit = registry.create(circuit_id, self.config.circuit_config)
            self._circuits[circuit_id] = circuit
        return circuit

    def _tag(self, circuit_id: str, public_signals: Sequence[int], witness_digest: bytes,
             nonce: bytes) -> hmac.HMAC:
        mac = hmac.HMAC(self._secret, hashes.SHA256())
        mac.update(circuit_id.encode("utf-8") + b"\x00")
        for value in public_signals:
            mac.update(value.to_bytes(32, "big"))
        mac.update(witness_digest)
        mac.update(nonce)
        return mac

    def prove(self, circuit_id: str, inputs: Dict[str, Any], nonce: bytes) -> Proof:
        circuit = self._get_circuit(circuit_id)
        witness = circuit.generate_witness(inputs)
        public_signals = witness.public_signals()

        witness_digest = hashlib.sha256(witness.to_bytes()).digest()
        tag = self._tag(circuit_id, public_signals, witness_digest, nonce).finalize()
        logger.debug(
            "Proved %s with %d public signals",
            circuit_id,
            len(public_signals),
            extra={"circuit_id": circuit_id},
        )
        return Proof(
            circuit_id=circuit_id,
            public_signals=public_signals,
            proof_data=witness_digest + tag,
            nonce=nonce,
            metadata={"backend": "reference"},
        )

    def verify(self, proof: Proof, public_inputs: Sequence[int]) -> bool:
        if proof.circuit_id not in registry:
            return False
        circuit = self._get_circuit(proof.circuit_id)
        public_inputs = list(public_inputs)
        if len(public_inputs) != len(circuit.PUBLIC_INPUTS):
            return False
        if not all(isinstance(v, int) and is_canonical(v) for v in public_inputs):
            return False
        if public_inputs != list(proof.public_signals):
            return False
        if len(proof.proof_data) != PROOF_SIZE or not self.validate_proof_size(proof.proof_data):
            return False

        witness_digest, tag = proof.proof_data[:DIGEST_SIZE], proof.proof_data[DIGEST_SIZE:]
        try:
            self._tag(proof.circuit_id, public_inputs, witness_digest, proof.nonce).verify(tag)
        except InvalidSignature:
            return False
        return True

    def get_circuit_info(self, circuit_id: str) -> Dict[str, Any]:
        return self._get_circuit(circuit_id).get_circuit_info()

    def cleanup(self) -> None:
        self._circuits.clear()
        super().cleanup()
