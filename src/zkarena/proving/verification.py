"""
Verdict cache and per-circuit replay protection.

Both are keyed by what a proof commits to. A cached verdict is stored under
the proof's circuit id, the public vector it was checked against and a digest
of the proof itself, so it is only reused for that exact pair. Nonces of
accepted proofs are remembered per circuit.
"""

import hashlib
import threading
import time
from collections import OrderedDict, deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Optional, Sequence, Set, Tuple

from .core import Proof, VerificationResult

VerdictKey = Tuple[str, Tuple[int, ...], bytes]


def verdict_key(proof: Proof, public_inputs: Sequence[int]) -> VerdictKey:
    """``(circuit_id, public vector, proof digest)`` for one verification."""
    digest = hashlib.sha256(proof.proof_data)
    digest.update(proof.nonce)
    for value in proof.public_signals:
        digest.update(value.to_bytes(32, "big"))
    return proof.circuit_id, tuple(public_inputs), digest.digest()


@dataclass
class CacheEntry:
    result: VerificationResult
    verified_at: float

    def is_expired(self, ttl: float) -> bool:
        return time.time() - self.verified_at > ttl


class VerificationCache:
    """LRU cache of verdicts with a time-to-live, with hit counts per circuit."""

    def __init__(self, max_size: int = 1000, ttl: float = 3600.0):
        self.max_size = max_size
        self.ttl = ttl
        self._entries: "OrderedDict[VerdictKey, CacheEntry]" = OrderedDict()
        self._hits: Dict[str, int] = {}
        self._misses: Dict[str, int] = {}
        self._lock = threading.RLock()

    def get(self, proof: Proof, public_inputs: Sequence[int]) -> Optional[VerificationResult]:
        key = verdict_key(proof, public_inputs)
        circuit_id = proof.circuit_id
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if not entry.is_expired(self.ttl):
                    self._entries.move_to_end(key)
                    self._hits[circuit_id] = self._hits.get(circuit_id, 0) + 1
                    return entry.result
                del self._entries[key]
            self._misses[circuit_id] = self._misses.get(circuit_id, 0) + 1
            return None

    def put(self, proof: Proof, public_inputs: Sequence[int], result: VerificationResult) -> None:
        key = verdict_key(proof, public_inputs)
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            self._entries[key] = CacheEntry(result, time.time())

    def invalidate(self, circuit_id: str) -> int:
        """Drop every verdict for ``circuit_id``; returns how many were dropped."""
        with self._lock:
            stale = [key for key in self._entries if key[0] == circuit_id]
            for key in stale:
                del self._entries[key]
            return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits.clear()
            self._misses.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            hits = sum(self._hits.values())
            misses = sum(self._misses.values())
            per_circuit: Dict[str, Dict[str, int]] = {}
            for circuit_id in sorted(set(self._hits) | set(self._misses)):
                per_circuit[circuit_id] = {
                    "hits": self._hits.get(circuit_id, 0),
                    "misses": self._misses.get(circuit_id, 0),
                }
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "hits": hits,
                "misses": misses,
                "hit_rate": hits / (hits + misses) if hits + misses else 0.0,
                "ttl": self.ttl,
                "circuits": per_circuit,
            }


class ReplayProtection:
    """Nonces of accepted proofs, kept per circuit within a sliding window.

    A nonce is only a replay for the circuit it was accepted under. Proofs
    without a nonce are never tracked.
    """

    def __init__(self, max_window_size: int = 10000):
        self.max_window_size = max_window_size
        self._seen: Dict[str, Set[bytes]] = {}
        self._windows: Dict[str, Deque[bytes]] = {}
        self._lock = threading.RLock()

    def is_replay(self, proof: Proof) -> bool:
        if not proof.nonce:
            return False
        with self._lock:
            return proof.nonce in self._seen.get(proof.circuit_id, ())

    def record(self, proof: Proof) -> None:
        if not proof.nonce:
            return
        with self._lock:
            seen = self._seen.setdefault(proof.circuit_id, set())
            window = self._windows.setdefault(proof.circuit_id, deque())
            if proof.nonce in seen:
                return
            seen.add(proof.nonce)
            window.append(proof.nonce)
            while len(window) > self.max_window_size:
                seen.discard(window.popleft())

    def clear(self, circuit_id: Optional[str] = None) -> None:
        with self._lock:
            if circuit_id is None:
                self._seen.clear()
                self._windows.clear()
            else:
                self._seen.pop(circuit_id, None)
                self._windows.pop(circuit_id, None)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            per_circuit = {cid: len(seen) for cid, seen in sorted(self._seen.items())}
            return {
                "recorded_nonces": sum(per_circuit.values()),
                "max_window_size": self.max_window_size,
                "circuits": per_circuit,
            }
