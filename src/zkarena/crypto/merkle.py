"""
Fixed-depth Poseidon Merkle tree.

Leaves are field elements, internal nodes are ``Poseidon(left, right)`` and
empty positions hold the precomputed zero subtree for their level. Proofs use
the same ``(path_elements, path_index)`` form the inclusion circuit consumes:
bit ``i`` of ``path_index`` set means the running node is the right child at
level ``i``.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..errors import ResourceError, ValidationError
from .poseidon import poseidon_hash

DEFAULT_DEPTH = 20


def hash_pair(left: int, right: int) -> int:
    return poseidon_hash([left, right])


@dataclass(frozen=True)
class MerkleProof:
    """Proof of inclusion in a Merkle tree."""

    leaf: int
    path_elements: Tuple[int, ...]
    path_index: int
    root: int

    @property
    def depth(self) -> int:
        return len(self.path_elements)

    def compute_root(self) -> int:
        """Recompute the root from the leaf and sibling path."""
        current = self.leaf
        for level, sibling in enumerate(self.path_elements):
            if (self.path_index >> level) & 1:
                current = hash_pair(sibling, current)
            else:
                current = hash_pair(current, sibling)
        return current

    def verify(self) -> bool:
        """Verify that this proof is valid."""
        if not 0 <= self.path_index < 2**self.depth:
            return False
        return self.compute_root() == self.root


class MerkleTree:
    """Append-only Poseidon Merkle tree of fixed depth."""

    def __init__(self, depth: int = DEFAULT_DEPTH, leaves: Optional[Sequence[int]] = None):
        """
        Initialize a Merkle tree.

        Args:
            depth: Number of levels between a leaf and the root.
            leaves: Optional initial leaves, inserted in order.
        """
        if depth < 1:
            raise ValidationError("Merkle depth must be positive", field="depth", value=depth)

        self.depth = depth
        self.zero_hashes = self._compute_zero_hashes()
        # nodes[level][index]; level 0 holds leaves
        self._nodes: List[Dict[int, int]] = [{} for _ in range(depth + 1)]
        self._size = 0

        for leaf in leaves or []:
            self.insert(leaf)

    def _compute_zero_hashes(self) -> List[int]:
        zero_hashes = [0]
        for _ in range(self.depth):
            zero_hashes.append(hash_pair(zero_hashes[-1], zero_hashes[-1]))
        return zero_hashes

    def _node(self, level: int, index: int) -> int:
        return self._nodes[level].get(index, self.zero_hashes[level])

    def _set_leaf(self, index: int, leaf: int) -> None:
        self._nodes[0][index] = leaf
        for level in range(self.depth):
            index >>= 1
            left = self._node(level, 2 * index)
            right = self._node(level, 2 * index + 1)
            self._nodes[level + 1][index] = hash_pair(left, right)

    @property
    def capacity(self) -> int:
        return 2**self.depth

    def __len__(self) -> int:
        return self._size

    @property
    def root(self) -> int:
        return self._node(self.depth, 0)

    def insert(self, leaf: int) -> int:
        """Append a leaf and return its index."""
        if self._size >= self.capacity:
            raise ResourceError(
                "Merkle tree is full", resource_type="merkle_leaves", limit=self.capacity
            )
        index = self._size
        self._set_leaf(index, leaf)
        self._size += 1
        return index

    def update(self, index: int, leaf: int) -> None:
        """Replace an existing leaf."""
        if not 0 <= index < self._size:
            raise ValidationError("Leaf index out of range", field="index", value=index)
        self._set_leaf(index, leaf)

    def get_leaf(self, index: int) -> int:
        return self._node(0, index)

    def index_of(self, leaf: int) -> Optional[int]:
        for index, value in self._nodes[0].items():
            if value == leaf:
                return index
        return None

    def get_proof(self, index: int) -> MerkleProof:
        """Get the inclusion proof for the leaf at ``index``."""
        if not 0 <= index < self._size:
            raise ValidationError("Leaf index out of range", field="index", value=index)

        siblings = []
        position = index
        for level in range(self.depth):
            siblings.append(self._node(level, position ^ 1))
            position >>= 1

        return MerkleProof(
            leaf=self.get_leaf(index),
            path_elements=tuple(siblings),
            path_index=index,
            root=self.root,
        )

    def verify_proof(self, proof: MerkleProof) -> bool:
        """Verify a proof against the current root."""
        return proof.depth == self.depth and proof.root == self.root and proof.verify()

    def __repr__(self) -> str:
        return f"MerkleTree(depth={self.depth}, leaves={self._size}, root={hex(self.root)})"
