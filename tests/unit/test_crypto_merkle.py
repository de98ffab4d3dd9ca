"""
Unit tests for the Poseidon Merkle tree.
"""

import logging

logger = logging.getLogger(__name__)
import pytest

from zkarena.crypto.merkle import MerkleProof, MerkleTree, hash_pair
from zkarena.errors import ResourceError, ValidationError


class TestMerkleTree:
    """Test the MerkleTree class."""

    def test_empty_root_is_zero_chain(self):
        """Test that an empty tree's root is the hash chain of zeros."""
        tree = MerkleTree(depth=3)
        expected = 0
        for _ in range(3):
            expected = hash_pair(expected, expected)
        assert tree.root == expected
        assert len(tree) == 0

    def test_insert(self):
        tree = MerkleTree(depth=3)
        assert tree.insert(11) == 0
        assert tree.insert(22) == 1
        assert len(tree) == 2
        assert tree.get_leaf(1) == 22
        assert tree.index_of(22) == 1
        assert tree.index_of(33) is None

    def test_root_of_two_leaves(self):
        tree = MerkleTree(depth=1, leaves=[5, 6])
        assert tree.root == hash_pair(5, 6)

    def test_root_changes_on_insert(self):
        tree = MerkleTree(depth=4)
        before = tree.root
        tree.insert(1)
        assert tree.root != before

    def test_full_tree(self):
        tree = MerkleTree(depth=1, leaves=[1, 2])
        with pytest.raises(ResourceError):
            tree.insert(3)

    def test_invalid_depth(self):
        with pytest.raises(ValidationError):
            MerkleTree(depth=0)

    def test_update(self):
        tree = MerkleTree(depth=2, leaves=[1, 2, 3])
        old_root = tree.root
        tree.update(1, 20)
        assert tree.get_leaf(1) == 20
        assert tree.root != old_root
        with pytest.raises(ValidationError):
            tree.update(3, 4)

    def test_repr(self):
        assert "depth=2" in repr(MerkleTree(depth=2))


class TestMerkleProof:
    """Test inclusion proofs."""

    @pytest.fixture
    def tree(self):
        return MerkleTree(depth=4, leaves=[100 + i for i in range(5)])

    def test_valid_proof(self, tree):
        """Test that every inserted leaf has a valid proof."""
        for index in range(5):
            proof = tree.get_proof(index)
            assert proof.depth == 4
            assert proof.compute_root() == tree.root
            assert tree.verify_proof(proof)

    def test_flipped_sibling(self, tree):
        proof = tree.get_proof(2)
        siblings = list(proof.path_elements)
        siblings[1] += 1
        forged = MerkleProof(proof.leaf, tuple(siblings), proof.path_index, proof.root)
        assert not forged.verify()

    def test_flipped_index_bit(self, tree):
        proof = tree.get_proof(2)
        forged = MerkleProof(proof.leaf, proof.path_elements, proof.path_index ^ 1, proof.root)
        assert not forged.verify()

    def test_index_out_of_range(self, tree):
        proof = tree.get_proof(0)
        forged = MerkleProof(proof.leaf, proof.path_elements, 16, proof.root)
        assert not forged.verify()

    def test_stale_proof(self, tree):
        proof = tree.get_proof(0)
        tree.insert(999)
        assert not tree.verify_proof(proof)

    def test_missing_leaf(self, tree):
        with pytest.raises(ValidationError):
            tree.get_proof(5)
