"""
Unit tests for the hash, commitment, ownership, selector and Merkle gadgets.

Each gadget is checked against its native counterpart and against an
assignment that should not satisfy it.
"""

import logging

logger = logging.getLogger(__name__)
import pytest

from zkarena.circuits import (
    address,
    assert_ownership,
    asset_note,
    babyjub_add,
    compute_nullifier,
    derive_public_key,
    draw_commitment,
    merkle_root,
    merkle_verify,
    nft_note,
    pack_128,
    poseidon,
    prove_ownership,
    select_by_index,
    selector_bits,
    split_256_to_128,
    write_at_index,
)
from zkarena.crypto.babyjub import BASE8
from zkarena.crypto.field import FIELD_MODULUS
from zkarena.crypto.merkle import MerkleTree
from zkarena.crypto.poseidon import poseidon_hash
from zkarena.errors import InputShapeError
from zkarena.notes import AssetNote, NFTNote, compute_nullifier as native_nullifier


def failing(cs):
    return [c.annotation for c in cs.unsatisfied()]


class TestPoseidonGadget:
    """Test that the gadget reproduces the native hash."""

    @pytest.mark.parametrize("inputs", [[0], [1, 2], [5, 6, 7, 8, 9], list(range(16))])
    def test_matches_native(self, cs, inputs):
        signals = cs.private_inputs("in", inputs)
        out = poseidon(signals)
        assert out.value == poseidon_hash(inputs)
        assert cs.is_satisfied()

    def test_constant_inputs(self, cs):
        out = poseidon([cs.private_input("x", 3), 4])
        assert out.value == poseidon_hash([3, 4])

    def test_constraint_count(self, cs):
        """Test three constraints per S-box plus the output binding."""
        poseidon(cs.private_inputs("in", [1, 2]))
        full, partial, width = 8, 57, 3
        sboxes = full * width + partial
        # the first round's S-boxes act on a constant capacity element
        assert cs.num_constraints <= 3 * sboxes + 1

    def test_bad_arity(self, cs):
        with pytest.raises(InputShapeError):
            poseidon(cs.private_inputs("in", list(range(17))))

    def test_forged_output(self, cs):
        out = poseidon(cs.private_inputs("in", [1, 2]))
        assignment = cs.witness().assignment
        assignment[next(iter(out.terms))] += 1
        cs.load_assignment(assignment)
        assert failing(cs) == ["poseidon2/out"]


class TestCommitments:
    """Test note commitments against the native note classes."""

    def test_nft_note(self, cs, alice):
        note = NFTNote(*alice.pk, 7, 0xC0FFEE, 12345)
        signals = cs.private_inputs("note", [note.pk_x, note.pk_y, note.nft_id, note.collection_address, note.salt])
        assert nft_note(*signals).value == note.hash()

    def test_asset_note(self, cs, alice):
        note = AssetNote.for_owner(alice, 100, 1, salt=99)
        fields = [note.owner0, note.owner1, note.value, note.token, note.vk0, note.vk1, note.salt]
        assert asset_note(*cs.private_inputs("note", fields)).value == note.hash()

    def test_draw_commitment(self, cs):
        signals = cs.private_inputs("d", [12, 3, 77, 555])
        assert draw_commitment(*signals).value == poseidon_hash([12, 3, 77, 555])

    def test_address_matches_keypair(self, cs, alice):
        pk = (cs.private_input("pk_x", alice.pk[0]), cs.private_input("pk_y", alice.pk[1]))
        assert address(pk).value == alice.address
        assert cs.is_satisfied()

    def test_split_and_pack(self, cs):
        value = poseidon_hash([1, 2, 3])
        x = cs.private_input("x", value)
        hi, lo = split_256_to_128(x)
        assert (hi.value, lo.value) == (value >> 128, value & (2**128 - 1))
        assert pack_128(hi, lo).value == value
        assert cs.is_satisfied()

    def test_pack_rejects_wide_half(self, cs):
        pack_128(cs.private_input("hi", 1), cs.private_input("lo", 2**128))
        assert "pack_128/num2bits[128]" in failing(cs)

    def test_nullifier(self, cs):
        signals = cs.private_inputs("n", [7, 8, 9])
        assert compute_nullifier(*signals).value == native_nullifier(7, 8, 9)


class TestOwnership:
    """Test Baby Jubjub key derivation in-circuit."""

    def test_babyjub_add(self, cs):
        p = BASE8.mul(3)
        q = BASE8.mul(4)
        x, y = babyjub_add(
            (cs.private_input("x1", p.x), cs.private_input("y1", p.y)),
            (cs.private_input("x2", q.x), cs.private_input("y2", q.y)),
        )
        expected = BASE8.mul(7)
        assert (x.value, y.value) == (expected.x, expected.y)
        assert cs.num_constraints == 6
        assert cs.is_satisfied()

    def test_derive_public_key(self, cs, alice):
        x, y = derive_public_key(cs.private_input("sk", alice.sk))
        assert (x.value, y.value) == alice.pk
        assert cs.is_satisfied()

    def test_valid_ownership(self, cs, alice):
        pk = (cs.public_input("pk_x", alice.pk[0]), cs.public_input("pk_y", alice.pk[1]))
        assert prove_ownership(pk, cs.private_input("sk", alice.sk)).value == 1
        assert cs.is_satisfied()

    def test_negated_y_is_not_owned(self, cs, alice):
        """Test that a key matching on x alone does not count as owned."""
        pk = (
            cs.public_input("pk_x", alice.pk[0]),
            cs.public_input("pk_y", FIELD_MODULUS - alice.pk[1]),
        )
        assert prove_ownership(pk, cs.private_input("sk", alice.sk)).value == 0
        assert cs.is_satisfied()

    def test_wrong_key(self, cs, alice, bob):
        pk = (cs.public_input("pk_x", alice.pk[0]), cs.public_input("pk_y", alice.pk[1]))
        assert prove_ownership(pk, cs.private_input("sk", bob.sk)).value == 0

    def test_assert_ownership(self, cs, alice, bob):
        pk = (cs.public_input("pk_x", alice.pk[0]), cs.public_input("pk_y", alice.pk[1]))
        assert_ownership(pk, cs.private_input("sk", bob.sk))
        assert failing(cs) == ["ownership"]


class TestSelectors:
    """Test proof-time indexing."""

    def test_select_by_index(self, cs):
        values = cs.private_inputs("v", [10, 20, 30, 40])
        assert select_by_index(values, cs.private_input("i", 2)).value == 30
        assert cs.is_satisfied()

    def test_index_out_of_range(self, cs):
        values = cs.private_inputs("v", [10, 20, 30, 40])
        select_by_index(values, cs.private_input("i", 4))
        assert failing(cs) == ["selector/one_hot"]

    def test_write_at_index(self, cs):
        values = cs.private_inputs("v", [10, 20, 30, 40])
        flags = selector_bits(cs.private_input("i", 1), 4)
        updated = write_at_index(values, flags, 99)
        assert [s.value for s in updated] == [10, 99, 30, 40]
        assert cs.is_satisfied()

    def test_write_skip(self, cs):
        values = cs.private_inputs("v", [10, 20, 30])
        flags = selector_bits(cs.private_input("i", 2), 3)
        updated = write_at_index(values, flags, 99, skip=2)
        assert [s.value for s in updated] == [10, 20, 30]

    def test_length_mismatch(self, cs):
        flags = selector_bits(cs.private_input("i", 0), 2)
        with pytest.raises(InputShapeError):
            write_at_index([1, 2, 3], flags, 0)

    def test_empty_selector(self, cs):
        with pytest.raises(InputShapeError):
            selector_bits(cs.private_input("i", 0), 0)


class TestMerkleGadget:
    """Test Merkle inclusion against the native tree."""

    @pytest.fixture
    def proof(self):
        tree = MerkleTree(depth=4, leaves=[poseidon_hash([i]) for i in range(6)])
        return tree.get_proof(5)

    def _inputs(self, cs, proof, path_index=None, siblings=None):
        leaf = cs.private_input("leaf", proof.leaf)
        root = cs.public_input("root", proof.root)
        path = cs.private_inputs("path", siblings or list(proof.path_elements))
        index = cs.private_input("index", proof.path_index if path_index is None else path_index)
        return leaf, root, path, index

    def test_root(self, cs, proof):
        leaf, _, path, index = self._inputs(cs, proof)
        assert merkle_root(leaf, path, index).value == proof.root

    def test_verify(self, cs, proof):
        merkle_verify(*self._inputs(cs, proof))
        assert cs.is_satisfied()

    def test_flipped_sibling(self, cs, proof):
        siblings = list(proof.path_elements)
        siblings[2] = (siblings[2] + 1) % FIELD_MODULUS
        merkle_verify(*self._inputs(cs, proof, siblings=siblings))
        assert failing(cs) == ["merkle_root"]

    def test_flipped_index_bit(self, cs, proof):
        merkle_verify(*self._inputs(cs, proof, path_index=proof.path_index ^ 2))
        assert failing(cs) == ["merkle_root"]

    def test_index_too_large(self, cs, proof):
        merkle_verify(*self._inputs(cs, proof, path_index=16 + proof.path_index))
        assert "merkle/num2bits[4]" in failing(cs)
