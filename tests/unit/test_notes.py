"""
Unit tests for native notes, nullifiers and circuit input builders.
"""

import pytest

from zkarena.config import CircuitConfig
from zkarena.crypto.field import FIELD_MODULUS
from zkarena.crypto.poseidon import poseidon_hash
from zkarena.errors import InputShapeError
from zkarena.notes import (
    AssetNote,
    ItemNote,
    Keypair,
    NFTNote,
    PaymentNote,
    card_name,
    compute_nullifier,
    pack_128,
    prepare_draw,
    random_salt,
    setup_box_open,
    setup_card_game,
    setup_trade,
    split_256_to_128,
)


class TestKeypair:
    def test_from_seed(self, alice):
        again = Keypair.from_seed(b"alice-test-seed-0123456789")
        assert again == alice
        assert alice.public_key.verify(alice.private_key)

    def test_info_separates_keys(self):
        seed = b"shared-seed-material-0001"
        assert Keypair.from_seed(seed, b"game") != Keypair.from_seed(seed, b"wallet")

    def test_random_salt(self):
        salts = {random_salt() for _ in range(8)}
        assert len(salts) == 8
        assert all(0 <= s < 2**248 < FIELD_MODULUS for s in salts)


class TestNotes:
    """Test note hashes and nullifiers."""

    def test_nft_note_hash(self, alice):
        note = NFTNote(*alice.pk, 5, 0xABC, 42)
        assert note.hash() == poseidon_hash([alice.pk[0], alice.pk[1], 5, 0xABC, 42])

    def test_nullifier_deterministic(self, alice):
        note = NFTNote.create(alice, 5, 0xABC)
        assert note.nullifier(alice.sk) == compute_nullifier(5, note.salt, alice.sk)
        assert note.nullifier(alice.sk) == note.nullifier(alice.sk)

    def test_nullifier_salt_sensitivity(self, alice):
        """Test that a fresh salt yields a fresh nullifier for the same item."""
        a = NFTNote(*alice.pk, 5, 0xABC, 1)
        b = NFTNote(*alice.pk, 5, 0xABC, 2)
        assert a.nullifier(alice.sk) != b.nullifier(alice.sk)

    def test_nullifier_depends_on_key(self, alice, bob):
        assert compute_nullifier(1, 2, alice.sk) != compute_nullifier(1, 2, bob.sk)

    def test_item_note_fields(self, alice):
        note = ItemNote.create(alice, 9, 2, 0xFF, 77)
        assert note.hash() == poseidon_hash(
            [alice.pk[0], alice.pk[1], 9, 2, 0xFF, 77, note.salt]
        )

    def test_payment_gift_hash(self, alice):
        assert PaymentNote(*alice.pk, 0, 1, 123).hash() == 0
        assert PaymentNote(*alice.pk, 10, 1, 123).hash() != 0


class TestAssetNote:
    """Test generic and smart asset notes."""

    def test_regular_note(self, alice):
        note = AssetNote.for_owner(alice, 100, 1, salt=5)
        assert (note.owner0, note.owner1) == alice.pk
        assert (note.vk0, note.vk1) == alice.pk

    def test_smart_note(self, alice):
        parent = AssetNote.for_owner(alice, 100, 1, salt=5)
        child = AssetNote.create_smart_note(parent, 40, 1, salt=6)
        assert child.parent_hash == parent.hash()
        assert child.hash() != parent.hash()

    def test_owner_address(self):
        owner0 = (0xDEADBEEF << 96) | 0x1234
        owner1 = 0xCAFE
        note = AssetNote(owner0, owner1, 1, 1, 0, 0, 0)
        assert note.owner_address == (0xDEADBEEF << 128) | 0xCAFE
        assert note.owner_address < 2**160

    def test_timelocked_hash(self, alice):
        note = AssetNote.for_owner(alice, 100, 1, salt=5)
        assert note.timelocked_hash(1700000000) != note.hash()
        assert note.timelocked_hash(1700000000) != note.timelocked_hash(1700000001)

    def test_split_and_pack(self):
        value = FIELD_MODULUS - 1
        hi, lo = split_256_to_128(value)
        assert lo < 2**128
        assert pack_128(hi, lo) == value


class TestCardNames:
    @pytest.mark.parametrize(
        "index,name", [(0, "A♠"), (12, "K♠"), (13, "A♥"), (38, "K♦"), (51, "K♣")]
    )
    def test_card_name(self, index, name):
        assert card_name(index) == name

    @pytest.mark.parametrize("index", [-1, 52])
    def test_out_of_range(self, index):
        with pytest.raises(InputShapeError):
            card_name(index)


class TestBuilders:
    """Test circuit input builders."""

    def test_trade_gift(self, alice, bob):
        setup = setup_trade(1, 2, 3, 4, price=0, payment_token=0, seller=alice, buyer=bob)
        assert setup.payment_note_hash == 0
        assert setup.circuit_inputs["paymentNoteHash"] == 0

    def test_box_open(self, alice):
        setup = setup_box_open(1, 1, 500, owner=alice)
        assert setup.circuit_inputs["itemRarity"] == setup.rarity
        assert setup.rarity_label in ("Legendary", "Epic", "Rare", "Common")
        assert 0 <= setup.vrf_mod < 10000

    def test_box_open_threshold_count(self, alice):
        with pytest.raises(InputShapeError):
            setup_box_open(1, 1, 500, thresholds=(5000, 10000), owner=alice)

    def test_card_game(self, alice, small_deck_config):
        game = setup_card_game(7, player=alice, shuffle_seed=99, config=small_deck_config)
        assert sorted(game.deck_cards) == list(range(8))
        draw = prepare_draw(game, 3)
        assert draw.drawn_card == game.deck_cards[3]
        assert draw.circuit_inputs["deckCards"] == game.deck_cards

    def test_draw_index_range(self, alice, small_deck_config):
        game = setup_card_game(7, player=alice, config=small_deck_config)
        with pytest.raises(InputShapeError):
            prepare_draw(game, 8)
