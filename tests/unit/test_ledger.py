"""
Unit tests for the note ledger bookkeeping.
"""

import pytest

from zkarena.errors import DoubleSpendError, LedgerError
from zkarena.ledger import NoteLedger, NoteState


@pytest.fixture
def ledger():
    return NoteLedger()


class TestNoteLedger:
    """Test note state transitions."""

    def test_unknown_note_is_invalid(self, ledger):
        assert ledger.get_note_state(123) == NoteState.INVALID

    def test_add_note(self, ledger):
        ledger.add_note(1)
        assert ledger.get_note_state(1) == NoteState.VALID
        with pytest.raises(LedgerError, match="Note already exists"):
            ledger.add_note(1)

    def test_spend(self, ledger):
        ledger.add_note(1)
        ledger.spend(1, nullifier=99)
        assert ledger.get_note_state(1) == NoteState.SPENT
        assert ledger.is_nullifier_used(99)

    def test_double_spend(self, ledger):
        ledger.add_note(1)
        ledger.add_note(2)
        ledger.spend(1, nullifier=99)
        with pytest.raises(DoubleSpendError, match="Nullifier already used") as exc_info:
            ledger.spend(2, nullifier=99)
        assert exc_info.value.nullifier == 99
        assert ledger.get_note_state(2) == NoteState.VALID

    def test_spend_requires_valid(self, ledger):
        with pytest.raises(LedgerError, match="Note does not exist or already spent"):
            ledger.spend(1, nullifier=5)
        assert not ledger.is_nullifier_used(5)

    def test_nullifier_checked_before_note(self, ledger):
        ledger.add_note(1)
        ledger.spend(1, nullifier=7)
        with pytest.raises(DoubleSpendError):
            ledger.spend(1, nullifier=7)

    def test_require_new(self, ledger):
        ledger.add_note(1)
        ledger.require_new(2, 3)
        with pytest.raises(LedgerError, match="Note already exists"):
            ledger.require_new(2, 1)
        with pytest.raises(LedgerError, match="Note already exists"):
            ledger.require_new(4, 4)

    def test_state_numbering(self):
        assert [int(s) for s in (NoteState.INVALID, NoteState.VALID, NoteState.TRADING, NoteState.SPENT)] == [0, 1, 2, 3]

    def test_trading_lock(self, ledger):
        """Test that a note locked for trading cannot be spent until released."""
        ledger.add_note(1)
        ledger.mark_trading(1)
        assert ledger.get_note_state(1) == NoteState.TRADING
        with pytest.raises(LedgerError):
            ledger.spend(1, nullifier=3)
        ledger.release(1)
        assert ledger.get_note_state(1) == NoteState.VALID
        with pytest.raises(LedgerError, match="Note is not being traded"):
            ledger.release(1)

    def test_register_nft(self, ledger):
        ledger.register_nft(10, collection_address=0xAA, nft_id=1)
        with pytest.raises(LedgerError, match="NFT already registered"):
            ledger.register_nft(11, collection_address=0xAA, nft_id=1)
        ledger.register_nft(12, collection_address=0xBB, nft_id=1)

    def test_register_item_and_box(self, ledger):
        ledger.register_item(10, game_id=1, item_id=5)
        with pytest.raises(LedgerError, match="Item already registered"):
            ledger.register_item(11, game_id=1, item_id=5)
        ledger.register_box(20, box_id=5)
        with pytest.raises(LedgerError, match="Box already registered"):
            ledger.register_box(21, box_id=5)

    def test_register_deck(self, ledger):
        ledger.register_deck(game_id=7, deck_commitment=555)
        assert ledger.deck_of(7) == 555
        assert ledger.deck_of(8) is None
        with pytest.raises(LedgerError, match="Deck already registered for this game"):
            ledger.register_deck(game_id=7, deck_commitment=556)

    def test_draws(self, ledger):
        ledger.mark_drawn(7, 3)
        ledger.mark_drawn(7, 0)
        ledger.mark_drawn(8, 3)
        assert ledger.is_drawn(7, 3)
        assert not ledger.is_drawn(7, 1)
        assert ledger.drawn_indices(7) == [0, 3]
        with pytest.raises(LedgerError, match="Card already drawn at this index"):
            ledger.mark_drawn(7, 3)

    def test_stats(self, ledger):
        ledger.add_note(1)
        ledger.add_note(2)
        ledger.spend(1, 9)
        ledger.register_deck(1, 3)
        ledger.mark_drawn(1, 0)
        assert ledger.get_stats() == {
            "notes": 3,
            "valid_notes": 2,
            "nullifiers": 1,
            "decks": 1,
            "draws": 1,
        }
