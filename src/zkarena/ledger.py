"""
In-memory settlement ledger.

``NoteLedger`` tracks note commitments, spent nullifiers, registered decks and
drawn card indices. ``GameSettlement`` applies proven state transitions to a
ledger: every action checks the ledger preconditions first, then verifies the
proof against the public vector assembled from the action's arguments, and
only then mutates state.
"""

import logging
import threading
from enum import IntEnum
from typing import Dict, List, Optional, Set, Tuple

from .circuits.applications import (
    CardDrawCircuit,
    ItemTradeCircuit,
    LootBoxCircuit,
    PrivateTransferCircuit,
)
from .errors import DoubleSpendError, LedgerError
from .proving import Proof, ProofManager

logger = logging.getLogger(__name__)


class NoteState(IntEnum):
    """Lifecycle of a note commitment."""

    INVALID = 0
    VALID = 1
    TRADING = 2
    SPENT = 3


class NoteLedger:
    """Note states, nullifiers and per-game draw bookkeeping."""

    def __init__(self):
        self._notes: Dict[int, NoteState] = {}
        self._nullifiers: Set[int] = set()
        self._decks: Dict[int, int] = {}
        self._drawn: Dict[int, Set[int]] = {}
        self._nfts: Set[Tuple[int, int]] = set()
        self._items: Set[Tuple[int, int]] = set()
        self._boxes: Set[int] = set()
        self._lock = threading.RLock()

    def get_note_state(self, note_hash: int) -> NoteState:
        with self._lock:
            return self._notes.get(note_hash, NoteState.INVALID)

    def is_nullifier_used(self, nullifier: int) -> bool:
        with self._lock:
            return nullifier in self._nullifiers

    def is_drawn(self, game_id: int, draw_index: int) -> bool:
        with self._lock:
            return draw_index in self._drawn.get(game_id, ())

    def deck_of(self, game_id: int) -> Optional[int]:
        with self._lock:
            return self._decks.get(game_id)

    def add_note(self, note_hash: int) -> None:
        with self._lock:
            if note_hash in self._notes:
                raise LedgerError("Note already exists", note_hash=note_hash)
            self._notes[note_hash] = NoteState.VALID

    def require_valid(self, note_hash: int) -> None:
        if self.get_note_state(note_hash) != NoteState.VALID:
            raise LedgerError("Note does not exist or already spent", note_hash=note_hash)

    def require_unused(self, nullifier: int) -> None:
        if self.is_nullifier_used(nullifier):
            raise DoubleSpendError("Nullifier already used", nullifier=nullifier)

    def require_new(self, *note_hashes: int) -> None:
        """Each hash must be unknown to the ledger and distinct from the others."""
        seen: Set[int] = set()
        with self._lock:
            for note_hash in note_hashes:
                if note_hash in seen or self.get_note_state(note_hash) != NoteState.INVALID:
                    raise LedgerError("Note already exists", note_hash=note_hash)
                seen.add(note_hash)

    def spend(self, note_hash: int, nullifier: int) -> None:
        """Mark ``note_hash`` spent and record its nullifier."""
        with self._lock:
            self.require_unused(nullifier)
            self.require_valid(note_hash)
            self._nullifiers.add(nullifier)
            self._notes[note_hash] = NoteState.SPENT

    def mark_trading(self, note_hash: int) -> None:
        """Lock a valid note while a trade is pending."""
        with self._lock:
            self.require_valid(note_hash)
            self._notes[note_hash] = NoteState.TRADING

    def release(self, note_hash: int) -> None:
        with self._lock:
            if self.get_note_state(note_hash) != NoteState.TRADING:
                raise LedgerError("Note is not being traded", note_hash=note_hash)
            self._notes[note_hash] = NoteState.VALID

    def register_nft(self, note_hash: int, collection_address: int, nft_id: int) -> None:
        with self._lock:
            if (collection_address, nft_id) in self._nfts:
                raise LedgerError("NFT already registered", note_hash=note_hash)
            self.add_note(note_hash)
            self._nfts.add((collection_address, nft_id))

    def register_item(self, note_hash: int, game_id: int, item_id: int) -> None:
        with self._lock:
            if (game_id, item_id) in self._items:
                raise LedgerError("Item already registered", note_hash=note_hash)
            self.add_note(note_hash)
            self._items.add((game_id, item_id))

    def register_box(self, note_hash: int, box_id: int) -> None:
        with self._lock:
            if box_id in self._boxes:
                raise LedgerError("Box already registered", note_hash=note_hash)
            self.add_note(note_hash)
            self._boxes.add(box_id)

    def register_deck(self, game_id: int, deck_commitment: int) -> None:
        with self._lock:
            if game_id in self._decks:
                raise LedgerError("Deck already registered for this game", note_hash=deck_commitment)
            self.add_note(deck_commitment)
            self._decks[game_id] = deck_commitment

    def mark_drawn(self, game_id: int, draw_index: int) -> None:
        with self._lock:
            if self.is_drawn(game_id, draw_index):
                raise LedgerError("Card already drawn at this index")
            self._drawn.setdefault(game_id, set()).add(draw_index)

    def drawn_indices(self, game_id: int) -> List[int]:
        with self._lock:
            return sorted(self._drawn.get(game_id, ()))

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "notes": len(self._notes),
                "valid_notes": sum(1 for s in self._notes.values() if s == NoteState.VALID),
                "nullifiers": len(self._nullifiers),
                "decks": len(self._decks),
                "draws": sum(len(d) for d in self._drawn.values()),
            }


class GameSettlement:
    """Applies proven transfers, trades, box openings and card draws."""

    def __init__(self, manager: Optional[ProofManager] = None, ledger: Optional[NoteLedger] = None):
        self.manager = manager or ProofManager()
        self.ledger = ledger or NoteLedger()
        self._lock = threading.RLock()

    def _verify(self, proof: Proof, circuit_id: str, public_inputs: List[int]) -> None:
        if proof.circuit_id != circuit_id:
            raise LedgerError(f"Expected a {circuit_id} proof, got {proof.circuit_id}")
        if not self.manager.verify(proof, public_inputs).is_valid:
            raise LedgerError("Invalid proof")

    # Registration

    def register_nft(self, note_hash: int, collection_address: int, nft_id: int) -> None:
        self.ledger.register_nft(note_hash, collection_address, nft_id)
        logger.info("NFT registered: collection=%#x id=%d", collection_address, nft_id)

    def register_item(self, note_hash: int, game_id: int, item_id: int) -> None:
        self.ledger.register_item(note_hash, game_id, item_id)
        logger.info("Item registered: game=%d id=%d", game_id, item_id)

    def register_box(self, note_hash: int, box_id: int) -> None:
        self.ledger.register_box(note_hash, box_id)
        logger.info("Box registered: id=%d", box_id)

    def register_deck(self, deck_commitment: int, game_id: int) -> None:
        self.ledger.register_deck(game_id, deck_commitment)
        logger.info("Deck registered for game %d", game_id)

    # Proven transitions

    def transfer_nft(
        self,
        proof: Proof,
        old_nft_hash: int,
        new_nft_hash: int,
        nft_id: int,
        collection_address: int,
        nullifier: int,
    ) -> None:
        with self._lock:
            self.ledger.require_unused(nullifier)
            self.ledger.require_valid(old_nft_hash)
            self.ledger.require_new(new_nft_hash)
            self._verify(
                proof,
                PrivateTransferCircuit.circuit_id,
                [old_nft_hash, new_nft_hash, nft_id, collection_address, nullifier],
            )
            self.ledger.spend(old_nft_hash, nullifier)
            self.ledger.add_note(new_nft_hash)
        logger.info("NFT %d transferred", nft_id)

    def trade_item(
        self,
        proof: Proof,
        old_item_hash: int,
        new_item_hash: int,
        payment_note_hash: int,
        game_id: int,
        nullifier: int,
    ) -> None:
        """Settle a trade; a nonzero payment note becomes a valid note of the seller."""
        with self._lock:
            self.ledger.require_unused(nullifier)
            self.ledger.require_valid(old_item_hash)
            new_notes = [new_item_hash]
            if payment_note_hash:
                new_notes.append(payment_note_hash)
            self.ledger.require_new(*new_notes)
            self._verify(
                proof,
                ItemTradeCircuit.circuit_id,
                [old_item_hash, new_item_hash, payment_note_hash, game_id, nullifier],
            )
            self.ledger.spend(old_item_hash, nullifier)
            for note_hash in new_notes:
                self.ledger.add_note(note_hash)
        logger.info("Item traded in game %d (gift=%s)", game_id, payment_note_hash == 0)

    def open_box(
        self,
        proof: Proof,
        box_commitment: int,
        outcome_commitment: int,
        vrf_output: int,
        box_id: int,
        nullifier: int,
    ) -> None:
        with self._lock:
            self.ledger.require_unused(nullifier)
            self.ledger.require_valid(box_commitment)
            self.ledger.require_new(outcome_commitment)
            self._verify(
                proof,
                LootBoxCircuit.circuit_id,
                [box_commitment, outcome_commitment, vrf_output, box_id, nullifier],
            )
            self.ledger.spend(box_commitment, nullifier)
            self.ledger.add_note(outcome_commitment)
        logger.info("Box %d opened", box_id)

    def draw_card(
        self,
        proof: Proof,
        deck_commitment: int,
        draw_commitment: int,
        draw_index: int,
        game_id: int,
        player_commitment: int,
    ) -> None:
        """Record a draw; the deck stays valid and each index is drawn at most once."""
        with self._lock:
            registered = self.ledger.deck_of(game_id)
            if registered is None:
                raise LedgerError("Deck not registered for this game")
            if registered != deck_commitment:
                raise LedgerError("Deck commitment mismatch", note_hash=deck_commitment)
            self.ledger.require_valid(deck_commitment)
            if self.ledger.is_drawn(game_id, draw_index):
                raise LedgerError("Card already drawn at this index")
            self.ledger.require_new(draw_commitment)
            self._verify(
                proof,
                CardDrawCircuit.circuit_id,
                [deck_commitment, draw_commitment, draw_index, game_id, player_commitment],
            )
            self.ledger.add_note(draw_commitment)
            self.ledger.mark_drawn(game_id, draw_index)
        logger.info("Card drawn in game %d at index %d", game_id, draw_index)
