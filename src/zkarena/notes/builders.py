"""
Circuit input builders.

Each ``setup_*`` function creates fresh keys and salts (unless supplied),
computes every commitment natively and returns the complete input mapping for
the matching circuit alongside the values the caller needs afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..config import DEFAULT_CONFIG, CircuitConfig
from ..crypto.poseidon import poseidon_hash
from ..errors import InputShapeError
from .game import (
    compute_deck_commitment,
    compute_vrf,
    compute_vrf_mod,
    determine_rarity,
    fisher_yates_shuffle,
    rarity_label,
)
from .keypair import Keypair, random_salt
from .note import BoxNote, ItemNote, NFTNote, OutcomeNote, PaymentNote


@dataclass
class TransferSetup:
    old_owner: Keypair
    new_owner: Keypair
    old_note: NFTNote
    new_note: NFTNote
    nullifier: int
    circuit_inputs: Dict[str, Any] = field(default_factory=dict)


def setup_transfer(
    nft_id: int,
    collection_address: int,
    old_owner: Optional[Keypair] = None,
    new_owner: Optional[Keypair] = None,
) -> TransferSetup:
    old_owner = old_owner or Keypair.generate()
    new_owner = new_owner or Keypair.generate()
    old_note = NFTNote.create(old_owner, nft_id, collection_address)
    new_note = NFTNote.create(new_owner, nft_id, collection_address)
    nullifier = old_note.nullifier(old_owner.sk)

    inputs = {
        "oldNftHash": old_note.hash(),
        "newNftHash": new_note.hash(),
        "nftId": nft_id,
        "collectionAddress": collection_address,
        "nullifier": nullifier,
        "oldOwnerPkX": old_owner.pk[0],
        "oldOwnerPkY": old_owner.pk[1],
        "oldOwnerSk": old_owner.sk,
        "oldSalt": old_note.salt,
        "newOwnerPkX": new_owner.pk[0],
        "newOwnerPkY": new_owner.pk[1],
        "newSalt": new_note.salt,
    }
    return TransferSetup(old_owner, new_owner, old_note, new_note, nullifier, inputs)


@dataclass
class TradeSetup:
    seller: Keypair
    buyer: Keypair
    old_note: ItemNote
    new_note: ItemNote
    payment: PaymentNote
    nullifier: int
    circuit_inputs: Dict[str, Any] = field(default_factory=dict)

    @property
    def payment_note_hash(self) -> int:
        return self.payment.hash()


def setup_trade(
    item_id: int,
    item_type: int,
    item_attributes: int,
    game_id: int,
    price: int,
    payment_token: int,
    seller: Optional[Keypair] = None,
    buyer: Optional[Keypair] = None,
) -> TradeSetup:
    """Inputs for a trade; ``price == 0`` builds a gift with a zero payment hash."""
    seller = seller or Keypair.generate()
    buyer = buyer or Keypair.generate()
    old_note = ItemNote.create(seller, item_id, item_type, item_attributes, game_id)
    new_note = ItemNote.create(buyer, item_id, item_type, item_attributes, game_id)
    payment = PaymentNote(*seller.pk, price, payment_token, random_salt())
    nullifier = old_note.nullifier(seller.sk)

    inputs = {
        "oldItemHash": old_note.hash(),
        "newItemHash": new_note.hash(),
        "paymentNoteHash": payment.hash(),
        "gameId": game_id,
        "nullifier": nullifier,
        "sellerPkX": seller.pk[0],
        "sellerPkY": seller.pk[1],
        "sellerSk": seller.sk,
        "oldSalt": old_note.salt,
        "buyerPkX": buyer.pk[0],
        "buyerPkY": buyer.pk[1],
        "newSalt": new_note.salt,
        "itemId": item_id,
        "itemType": item_type,
        "itemAttributes": item_attributes,
        "price": price,
        "paymentToken": payment_token,
        "paymentSalt": payment.salt,
    }
    return TradeSetup(seller, buyer, old_note, new_note, payment, nullifier, inputs)


@dataclass
class BoxOpenSetup:
    owner: Keypair
    box: BoxNote
    outcome: OutcomeNote
    nullifier: int
    vrf_output: int
    vrf_mod: int
    rarity: int
    rarity_label: str
    circuit_inputs: Dict[str, Any] = field(default_factory=dict)


def setup_box_open(
    box_id: int,
    box_type: int,
    item_id: int,
    thresholds: Sequence[int] = DEFAULT_CONFIG.default_thresholds,
    owner: Optional[Keypair] = None,
    config: CircuitConfig = DEFAULT_CONFIG,
) -> BoxOpenSetup:
    """Inputs for opening a box; the rarity is whatever the VRF dictates."""
    if len(thresholds) != config.num_tiers:
        raise InputShapeError(
            f"expected {config.num_tiers} rarity thresholds",
            field="thresholds",
            value=len(thresholds),
        )
    owner = owner or Keypair.generate()
    box = BoxNote(*owner.pk, box_id, box_type, random_salt())
    nullifier = box.nullifier(owner.sk)
    vrf_output = compute_vrf(owner.sk, nullifier)
    vrf_mod = compute_vrf_mod(vrf_output, config.random_bits, config.rarity_scale)
    rarity = determine_rarity(vrf_mod, thresholds)
    outcome = OutcomeNote(*owner.pk, item_id, rarity, random_salt())

    inputs = {
        "boxCommitment": box.hash(),
        "outcomeCommitment": outcome.hash(),
        "vrfOutput": vrf_output,
        "boxId": box_id,
        "nullifier": nullifier,
        "ownerPkX": owner.pk[0],
        "ownerPkY": owner.pk[1],
        "ownerSk": owner.sk,
        "boxSalt": box.salt,
        "boxType": box_type,
        "itemId": item_id,
        "itemRarity": rarity,
        "itemSalt": outcome.salt,
        "rarityThresholds": list(thresholds),
    }
    return BoxOpenSetup(
        owner, box, outcome, nullifier, vrf_output, vrf_mod, rarity, rarity_label(rarity), inputs
    )


@dataclass
class CardGameSetup:
    player: Keypair
    game_id: int
    shuffle_seed: int
    deck_cards: List[int]
    deck_salt: int
    deck_commitment: int
    player_commitment: int


@dataclass
class DrawSetup:
    draw_index: int
    drawn_card: int
    hand_salt: int
    draw_commitment: int
    circuit_inputs: Dict[str, Any] = field(default_factory=dict)


def setup_card_game(
    game_id: int,
    player: Optional[Keypair] = None,
    shuffle_seed: Optional[int] = None,
    config: CircuitConfig = DEFAULT_CONFIG,
) -> CardGameSetup:
    """Shuffle a fresh deck for ``player`` and commit to it."""
    player = player or Keypair.generate()
    shuffle_seed = random_salt() if shuffle_seed is None else shuffle_seed
    deck_salt = random_salt()
    deck = fisher_yates_shuffle(shuffle_seed, config.deck_size, config.random_bits)
    return CardGameSetup(
        player=player,
        game_id=game_id,
        shuffle_seed=shuffle_seed,
        deck_cards=deck,
        deck_salt=deck_salt,
        deck_commitment=compute_deck_commitment(deck, deck_salt),
        player_commitment=poseidon_hash([player.pk[0], player.pk[1], game_id]),
    )


def prepare_draw(game: CardGameSetup, draw_index: int) -> DrawSetup:
    """Inputs for drawing the card at ``draw_index`` of a set-up game."""
    if not 0 <= draw_index < len(game.deck_cards):
        raise InputShapeError(
            "draw index out of range", field="draw_index", value=draw_index
        )
    hand_salt = random_salt()
    drawn_card = game.deck_cards[draw_index]
    draw_commitment = poseidon_hash([drawn_card, draw_index, game.game_id, hand_salt])

    inputs = {
        "deckCommitment": game.deck_commitment,
        "drawCommitment": draw_commitment,
        "drawIndex": draw_index,
        "gameId": game.game_id,
        "playerCommitment": game.player_commitment,
        "playerPkX": game.player.pk[0],
        "playerPkY": game.player.pk[1],
        "playerSk": game.player.sk,
        "shuffleSeed": game.shuffle_seed,
        "deckCards": list(game.deck_cards),
        "drawnCard": drawn_card,
        "handSalt": hand_salt,
        "deckSalt": game.deck_salt,
    }
    return DrawSetup(draw_index, drawn_card, hand_salt, draw_commitment, inputs)
