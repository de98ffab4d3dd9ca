"""The four application circuits; importing this package registers them."""

from .card_draw import CardDrawCircuit
from .item_trade import ItemTradeCircuit
from .loot_box import LootBoxCircuit
from .private_transfer import PrivateTransferCircuit

__all__ = [
    "PrivateTransferCircuit",
    "ItemTradeCircuit",
    "LootBoxCircuit",
    "CardDrawCircuit",
]
