"""Staged escrow component.

Holds the payment leg (a locked coin and its key) of a trade whose other
leg is delivered off-ledger. The record is only ever replaced through the
transition table in :mod:`atomic_swap.systems.staged`.
"""

from dataclasses import dataclass
from typing import Optional
from atomic_swap.components.properties.asset_descriptor import AssetDescriptor
from atomic_swap.types import Address, EntityID, EscrowStage


@dataclass(frozen=True)
class StagedEscrow:
    """Asymmetric trade between a paying buyer and a delivering seller.

    Attributes:
        buyer: Party paying ``price``.
        seller: Party delivering the off-ledger asset.
        descriptor: Metadata of the off-ledger asset.
        price: Amount of ledger-native value owed to the seller.
        trade_url: Reference to the external trade offer.
        buyer_channel: External channel reference submitted by the buyer.
        seller_channel: External channel reference submitted by the seller.
        payment_lock: Lock holding the deposited coin, once deposited.
        payment_key: Key for ``payment_lock``, held by the escrow.
        payment_deposited: True once the payment leg is locked.
        is_transferred: Delivery flag asserted at claim/cancel time.
        stage: Current lifecycle stage.
    """

    buyer: Address
    seller: Address
    descriptor: AssetDescriptor
    price: int
    trade_url: str = ""
    buyer_channel: Optional[str] = None
    seller_channel: Optional[str] = None
    payment_lock: Optional[EntityID] = None
    payment_key: Optional[EntityID] = None
    payment_deposited: bool = False
    is_transferred: bool = False
    stage: EscrowStage = EscrowStage.INITIALIZED
