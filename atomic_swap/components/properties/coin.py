"""Ledger-native payment value (pairs with the staged escrow payment leg)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Coin:
    """Fungible balance held by a single entity.

    Attributes:
        amount:
            Quantity in the smallest ledger unit. Never negative.
    """

    amount: int
