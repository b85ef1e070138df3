"""Common type aliases and enumerations.

``EntityID`` identifies every object held by the ledger (assets, coins, locks,
keys and escrow records). ``Address`` identifies a party; systems compare
addresses for every role check.
"""

from enum import StrEnum, auto


EntityID = int
Address = str


class EscrowStage(StrEnum):
    """Lifecycle stages of a staged escrow (see :mod:`atomic_swap.systems.staged`)."""

    INITIALIZED = auto()
    DEPOSITED = auto()
    BUYER_URL_SUBMITTED = auto()
    SELLER_URL_SUBMITTED = auto()
    COMPLETED = auto()


class EscrowAction(StrEnum):
    """Events that drive staged escrow transitions."""

    DEPOSIT = auto()
    SUBMIT_BUYER_CHANNEL = auto()
    SUBMIT_SELLER_CHANNEL = auto()
    CLAIM = auto()
    CANCEL = auto()


class Role(StrEnum):
    """Party roles in a staged escrow."""

    BUYER = auto()
    SELLER = auto()


class EventKind(StrEnum):
    """Kinds of events appended to the event sink (serialized by value)."""

    CUSTODIAN_RECORD_CREATED = auto()
    CUSTODIAN_SWAP_SETTLED = auto()
    CUSTODIAN_RECORD_RETURNED = auto()
    SHARED_ESCROW_CREATED = auto()
    SHARED_ESCROW_SWAPPED = auto()
    SHARED_ESCROW_RETURNED = auto()
    STAGED_ESCROW_CREATED = auto()
    PAYMENT_DEPOSITED = auto()
    CHANNEL_SUBMITTED = auto()
    PAYMENT_CLAIMED = auto()
    PAYMENT_CANCELLED = auto()
