from dataclasses import dataclass
from atomic_swap.types import Address, EntityID


@dataclass(frozen=True)
class SharedEscrow:
    """Globally addressable offer completed directly by the counterparty.

    Attributes:
        sender:
            Party offering ``escrowed``.
        recipient:
            Only party allowed to complete the swap.
        exchange_key_id:
            Id of the key protecting the asset the sender demands.
        escrowed:
            Offered asset, held unlocked by the record.
    """

    sender: Address
    recipient: Address
    exchange_key_id: EntityID
    escrowed: EntityID
