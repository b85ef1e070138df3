from dataclasses import dataclass
from atomic_swap.types import Address, EntityID


@dataclass(frozen=True)
class CustodianRecord:
    """One party's half of a custodian-mediated swap.

    Attributes:
        sender:
            Party that deposited the locked asset.
        recipient:
            Party the sender expects to trade with.
        exchange_key_id:
            Id of the key protecting the asset the sender wants in return.
        key_id:
            Id of the sender's own key at deposit time. The counterparty's
            ``exchange_key_id`` must name it for settlement to proceed.
        escrowed_key:
            Key held by the record (same id as ``key_id``).
        escrowed_lock:
            Lock held by the record, containing the sender's asset.
        custodian:
            Address authorized to settle or return the record.
    """

    sender: Address
    recipient: Address
    exchange_key_id: EntityID
    key_id: EntityID
    escrowed_key: EntityID
    escrowed_lock: EntityID
    custodian: Address
