"""Custodian swap system (owned escrow).

Two parties each deposit a locked asset together with its key, naming the
counterparty they expect and the key id of the asset they demand in return.
Both records are held by a mutually trusted custodian, who settles them as a
pair once they cross-match, or returns a record to its sender.

Tamper detection relies on the key id captured at deposit time
(``CustodianRecord.key_id``). A party that re-locks a different asset before
depositing obtains a new key id, so the counterparty's ``exchange_key_id``
no longer matches and settlement fails with
:class:`atomic_swap.errors.MismatchedExchangeObject`.
"""

from dataclasses import replace
from typing import Tuple

from atomic_swap.components import CustodianRecord, Owner
from atomic_swap.entity import new_entity_id
from atomic_swap.errors import (
    InvalidCaller,
    KeyMismatch,
    MismatchedExchangeObject,
    MismatchedSenderRecipient,
)
from atomic_swap.events import make_event
from atomic_swap.state import State
from atomic_swap.systems.lock import unlock_into
from atomic_swap.types import Address, EntityID, EventKind
from atomic_swap.utils.ecs import require_component, require_owner


def create(
    state: State,
    caller: Address,
    key_id: EntityID,
    lock_id: EntityID,
    exchange_key_id: EntityID,
    recipient: Address,
    custodian: Address,
) -> Tuple[State, EntityID]:
    """Deposit a locked asset and its key with ``custodian``.

    ``recipient`` and ``exchange_key_id`` are recorded as declared; their
    plausibility is only checked at settlement.

    Returns:
        Tuple[State, EntityID]: New state and the record id.

    Raises:
        ObjectNotFound: Key or lock does not exist (or was consumed).
        ObjectNotOwned: ``caller`` does not own the key or the lock.
        KeyMismatch: The key does not open the lock.
    """
    require_component(state, state.key, key_id, "Key")
    locked = require_component(state, state.lock, lock_id, "Lock")
    require_owner(state, caller, key_id)
    require_owner(state, caller, lock_id)
    if locked.key_id != key_id:
        raise KeyMismatch(
            "Deposited key does not open deposited lock",
            {"lock_id": lock_id, "key_id": key_id},
        )

    record_id = new_entity_id()
    record = CustodianRecord(
        sender=caller,
        recipient=recipient,
        exchange_key_id=exchange_key_id,
        key_id=key_id,
        escrowed_key=key_id,
        escrowed_lock=lock_id,
        custodian=custodian,
    )
    return (
        replace(
            state,
            custodian_record=state.custodian_record.set(record_id, record),
            owner=state.owner.discard(key_id)
            .discard(lock_id)
            .set(record_id, Owner(custodian)),
            events=state.events.append(
                make_event(
                    EventKind.CUSTODIAN_RECORD_CREATED,
                    record_id,
                    sender=caller,
                    recipient=recipient,
                    custodian=custodian,
                    key_id=key_id,
                    exchange_key_id=exchange_key_id,
                )
            ),
        ),
        record_id,
    )


def _require_custodian(
    state: State, caller: Address, record_id: EntityID
) -> CustodianRecord:
    record = require_component(
        state, state.custodian_record, record_id, "Custodian record"
    )
    if record.custodian != caller:
        raise InvalidCaller(
            "Only the custodian may act on this record",
            {"record_id": record_id, "caller": caller},
        )
    return record


def _release(
    state: State, record_id: EntityID, record: CustodianRecord, to: Address
) -> State:
    """Open the record's lock, hand the asset to ``to`` and drop the record."""
    state, asset_id = unlock_into(state, record.escrowed_lock, record.escrowed_key)
    return replace(
        state,
        custodian_record=state.custodian_record.remove(record_id),
        owner=state.owner.discard(record_id).set(asset_id, Owner(to)),
    )


def swap(
    state: State, caller: Address, record_a: EntityID, record_b: EntityID
) -> State:
    """Settle two cross-matching records atomically.

    Each record's lock is opened with the key escrowed alongside it; A's asset
    goes to A's recipient and B's asset to B's recipient. Both records are
    destroyed.

    Raises:
        ObjectNotFound: A record does not exist (e.g. already settled).
        InvalidCaller: ``caller`` is not the custodian of both records.
        MismatchedSenderRecipient: The records do not name each other's sender.
        MismatchedExchangeObject: A record demands a key the other did not deposit.
    """
    a = _require_custodian(state, caller, record_a)
    b = _require_custodian(state, caller, record_b)
    if record_a == record_b:
        raise MismatchedSenderRecipient(
            "Cannot swap a record with itself", {"record_id": record_a}
        )

    if a.recipient != b.sender or b.recipient != a.sender:
        raise MismatchedSenderRecipient(
            "Records do not name each other as counterparty",
            {
                "a_sender": a.sender,
                "a_recipient": a.recipient,
                "b_sender": b.sender,
                "b_recipient": b.recipient,
            },
        )
    if a.exchange_key_id != b.key_id or b.exchange_key_id != a.key_id:
        raise MismatchedExchangeObject(
            "Records do not hold the demanded assets",
            {
                "a_demands": a.exchange_key_id,
                "b_deposited": b.key_id,
                "b_demands": b.exchange_key_id,
                "a_deposited": a.key_id,
            },
        )

    state = _release(state, record_a, a, a.recipient)
    state = _release(state, record_b, b, b.recipient)
    return replace(
        state,
        events=state.events.append(
            make_event(
                EventKind.CUSTODIAN_SWAP_SETTLED,
                record_a,
                counter_record_id=record_b,
                custodian=caller,
                a_sender=a.sender,
                b_sender=b.sender,
            )
        ),
    )


def return_to_sender(state: State, caller: Address, record_id: EntityID) -> State:
    """Release a record's asset back to its sender and destroy the record.

    Allowed at any time before settlement.

    Raises:
        ObjectNotFound: The record does not exist.
        InvalidCaller: ``caller`` is not the record's custodian.
    """
    record = _require_custodian(state, caller, record_id)
    state = _release(state, record_id, record, record.sender)
    return replace(
        state,
        events=state.events.append(
            make_event(
                EventKind.CUSTODIAN_RECORD_RETURNED,
                record_id,
                sender=record.sender,
                custodian=caller,
            )
        ),
    )
