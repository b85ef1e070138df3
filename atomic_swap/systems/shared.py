"""Direct swap system (shared escrow).

One party publishes a globally addressable offer holding its asset and naming
the counterparty and the key id of the asset it wants back. The counterparty
completes the trade alone by presenting that key and its lock; no third party
is involved. Until then the sender can reclaim the asset unconditionally.

Completing or reclaiming destroys the record, so any later attempt against
the same id fails with :class:`atomic_swap.errors.ObjectNotFound`.
"""

from dataclasses import replace
from typing import Tuple

from atomic_swap.components import Owner, SharedEscrow
from atomic_swap.entity import new_entity_id
from atomic_swap.errors import (
    InvalidCaller,
    MismatchedExchangeObject,
    MismatchedSenderRecipient,
)
from atomic_swap.events import make_event
from atomic_swap.state import State
from atomic_swap.systems.lock import unlock_into
from atomic_swap.systems.objects import is_transferable
from atomic_swap.types import Address, EntityID, EventKind
from atomic_swap.utils.ecs import missing_object_error, require_component, require_owner


def create(
    state: State,
    caller: Address,
    asset_id: EntityID,
    exchange_key_id: EntityID,
    recipient: Address,
) -> Tuple[State, EntityID]:
    """Publish an offer of ``asset_id`` to ``recipient``.

    Args:
        state (State): Current immutable state.
        caller (Address): Offering party; must own ``asset_id``.
        asset_id (EntityID): Asset put at risk; held unlocked by the record.
        exchange_key_id (EntityID): Key id of the asset demanded in return.
        recipient (Address): Only party allowed to complete the swap.

    Returns:
        Tuple[State, EntityID]: New state and the escrow record id.
    """
    if not is_transferable(state, asset_id):
        raise missing_object_error(state, asset_id, "Offered object")
    require_owner(state, caller, asset_id)

    escrow_id = new_entity_id()
    escrow = SharedEscrow(
        sender=caller,
        recipient=recipient,
        exchange_key_id=exchange_key_id,
        escrowed=asset_id,
    )
    return (
        replace(
            state,
            shared_escrow=state.shared_escrow.set(escrow_id, escrow),
            owner=state.owner.discard(asset_id),
            events=state.events.append(
                make_event(
                    EventKind.SHARED_ESCROW_CREATED,
                    escrow_id,
                    sender=caller,
                    recipient=recipient,
                    exchange_key_id=exchange_key_id,
                )
            ),
        ),
        escrow_id,
    )


def swap(
    state: State,
    caller: Address,
    escrow_id: EntityID,
    key_id: EntityID,
    lock_id: EntityID,
) -> Tuple[State, EntityID]:
    """Complete the offer by presenting the demanded locked asset.

    The presented lock is opened with ``key_id`` and its asset goes to the
    record's sender; the offered asset goes to ``caller``. The record is
    destroyed.

    Returns:
        Tuple[State, EntityID]: New state and the id of the asset received.

    Raises:
        ObjectNotFound: The record does not exist (completed or reclaimed).
        MismatchedSenderRecipient: ``caller`` is not the record's recipient.
        MismatchedExchangeObject: ``key_id`` is not the demanded key.
        ObjectNotOwned: ``caller`` does not own the key or the lock.
        KeyMismatch: ``key_id`` does not open ``lock_id``.
    """
    escrow = require_component(state, state.shared_escrow, escrow_id, "Shared escrow")
    if caller != escrow.recipient:
        raise MismatchedSenderRecipient(
            "Caller is not the recipient of this offer",
            {"escrow_id": escrow_id, "caller": caller, "recipient": escrow.recipient},
        )
    if key_id != escrow.exchange_key_id:
        raise MismatchedExchangeObject(
            "Presented key does not protect the demanded asset",
            {"escrow_id": escrow_id, "key_id": key_id, "expected": escrow.exchange_key_id},
        )
    require_component(state, state.key, key_id, "Key")
    require_component(state, state.lock, lock_id, "Lock")
    require_owner(state, caller, key_id)
    require_owner(state, caller, lock_id)

    state, returned_id = unlock_into(state, lock_id, key_id)
    return (
        replace(
            state,
            shared_escrow=state.shared_escrow.remove(escrow_id),
            owner=state.owner.set(returned_id, Owner(escrow.sender)).set(
                escrow.escrowed, Owner(caller)
            ),
            events=state.events.append(
                make_event(
                    EventKind.SHARED_ESCROW_SWAPPED,
                    escrow_id,
                    sender=escrow.sender,
                    recipient=caller,
                    key_id=key_id,
                )
            ),
        ),
        escrow.escrowed,
    )


def return_to_sender(
    state: State, caller: Address, escrow_id: EntityID
) -> Tuple[State, EntityID]:
    """Reclaim the offered asset and destroy the record.

    Raises:
        ObjectNotFound: The record does not exist.
        InvalidCaller: ``caller`` is not the record's sender.
    """
    escrow = require_component(state, state.shared_escrow, escrow_id, "Shared escrow")
    if caller != escrow.sender:
        raise InvalidCaller(
            "Only the sender may reclaim this offer",
            {"escrow_id": escrow_id, "caller": caller},
        )
    return (
        replace(
            state,
            shared_escrow=state.shared_escrow.remove(escrow_id),
            owner=state.owner.set(escrow.escrowed, Owner(escrow.sender)),
            events=state.events.append(
                make_event(EventKind.SHARED_ESCROW_RETURNED, escrow_id, sender=caller)
            ),
        ),
        escrow.escrowed,
    )
