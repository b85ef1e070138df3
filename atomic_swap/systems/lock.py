"""Commitment lock system.

Binds one value to a freshly generated key. The only way to get the value
back is :func:`unlock` with the paired key, which consumes both the lock and
the key: their ids leave the ``lock`` / ``key`` stores and are recorded in
``State.spent`` so any later reference is rejected with
:class:`atomic_swap.errors.CredentialConsumed`.

No function in this module exposes a lock's contents without consuming the
lock. Counterparties compare *key ids*, never contents: re-locking a value
always produces a new key id, which is how the settlement systems detect a
substituted asset.
"""

from dataclasses import replace
from typing import Tuple

from atomic_swap.components import Key, Lock, Owner
from atomic_swap.entity import new_entity_ids
from atomic_swap.errors import KeyMismatch
from atomic_swap.state import State
from atomic_swap.systems.objects import is_transferable
from atomic_swap.types import Address, EntityID
from atomic_swap.utils.ecs import missing_object_error, require_component, require_owner


def lock_value(state: State, value_id: EntityID) -> Tuple[State, EntityID, EntityID]:
    """Move ``value_id`` into a new lock and mint its key.

    Neither the lock nor the key receive an ``Owner``; callers assign the
    holder. Preconditions on ``value_id`` are the caller's responsibility.

    Returns:
        Tuple[State, EntityID, EntityID]: New state, lock id and key id.
    """
    lock_id, key_id = new_entity_ids(2)
    return (
        replace(
            state,
            lock=state.lock.set(lock_id, Lock(key_id=key_id, contents=value_id)),
            key=state.key.set(key_id, Key(lock_id=lock_id)),
            owner=state.owner.discard(value_id),
        ),
        lock_id,
        key_id,
    )


def lock(
    state: State, caller: Address, value_id: EntityID
) -> Tuple[State, EntityID, EntityID]:
    """Lock a value owned by ``caller``; the lock and key go to ``caller``.

    Args:
        state (State): Current immutable state.
        caller (Address): Invoking party, must own ``value_id``.
        value_id (EntityID): Asset, coin or credential to lock.

    Returns:
        Tuple[State, EntityID, EntityID]: New state, lock id and key id.

    Raises:
        ObjectNotFound: ``value_id`` does not resolve to a transferable object.
        ObjectNotOwned: ``caller`` does not own ``value_id``.
    """
    if not is_transferable(state, value_id):
        raise missing_object_error(state, value_id, "Lockable object")
    require_owner(state, caller, value_id)
    state, lock_id, key_id = lock_value(state, value_id)
    owner = Owner(caller)
    return (
        replace(state, owner=state.owner.set(lock_id, owner).set(key_id, owner)),
        lock_id,
        key_id,
    )


def unlock_into(
    state: State, lock_id: EntityID, key_id: EntityID
) -> Tuple[State, EntityID]:
    """Open ``lock_id`` with ``key_id`` and consume both.

    The released value is left without an ``Owner``; the calling system must
    hand it to its new holder in the same transaction.

    Raises:
        CredentialConsumed: Lock or key was already used.
        ObjectNotFound: Lock or key does not exist.
        KeyMismatch: ``key_id`` is not the key paired with ``lock_id``.
    """
    locked = require_component(state, state.lock, lock_id, "Lock")
    require_component(state, state.key, key_id, "Key")
    if locked.key_id != key_id:
        raise KeyMismatch(
            "Key does not open lock",
            {"lock_id": lock_id, "key_id": key_id, "expected_key_id": locked.key_id},
        )
    return (
        replace(
            state,
            lock=state.lock.remove(lock_id),
            key=state.key.remove(key_id),
            owner=state.owner.discard(lock_id).discard(key_id),
            spent=state.spent.add(lock_id).add(key_id),
        ),
        locked.contents,
    )


def unlock(
    state: State, caller: Address, lock_id: EntityID, key_id: EntityID
) -> Tuple[State, EntityID]:
    """Open a lock owned by ``caller`` with a key owned by ``caller``.

    Returns:
        Tuple[State, EntityID]: New state and the id of the released value,
        now owned by ``caller``.

    Raises:
        CredentialConsumed: Lock or key was already used.
        ObjectNotFound: Lock or key does not exist.
        ObjectNotOwned: ``caller`` does not own the lock or the key.
        KeyMismatch: ``key_id`` is not the key paired with ``lock_id``.
    """
    require_component(state, state.lock, lock_id, "Lock")
    require_component(state, state.key, key_id, "Key")
    require_owner(state, caller, lock_id)
    require_owner(state, caller, key_id)
    state, value_id = unlock_into(state, lock_id, key_id)
    return replace(state, owner=state.owner.set(value_id, Owner(caller))), value_id
