"""Ledger convenience queries.

Helper functions for resolving ids and checking ownership without repeating
lookup logic inside systems. All functions are pure and operate on the
immutable :class:`atomic_swap.state.State` snapshot; the ``require_*``
helpers raise the typed errors from :mod:`atomic_swap.errors` instead of
returning ``None``.
"""

from typing import List, Mapping, TypeVar

from atomic_swap.errors import CredentialConsumed, ObjectNotFound, ObjectNotOwned
from atomic_swap.state import State
from atomic_swap.types import Address, EntityID

C = TypeVar("C")


def missing_object_error(
    state: State, entity_id: EntityID, what: str
) -> ObjectNotFound:
    """Return the error describing why ``entity_id`` cannot be resolved."""
    if entity_id in state.spent:
        return CredentialConsumed(f"{what} was already consumed", {"id": entity_id})
    return ObjectNotFound(f"{what} does not exist", {"id": entity_id})


def require_component(
    state: State, store: Mapping[EntityID, C], entity_id: EntityID, what: str
) -> C:
    """Return the component of ``entity_id`` in ``store`` or raise.

    Raises:
        CredentialConsumed: ``entity_id`` is a lock or key that was already used.
        ObjectNotFound: ``entity_id`` has no component in ``store``.
    """
    component = store.get(entity_id)
    if component is None:
        raise missing_object_error(state, entity_id, what)
    return component


def require_owner(state: State, caller: Address, entity_id: EntityID) -> None:
    """Raise :class:`ObjectNotOwned` unless ``caller`` owns ``entity_id``."""
    owner = state.owner.get(entity_id)
    if owner is None or owner.address != caller:
        raise ObjectNotOwned(
            "Caller does not own object", {"id": entity_id, "caller": caller}
        )


def objects_owned_by(
    state: State, address: Address, store: Mapping[EntityID, object]
) -> List[EntityID]:
    """Return ids in ``store`` owned by ``address`` (sorted for determinism)."""
    return sorted(
        eid
        for eid, owner in state.owner.items()
        if owner.address == address and eid in store
    )


def assets_of(state: State, address: Address) -> List[EntityID]:
    """Return ids of the assets ``address`` owns directly."""
    return objects_owned_by(state, address, state.asset)


def coins_of(state: State, address: Address) -> List[EntityID]:
    """Return ids of the coins ``address`` owns directly."""
    return objects_owned_by(state, address, state.coin)


def balance_of(state: State, address: Address) -> int:
    """Return the total amount of coins ``address`` owns directly."""
    return sum(state.coin[eid].amount for eid in coins_of(state, address))
