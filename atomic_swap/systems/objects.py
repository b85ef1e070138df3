"""Asset and value primitives.

Minting, transfer and coin arithmetic. These stand in for the host ledger's
own object primitives: the swap protocols only rely on ownership transfer,
``identify`` and ``amount_of``.

Transfers only apply to top-level objects (assets, coins, locks and keys).
Escrow records are moved exclusively by their own systems.
"""

from dataclasses import replace
from typing import Tuple

from atomic_swap.components import Asset, Coin, Owner
from atomic_swap.entity import new_entity_id
from atomic_swap.state import State
from atomic_swap.types import Address, EntityID
from atomic_swap.utils.ecs import (
    missing_object_error,
    require_component,
    require_owner,
)


def mint_asset(
    state: State, owner: Address, kind: str = "", label: str = ""
) -> Tuple[State, EntityID]:
    """Create a new asset owned by ``owner``."""
    asset_id = new_entity_id()
    return (
        replace(
            state,
            asset=state.asset.set(asset_id, Asset(kind=kind, label=label)),
            owner=state.owner.set(asset_id, Owner(owner)),
        ),
        asset_id,
    )


def mint_coin(state: State, owner: Address, amount: int) -> Tuple[State, EntityID]:
    """Create a new coin of ``amount`` owned by ``owner``.

    Raises:
        ValueError: If ``amount`` is negative.
    """
    if amount < 0:
        raise ValueError(f"Coin amount must be non-negative: {amount}")
    coin_id = new_entity_id()
    return (
        replace(
            state,
            coin=state.coin.set(coin_id, Coin(amount=amount)),
            owner=state.owner.set(coin_id, Owner(owner)),
        ),
        coin_id,
    )


def is_transferable(state: State, object_id: EntityID) -> bool:
    """Return True if ``object_id`` is an asset, coin, lock or key."""
    return any(
        object_id in store for store in (state.asset, state.coin, state.lock, state.key)
    )


def transfer(
    state: State, caller: Address, object_id: EntityID, recipient: Address
) -> State:
    """Move a top-level object from ``caller`` to ``recipient``.

    Raises:
        ObjectNotFound: ``object_id`` is not a transferable object.
        ObjectNotOwned: ``caller`` does not own it.
    """
    if not is_transferable(state, object_id):
        raise missing_object_error(state, object_id, "Transferable object")
    require_owner(state, caller, object_id)
    return replace(state, owner=state.owner.set(object_id, Owner(recipient)))


def split_coin(
    state: State, caller: Address, coin_id: EntityID, amount: int
) -> Tuple[State, EntityID]:
    """Split ``amount`` off ``coin_id`` into a new coin owned by ``caller``.

    Raises:
        ValueError: If ``amount`` is negative or exceeds the coin's balance.
    """
    coin = require_component(state, state.coin, coin_id, "Coin")
    require_owner(state, caller, coin_id)
    if amount < 0 or amount > coin.amount:
        raise ValueError(f"Cannot split {amount} from coin holding {coin.amount}")
    new_id = new_entity_id()
    state_coin = state.coin.set(coin_id, Coin(amount=coin.amount - amount))
    state_coin = state_coin.set(new_id, Coin(amount=amount))
    return (
        replace(
            state,
            coin=state_coin,
            owner=state.owner.set(new_id, Owner(caller)),
        ),
        new_id,
    )


def join_coins(
    state: State, caller: Address, coin_id: EntityID, other_id: EntityID
) -> State:
    """Merge ``other_id`` into ``coin_id``; ``other_id`` ceases to exist."""
    coin = require_component(state, state.coin, coin_id, "Coin")
    other = require_component(state, state.coin, other_id, "Coin")
    if coin_id == other_id:
        raise ValueError("Cannot join a coin with itself")
    require_owner(state, caller, coin_id)
    require_owner(state, caller, other_id)
    return replace(
        state,
        coin=state.coin.set(coin_id, Coin(amount=coin.amount + other.amount)).remove(
            other_id
        ),
        owner=state.owner.remove(other_id),
    )


def identify(state: State, object_id: EntityID) -> EntityID:
    """Return the unique identifier of a value held by the ledger.

    The entity id is the identity; this only checks that it still resolves.
    """
    if is_transferable(state, object_id):
        return object_id
    raise missing_object_error(state, object_id, "Object")


def amount_of(state: State, coin_id: EntityID) -> int:
    """Return the quantity held by ``coin_id``."""
    return require_component(state, state.coin, coin_id, "Coin").amount
