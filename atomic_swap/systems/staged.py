"""Staged asymmetric escrow system.

Governs a trade where the buyer pays in ledger-native coin and the seller
delivers an asset outside the ledger. The payment is protected by the
commitment lock; the delivery is attested by the parties through role-gated
channel submissions and finally asserted by a ``completed`` flag at claim or
cancel time.

Lifecycle (see ``TRANSITIONS``)::

    INITIALIZED --deposit--> DEPOSITED --buyer channel--> BUYER_URL_SUBMITTED
        --seller channel--> SELLER_URL_SUBMITTED --claim--> COMPLETED
    any stage before COMPLETED --cancel--> COMPLETED

Trust boundary: ``completed`` stands in for an external delivery oracle. The
escrow only enforces *who* may assert it and *when*; it does not verify
delivery. There is no expiry path; an escrow stays open until one party acts.

Guards are evaluated in a fixed order: existence, caller role, stage, then
value and flag constraints. Completed escrows are kept in
``State.staged_escrow`` as a terminal record and reject every action.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from atomic_swap.components import AssetDescriptor, Owner, StagedEscrow
from atomic_swap.entity import new_entity_id
from atomic_swap.errors import (
    AlreadySubmittedURL,
    InsufficientPayment,
    InvalidCaller,
    InvalidState,
    TransferAlreadyCompleted,
    TransferNotCompleted,
)
from atomic_swap.events import make_event
from atomic_swap.state import State
from atomic_swap.systems.lock import lock_value, unlock_into
from atomic_swap.systems.objects import split_coin
from atomic_swap.types import Address, EntityID, EscrowAction, EscrowStage, EventKind, Role
from atomic_swap.utils.ecs import require_component, require_owner


@dataclass(frozen=True)
class Transition:
    """Legal move of the escrow state machine."""

    role: Role
    target: EscrowStage


TRANSITIONS: Dict[Tuple[EscrowStage, EscrowAction], Transition] = {
    (EscrowStage.INITIALIZED, EscrowAction.DEPOSIT): Transition(
        Role.BUYER, EscrowStage.DEPOSITED
    ),
    (EscrowStage.DEPOSITED, EscrowAction.SUBMIT_BUYER_CHANNEL): Transition(
        Role.BUYER, EscrowStage.BUYER_URL_SUBMITTED
    ),
    (EscrowStage.BUYER_URL_SUBMITTED, EscrowAction.SUBMIT_SELLER_CHANNEL): Transition(
        Role.SELLER, EscrowStage.SELLER_URL_SUBMITTED
    ),
    (EscrowStage.SELLER_URL_SUBMITTED, EscrowAction.CLAIM): Transition(
        Role.SELLER, EscrowStage.COMPLETED
    ),
    (EscrowStage.INITIALIZED, EscrowAction.CANCEL): Transition(
        Role.BUYER, EscrowStage.COMPLETED
    ),
    (EscrowStage.DEPOSITED, EscrowAction.CANCEL): Transition(
        Role.BUYER, EscrowStage.COMPLETED
    ),
    (EscrowStage.BUYER_URL_SUBMITTED, EscrowAction.CANCEL): Transition(
        Role.BUYER, EscrowStage.COMPLETED
    ),
    (EscrowStage.SELLER_URL_SUBMITTED, EscrowAction.CANCEL): Transition(
        Role.BUYER, EscrowStage.COMPLETED
    ),
}

ACTION_ROLES: Dict[EscrowAction, Role] = {
    EscrowAction.DEPOSIT: Role.BUYER,
    EscrowAction.SUBMIT_BUYER_CHANNEL: Role.BUYER,
    EscrowAction.SUBMIT_SELLER_CHANNEL: Role.SELLER,
    EscrowAction.CLAIM: Role.SELLER,
    EscrowAction.CANCEL: Role.BUYER,
}


def legal_actions(escrow: StagedEscrow) -> List[EscrowAction]:
    """Return the actions the transition table allows from ``escrow.stage``."""
    return [action for (stage, action) in TRANSITIONS if stage == escrow.stage]


def role_of(escrow: StagedEscrow, caller: Address) -> Optional[Role]:
    """Return the caller's role in ``escrow`` or None for third parties."""
    if caller == escrow.buyer:
        return Role.BUYER
    if caller == escrow.seller:
        return Role.SELLER
    return None


def _submitted_channel(escrow: StagedEscrow, action: EscrowAction) -> Optional[str]:
    if action == EscrowAction.SUBMIT_BUYER_CHANNEL:
        return escrow.buyer_channel
    if action == EscrowAction.SUBMIT_SELLER_CHANNEL:
        return escrow.seller_channel
    return None


def guard_transition(
    escrow: StagedEscrow, escrow_id: EntityID, caller: Address, action: EscrowAction
) -> Transition:
    """Check role and stage for ``action`` and return the matching transition.

    Raises:
        InvalidCaller: ``caller`` does not hold the role ``action`` requires.
        AlreadySubmittedURL: The caller's channel was already submitted.
        InvalidState: ``action`` is not legal from the current stage.
    """
    required = ACTION_ROLES[action]
    if role_of(escrow, caller) != required:
        raise InvalidCaller(
            f"Only the {required.value} may {action.value}",
            {"escrow_id": escrow_id, "caller": caller},
        )
    transition = TRANSITIONS.get((escrow.stage, action))
    if transition is not None:
        return transition
    if (
        escrow.stage != EscrowStage.COMPLETED
        and _submitted_channel(escrow, action) is not None
    ):
        raise AlreadySubmittedURL(
            "Channel already submitted",
            {"escrow_id": escrow_id, "role": required.value},
        )
    raise InvalidState(
        f"Cannot {action.value} in stage {escrow.stage.value}",
        {"escrow_id": escrow_id, "stage": escrow.stage.value},
    )


def _require_escrow(state: State, escrow_id: EntityID) -> StagedEscrow:
    return require_component(state, state.staged_escrow, escrow_id, "Staged escrow")


def create(
    state: State,
    caller: Address,
    seller: Address,
    descriptor: AssetDescriptor,
    price: int,
    trade_url: str = "",
) -> Tuple[State, EntityID]:
    """Open a staged escrow in which ``caller`` is the buyer.

    Raises:
        ValueError: If ``price`` is not positive or buyer and seller coincide.
    """
    if price <= 0:
        raise ValueError(f"Escrow price must be positive: {price}")
    if seller == caller:
        raise ValueError("Buyer and seller must be distinct parties")

    escrow_id = new_entity_id()
    escrow = StagedEscrow(
        buyer=caller,
        seller=seller,
        descriptor=descriptor,
        price=price,
        trade_url=trade_url,
    )
    return (
        replace(
            state,
            staged_escrow=state.staged_escrow.set(escrow_id, escrow),
            owner=state.owner.set(escrow_id, Owner(caller)),
            events=state.events.append(
                make_event(
                    EventKind.STAGED_ESCROW_CREATED,
                    escrow_id,
                    buyer=caller,
                    seller=seller,
                    asset=descriptor.identifier,
                    price=price,
                )
            ),
        ),
        escrow_id,
    )


def deposit(state: State, caller: Address, escrow_id: EntityID, coin_id: EntityID) -> State:
    """Lock the buyer's payment inside the escrow.

    Exactly ``price`` is locked; any excess is split off and stays with the
    buyer. The lock and its key are held by the escrow record.

    Raises:
        InvalidCaller: ``caller`` is not the buyer.
        InvalidState: A payment was already deposited or the escrow is closed.
        ObjectNotFound: ``coin_id`` is not a coin.
        ObjectNotOwned: The buyer does not own ``coin_id``.
        InsufficientPayment: The coin holds less than ``price``.
    """
    escrow = _require_escrow(state, escrow_id)
    transition = guard_transition(escrow, escrow_id, caller, EscrowAction.DEPOSIT)
    coin = require_component(state, state.coin, coin_id, "Coin")
    require_owner(state, caller, coin_id)
    if coin.amount < escrow.price:
        raise InsufficientPayment(
            "Payment is below the escrow price",
            {"escrow_id": escrow_id, "amount": coin.amount, "price": escrow.price},
        )

    change = coin.amount - escrow.price
    payment_id = coin_id
    if change > 0:
        state, payment_id = split_coin(state, caller, coin_id, escrow.price)
    state, lock_id, key_id = lock_value(state, payment_id)
    escrow = replace(
        escrow,
        payment_lock=lock_id,
        payment_key=key_id,
        payment_deposited=True,
        stage=transition.target,
    )
    return replace(
        state,
        staged_escrow=state.staged_escrow.set(escrow_id, escrow),
        events=state.events.append(
            make_event(
                EventKind.PAYMENT_DEPOSITED,
                escrow_id,
                buyer=caller,
                amount=escrow.price,
                change=change,
            )
        ),
    )


def _submit_channel(
    state: State,
    caller: Address,
    escrow_id: EntityID,
    ref: str,
    action: EscrowAction,
) -> State:
    escrow = _require_escrow(state, escrow_id)
    transition = guard_transition(escrow, escrow_id, caller, action)
    if action == EscrowAction.SUBMIT_BUYER_CHANNEL:
        escrow = replace(escrow, buyer_channel=ref, stage=transition.target)
    else:
        escrow = replace(escrow, seller_channel=ref, stage=transition.target)
    return replace(
        state,
        staged_escrow=state.staged_escrow.set(escrow_id, escrow),
        events=state.events.append(
            make_event(
                EventKind.CHANNEL_SUBMITTED,
                escrow_id,
                role=transition.role.value,
                ref=ref,
            )
        ),
    )


def submit_buyer_channel(
    state: State, caller: Address, escrow_id: EntityID, ref: str
) -> State:
    """Record the buyer's external channel reference (e.g. a trade URL)."""
    return _submit_channel(state, caller, escrow_id, ref, EscrowAction.SUBMIT_BUYER_CHANNEL)


def submit_seller_channel(
    state: State, caller: Address, escrow_id: EntityID, ref: str
) -> State:
    """Record the seller's external channel reference; requires the buyer's first."""
    return _submit_channel(state, caller, escrow_id, ref, EscrowAction.SUBMIT_SELLER_CHANNEL)


def _release_payment(
    state: State, escrow: StagedEscrow, to: Address
) -> Tuple[State, Optional[EntityID]]:
    if not escrow.payment_deposited:
        return state, None
    assert escrow.payment_lock is not None and escrow.payment_key is not None
    state, coin_id = unlock_into(state, escrow.payment_lock, escrow.payment_key)
    return replace(state, owner=state.owner.set(coin_id, Owner(to))), coin_id


def claim(
    state: State, caller: Address, escrow_id: EntityID, completed: bool
) -> Tuple[State, EntityID]:
    """Release the payment to the seller after delivery is asserted.

    Returns:
        Tuple[State, EntityID]: New state and the id of the coin paid out.

    Raises:
        InvalidCaller: ``caller`` is not the seller.
        InvalidState: The seller has not submitted its channel yet, or the
            escrow is closed.
        TransferNotCompleted: ``completed`` is False.
    """
    escrow = _require_escrow(state, escrow_id)
    transition = guard_transition(escrow, escrow_id, caller, EscrowAction.CLAIM)
    if not completed:
        raise TransferNotCompleted(
            "Cannot claim before the transfer is completed", {"escrow_id": escrow_id}
        )

    state, coin_id = _release_payment(state, escrow, escrow.seller)
    assert coin_id is not None
    escrow = replace(escrow, is_transferred=completed, stage=transition.target)
    return (
        replace(
            state,
            staged_escrow=state.staged_escrow.set(escrow_id, escrow),
            events=state.events.append(
                make_event(
                    EventKind.PAYMENT_CLAIMED,
                    escrow_id,
                    seller=caller,
                    amount=escrow.price,
                )
            ),
        ),
        coin_id,
    )


def cancel(
    state: State, caller: Address, escrow_id: EntityID, completed: bool
) -> Tuple[State, Optional[EntityID]]:
    """Refund the buyer and close the escrow before it is claimed.

    Cancelling before any deposit only closes the escrow.

    Returns:
        Tuple[State, Optional[EntityID]]: New state and the refunded coin id,
        or None if nothing was deposited.

    Raises:
        InvalidCaller: ``caller`` is not the buyer.
        InvalidState: The escrow is already completed.
        TransferAlreadyCompleted: ``completed`` is True.
    """
    escrow = _require_escrow(state, escrow_id)
    transition = guard_transition(escrow, escrow_id, caller, EscrowAction.CANCEL)
    if completed:
        raise TransferAlreadyCompleted(
            "Cannot cancel after the transfer is completed", {"escrow_id": escrow_id}
        )

    state, coin_id = _release_payment(state, escrow, escrow.buyer)
    refunded = escrow.price if coin_id is not None else 0
    escrow = replace(escrow, is_transferred=completed, stage=transition.target)
    return (
        replace(
            state,
            staged_escrow=state.staged_escrow.set(escrow_id, escrow),
            events=state.events.append(
                make_event(
                    EventKind.PAYMENT_CANCELLED,
                    escrow_id,
                    buyer=caller,
                    amount=refunded,
                )
            ),
        ),
        coin_id,
    )
