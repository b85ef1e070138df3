"""Custody audit utilities.

Every value the ledger holds must have exactly one holder at a time: either a
party (``State.owner``) or a container that references it (a lock's
contents, a custodian record's key and lock, a shared escrow's asset, a
staged escrow's payment credentials). The swap protocols' tamper checks are
only sound if no value is ever aliased, so this module can rebuild the
holder relation from scratch and verify it.

The audit is a diagnostic; systems never call it. The
:class:`atomic_swap.ledger.Ledger` runs it before commit when
``LedgerConfig.audit_custody`` is enabled.
"""

from typing import Dict, List, Union

from atomic_swap.state import State
from atomic_swap.types import Address, EntityID

Holder = Union[Address, EntityID]


class CustodyViolation(AssertionError):
    """Raised when a value has no holder or more than one holder."""


def compute_holders(state: State) -> Dict[EntityID, List[Holder]]:
    """Return every held object id mapped to all of its holders."""
    holders: Dict[EntityID, List[Holder]] = {}

    def hold(object_id: EntityID, holder: Holder) -> None:
        holders.setdefault(object_id, []).append(holder)

    for eid, owner in state.owner.items():
        hold(eid, owner.address)
    for lock_id, locked in state.lock.items():
        hold(locked.contents, lock_id)
    for record_id, record in state.custodian_record.items():
        hold(record.escrowed_key, record_id)
        hold(record.escrowed_lock, record_id)
    for escrow_id, shared in state.shared_escrow.items():
        hold(shared.escrowed, escrow_id)
    for escrow_id, staged in state.staged_escrow.items():
        # Payment credentials of closed escrows are spent and no longer held.
        if staged.payment_lock is not None and staged.payment_lock in state.lock:
            hold(staged.payment_lock, escrow_id)
        if staged.payment_key is not None and staged.payment_key in state.key:
            hold(staged.payment_key, escrow_id)
    return holders


def holder_of(state: State, object_id: EntityID) -> Holder:
    """Return the single holder of ``object_id``.

    Raises:
        CustodyViolation: ``object_id`` has no holder or several holders.
    """
    found = compute_holders(state).get(object_id, [])
    if len(found) != 1:
        raise CustodyViolation(f"Object {object_id} has holders {found}")
    return found[0]


def check_custody(state: State) -> None:
    """Verify that every live value and credential has exactly one holder.

    Raises:
        CustodyViolation: On the first value found with zero or several holders.
    """
    holders = compute_holders(state)
    for store in (state.asset, state.coin, state.lock, state.key):
        for eid in store:
            found = holders.get(eid, [])
            if len(found) != 1:
                raise CustodyViolation(f"Object {eid} has holders {found}")
    for eid, found in holders.items():
        if len(found) > 1:
            raise CustodyViolation(f"Object {eid} has holders {found}")
