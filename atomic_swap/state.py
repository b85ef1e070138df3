"""Core immutable ledger ``State`` dataclass.

This module defines the frozen :class:`State` object that represents every
object the ledger holds at one point in time. All systems are pure functions
that take a previous ``State`` plus the invoking caller and arguments and
return a *new* ``State``; no mutation happens in-place. A system that
rejects its input raises before constructing anything, so the caller's
snapshot is left exactly as it was.

Design notes:

* Component stores are **persistent maps** (``pyrsistent.PMap``) keyed by
    ``EntityID``. Absence of a key means the entity does not currently possess
    that component.
* ``owner`` only records *top-level* ownership by a party. Objects held by a
    lock or an escrow record have no ``owner`` entry; the container refers to
    them instead (see :mod:`atomic_swap.utils.custody`).
* ``spent`` is the linear-use marker for credentials: a consumed lock or key
    leaves its store and its id is added here, so a second use is reported as
    :class:`atomic_swap.errors.CredentialConsumed`.
* ``events`` collects events raised by the transaction being built. The
    :class:`atomic_swap.ledger.Ledger` clears it before each transaction and
    forwards its contents to the event sink after commit.
"""

from dataclasses import dataclass
from typing import Any
from pyrsistent import PMap, PSet, PVector, pmap, pset, pvector

from atomic_swap.components.properties import (
    Asset,
    Coin,
    CustodianRecord,
    Key,
    Lock,
    Owner,
    SharedEscrow,
    StagedEscrow,
)
from atomic_swap.events import Event
from atomic_swap.types import EntityID


@dataclass(frozen=True)
class State:
    """Immutable ledger state.

    Instances are *value objects*; every transaction creates a new ``State``.
    Only include persistent / serializable data here (no open handles or
    caches).

    Attributes:
        asset (PMap[EntityID, Asset]): Non-fungible assets.
        coin (PMap[EntityID, Coin]): Ledger-native payment values.
        owner (PMap[EntityID, Owner]): Top-level ownership by party address.
        lock (PMap[EntityID, Lock]): Live commitment locks.
        key (PMap[EntityID, Key]): Live keys.
        custodian_record (PMap[EntityID, CustodianRecord]): Pending custodian swap halves.
        shared_escrow (PMap[EntityID, SharedEscrow]): Open direct-swap offers.
        staged_escrow (PMap[EntityID, StagedEscrow]): Staged escrows (kept after completion).
        spent (PSet[EntityID]): Ids of consumed locks and keys.
        events (PVector[Event]): Events raised by the current transaction.
    """

    # Values
    asset: PMap[EntityID, Asset] = pmap()
    coin: PMap[EntityID, Coin] = pmap()
    owner: PMap[EntityID, Owner] = pmap()

    # Credentials
    lock: PMap[EntityID, Lock] = pmap()
    key: PMap[EntityID, Key] = pmap()

    # Records
    custodian_record: PMap[EntityID, CustodianRecord] = pmap()
    shared_escrow: PMap[EntityID, SharedEscrow] = pmap()
    staged_escrow: PMap[EntityID, StagedEscrow] = pmap()

    # Extra
    spent: PSet[EntityID] = pset()
    events: PVector[Event] = pvector()

    @property
    def description(self) -> PMap[str, Any]:
        """Sparse serialization of non-empty stores.

        Returns:
            PMap[str, Any]: Persistent map of field name to value for every
            store that holds at least one entry.
        """
        description: PMap[str, Any] = pmap()
        for field in self.__dataclass_fields__:
            value = getattr(self, field)
            if len(value) == 0:
                continue
            description = description.set(field, value)
        return description
