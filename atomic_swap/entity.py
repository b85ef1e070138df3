"""Entity ID generation.

Every object the ledger tracks is an ``EntityID`` (an integer) plus zero or
more component dataclasses stored in persistent maps on
:class:`atomic_swap.state.State`. Locks, keys and escrow records draw their
identity from the same sequence as assets, so an id is unique across all
stores.

Examples
--------
>>> from atomic_swap.entity import new_entity_id, new_entity_ids
>>> eid = new_entity_id()  # allocate a single ID
>>> lock_id, key_id = new_entity_ids(2)  # allocate batch

IDs are *not* recycled, including ids allocated by a transaction that later
aborts. A consumed lock or key id therefore can never be reissued to a fresh
credential. If you need stable identifiers across processes, inject your own
ID strategy.
"""

import threading
from typing import Iterator, List

from atomic_swap.types import EntityID


def entity_id_generator() -> Iterator[EntityID]:
    """Yield an infinite sequence of monotonically increasing entity IDs."""
    eid = 0
    while True:
        yield eid
        eid += 1


_entity_id_gen = entity_id_generator()
_entity_id_lock = threading.Lock()


def new_entity_id() -> EntityID:
    """Return a newly allocated unique entity ID.

    Safe to call from several threads; all ledgers in the process share the
    sequence.
    """
    with _entity_id_lock:
        return next(_entity_id_gen)


def new_entity_ids(n: int) -> List[EntityID]:
    """Return ``n`` fresh entity IDs as a list."""
    return [new_entity_id() for _ in range(n)]
