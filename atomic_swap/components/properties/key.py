"""Key credential component (pairs with Lock)."""

from dataclasses import dataclass
from atomic_swap.types import EntityID


@dataclass(frozen=True)
class Key:
    """Single-use credential; identity is the key's entity id."""

    lock_id: EntityID  # back-reference for diagnostics, not used for matching
