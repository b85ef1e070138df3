from dataclasses import dataclass
from atomic_swap.types import EntityID


@dataclass(frozen=True)
class Lock:
    """Commitment lock binding one asset to one key.

    The lock's own identity is its entity id. Contents are only reachable
    through :func:`atomic_swap.systems.lock.unlock`, which consumes the lock.

    Attributes:
        key_id:
            Entity id of the only key able to open this lock, fixed at creation.
        contents:
            Entity id of the locked asset.
    """

    key_id: EntityID
    contents: EntityID
