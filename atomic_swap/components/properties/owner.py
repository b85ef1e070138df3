from dataclasses import dataclass
from atomic_swap.types import Address


@dataclass(frozen=True)
class Owner:
    """Top-level ownership of an object by a party.

    Objects held *inside* another object (lock contents, escrowed records) have
    no ``Owner`` component; their holder is the container referencing them.

    Attributes:
        address:
            Address of the owning party.
    """

    address: Address
