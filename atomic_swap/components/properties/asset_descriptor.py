from dataclasses import dataclass, field
from pyrsistent import pmap
from pyrsistent.typing import PMap


def _empty_provenance() -> PMap[str, str]:
    return pmap()


@dataclass(frozen=True)
class AssetDescriptor:
    """Opaque metadata describing the off-ledger asset of a staged escrow.

    The escrow never interprets these fields; they are carried for the
    parties and for off-chain observers.

    Attributes:
        identifier:
            External identifier of the asset (e.g. marketplace item id).
        name:
            Display name.
        quantity:
            Number of units traded.
        provenance:
            Free-form provenance fields (issuer, collection, serial, ...).
    """

    identifier: str
    name: str = ""
    quantity: int = 1
    provenance: PMap[str, str] = field(default_factory=_empty_provenance)
