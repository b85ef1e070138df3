from dataclasses import dataclass


@dataclass(frozen=True)
class Asset:
    """Marks the entity as a uniquely identified, non-fungible asset.

    The entity id is the asset's identity; ``kind`` and ``label`` are
    informational only and never take part in swap verification.

    Attributes:
        kind:
            Free-form asset class (``"ticket"``, ``"nft"``, ...).
        label:
            Human readable name.
    """

    kind: str = ""
    label: str = ""
