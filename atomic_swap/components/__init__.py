"""atomic_swap.components
=======================

Aggregate import surface for all component dataclasses stored on
:class:`atomic_swap.state.State`, e.g.::

    from atomic_swap.components import Lock, Key, Owner

Components carry no behavior; the ``systems`` package implements every
transition.
"""

from .properties import Asset
from .properties import AssetDescriptor
from .properties import Coin
from .properties import CustodianRecord
from .properties import Key
from .properties import Lock
from .properties import Owner
from .properties import SharedEscrow
from .properties import StagedEscrow

__all__ = [
    "Asset",
    "AssetDescriptor",
    "Coin",
    "CustodianRecord",
    "Key",
    "Lock",
    "Owner",
    "SharedEscrow",
    "StagedEscrow",
]
