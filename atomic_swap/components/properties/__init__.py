"""Property component aggregates.

Every ledger object is an entity id plus the components below. All
components are immutable dataclasses; a system expresses a change by
storing a new instance (or removing one) in the matching ``State`` map.
"""

from .asset import Asset
from .asset_descriptor import AssetDescriptor
from .coin import Coin
from .custodian_record import CustodianRecord
from .key import Key
from .lock import Lock
from .owner import Owner
from .shared_escrow import SharedEscrow
from .staged_escrow import StagedEscrow

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
