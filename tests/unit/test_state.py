from concurrent.futures import ThreadPoolExecutor
from typing import List

from atomic_swap.entity import new_entity_id, new_entity_ids
from atomic_swap.ledger import Ledger
from atomic_swap.state import State
from atomic_swap.systems.lock import unlock
from atomic_swap.systems.objects import mint_asset
from atomic_swap.types import EntityID
from tests.test_utils import ALICE, make_locked_pair_state


def test_empty_state_has_empty_description() -> None:
    assert len(State().description) == 0


def test_description_lists_non_empty_stores() -> None:
    state, entities = make_locked_pair_state()
    state, _ = unlock(state, ALICE, entities["alice_lock"], entities["alice_key"])
    description = state.description
    assert set(description.keys()) == {"asset", "owner", "lock", "key", "spent"}
    assert entities["alice_key"] in description["spent"]


def test_entity_ids_are_never_reused() -> None:
    first = new_entity_id()
    batch = new_entity_ids(3)
    assert len(set(batch)) == 3
    assert all(eid > first for eid in batch)


def test_entity_ids_stay_unique_across_threaded_ledgers() -> None:
    def mint_many(_: int) -> List[EntityID]:
        ledger = Ledger()
        return [ledger.execute(mint_asset, ALICE, "nft", "x") for _ in range(2000)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        batches = list(pool.map(mint_many, range(8)))
    ids = [eid for batch in batches for eid in batch]
    assert len(ids) == 8 * 2000
    assert len(set(ids)) == len(ids)
