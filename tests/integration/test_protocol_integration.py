"""End-to-end trades driven through the ledger, one per protocol."""

import pytest

from atomic_swap.errors import (
    CredentialConsumed,
    InvalidState,
    MismatchedExchangeObject,
    TransferNotCompleted,
)
from atomic_swap.events import MemoryEventSink
from atomic_swap.ledger import Ledger
from atomic_swap.systems import custodian, shared, staged
from atomic_swap.systems.lock import lock, unlock
from atomic_swap.systems.objects import mint_asset, mint_coin
from atomic_swap.types import EscrowStage, EventKind
from atomic_swap.utils.ecs import assets_of, balance_of
from tests.test_utils import ALICE, BOB, CAROL, CUSTODIAN, make_descriptor


def make_ledger() -> tuple[Ledger, MemoryEventSink]:
    sink = MemoryEventSink()
    return Ledger(sink=sink, audit_custody=True), sink


def test_custodian_trade_end_to_end() -> None:
    ledger, sink = make_ledger()
    sword = ledger.execute(mint_asset, ALICE, kind="nft", label="sword")
    shield = ledger.execute(mint_asset, BOB, kind="nft", label="shield")
    sword_lock, sword_key = ledger.execute(lock, ALICE, sword)
    shield_lock, shield_key = ledger.execute(lock, BOB, shield)

    record_a = ledger.execute(
        custodian.create, ALICE, sword_key, sword_lock, shield_key, BOB, CUSTODIAN
    )
    record_b = ledger.execute(
        custodian.create, BOB, shield_key, shield_lock, sword_key, ALICE, CUSTODIAN
    )
    ledger.execute(custodian.swap, CUSTODIAN, record_a, record_b)

    assert assets_of(ledger.state, ALICE) == [shield]
    assert assets_of(ledger.state, BOB) == [sword]
    assert len(ledger.state.custodian_record) == 0
    assert sink.kinds()[-1] == EventKind.CUSTODIAN_SWAP_SETTLED


def test_custodian_rejects_swapped_out_asset() -> None:
    """Bob re-locks a cheaper asset; Alice's demand no longer matches."""
    ledger, _ = make_ledger()
    sword = ledger.execute(mint_asset, ALICE, label="sword")
    shield = ledger.execute(mint_asset, BOB, label="shield")
    junk = ledger.execute(mint_asset, BOB, label="junk")
    sword_lock, sword_key = ledger.execute(lock, ALICE, sword)
    shield_lock, shield_key = ledger.execute(lock, BOB, shield)
    junk_lock, junk_key = ledger.execute(lock, BOB, junk)

    record_a = ledger.execute(
        custodian.create, ALICE, sword_key, sword_lock, shield_key, BOB, CUSTODIAN
    )
    record_b = ledger.execute(
        custodian.create, BOB, junk_key, junk_lock, sword_key, ALICE, CUSTODIAN
    )
    with pytest.raises(MismatchedExchangeObject):
        ledger.execute(custodian.swap, CUSTODIAN, record_a, record_b)

    ledger.execute(custodian.return_to_sender, CUSTODIAN, record_a)
    ledger.execute(custodian.return_to_sender, CUSTODIAN, record_b)
    assert assets_of(ledger.state, ALICE) == [sword]
    assert assets_of(ledger.state, BOB) == [junk]
    assert ledger.state.owner[shield_lock].address == BOB


def test_shared_trade_end_to_end() -> None:
    ledger, sink = make_ledger()
    sword = ledger.execute(mint_asset, ALICE, label="sword")
    shield = ledger.execute(mint_asset, BOB, label="shield")
    shield_lock, shield_key = ledger.execute(lock, BOB, shield)

    escrow_id = ledger.execute(shared.create, ALICE, sword, shield_key, BOB)
    received = ledger.execute(shared.swap, BOB, escrow_id, shield_key, shield_lock)

    assert received == sword
    assert assets_of(ledger.state, ALICE) == [shield]
    assert assets_of(ledger.state, BOB) == [sword]
    assert sink.kinds()[-2:] == [
        EventKind.SHARED_ESCROW_CREATED,
        EventKind.SHARED_ESCROW_SWAPPED,
    ]


def test_shared_swap_with_already_opened_credential_fails() -> None:
    ledger, _ = make_ledger()
    sword = ledger.execute(mint_asset, ALICE, label="sword")
    shield = ledger.execute(mint_asset, BOB, label="shield")
    shield_lock, shield_key = ledger.execute(lock, BOB, shield)
    escrow_id = ledger.execute(shared.create, ALICE, sword, shield_key, BOB)

    ledger.execute(unlock, BOB, shield_lock, shield_key)
    with pytest.raises(CredentialConsumed):
        ledger.execute(shared.swap, BOB, escrow_id, shield_key, shield_lock)
    returned = ledger.execute(shared.return_to_sender, ALICE, escrow_id)
    assert returned == sword
    assert ledger.state.owner[sword].address == ALICE


def test_staged_trade_end_to_end() -> None:
    ledger, sink = make_ledger()
    coin = ledger.execute(mint_coin, ALICE, 1500)
    escrow_id = ledger.execute(
        staged.create, ALICE, BOB, make_descriptor(), 1000, trade_url="https://market/t/1"
    )
    ledger.execute(staged.deposit, ALICE, escrow_id, coin)
    ledger.execute(staged.submit_buyer_channel, ALICE, escrow_id, "https://buyer/offer")
    ledger.execute(staged.submit_seller_channel, BOB, escrow_id, "https://seller/offer")
    with pytest.raises(TransferNotCompleted):
        ledger.execute(staged.claim, BOB, escrow_id, False)
    paid = ledger.execute(staged.claim, BOB, escrow_id, True)

    escrow = ledger.state.staged_escrow[escrow_id]
    assert escrow.stage == EscrowStage.COMPLETED
    assert escrow.is_transferred
    assert ledger.state.coin[paid].amount == 1000
    assert balance_of(ledger.state, BOB) == 1000
    assert balance_of(ledger.state, ALICE) == 500
    assert sink.kinds()[-5:] == [
        EventKind.STAGED_ESCROW_CREATED,
        EventKind.PAYMENT_DEPOSITED,
        EventKind.CHANNEL_SUBMITTED,
        EventKind.CHANNEL_SUBMITTED,
        EventKind.PAYMENT_CLAIMED,
    ]
    with pytest.raises(InvalidState):
        ledger.execute(staged.cancel, ALICE, escrow_id, False)


def test_staged_cancel_refunds_and_keeps_escrows_independent() -> None:
    ledger, _ = make_ledger()
    coin_a = ledger.execute(mint_coin, ALICE, 300)
    coin_c = ledger.execute(mint_coin, CAROL, 300)
    escrow_a = ledger.execute(staged.create, ALICE, BOB, make_descriptor(), 300)
    escrow_c = ledger.execute(staged.create, CAROL, BOB, make_descriptor(), 300)
    ledger.execute(staged.deposit, ALICE, escrow_a, coin_a)
    ledger.execute(staged.deposit, CAROL, escrow_c, coin_c)

    refund = ledger.execute(staged.cancel, ALICE, escrow_a, False)

    assert ledger.state.owner[refund].address == ALICE
    assert balance_of(ledger.state, ALICE) == 300
    assert ledger.state.staged_escrow[escrow_c].stage == EscrowStage.DEPOSITED
    assert balance_of(ledger.state, CAROL) == 0
