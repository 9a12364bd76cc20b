from __future__ import annotations

import copy

import pytest

from conftest import FakeWallet, hash_not_found
from loop_liquidity.errors import (
    ConfirmationTimeoutError,
    EncodingError,
    NotConnectedError,
    ProviderCallError,
    ValidationError,
)
from loop_liquidity.transactions import poller
from loop_liquidity.transactions.poller import PollPolicy
from loop_liquidity.transactions.submitter import prepare_loop_deposit, submit_loop_deposit
from loop_liquidity.wallet.session import WalletSession

TOKEN0 = "0x49d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7"
TOKEN1 = "0x53c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8"
SPENDER = "0x0555"


@pytest.fixture
def payload() -> dict:
    return {
        "approve_data": {
            "to_address": TOKEN0,
            "spender": SPENDER,
            "amount": "1000000000000000000",
        },
        "loop_liquidity_data": {
            "pool_key": {"token0": TOKEN0, "token1": TOKEN1},
            "deposit_data": {"amount": str(2**128 + 7), "multiplier": 3},
        },
    }


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    async def fake_sleep(delay: float) -> None:
        return None

    monkeypatch.setattr(poller.asyncio, "sleep", fake_sleep)


@pytest.mark.asyncio
async def test_approve_then_deposit(wallet: FakeWallet, session: WalletSession, payload):
    result = await submit_loop_deposit(session, payload)

    assert wallet.events == [
        "execute:approve",
        "receipt:0x1",
        "execute:deposit",
        "receipt:0x2",
    ]
    approve_call, deposit_call = wallet.executed
    assert approve_call.contract_address == TOKEN0
    assert approve_call.calldata == [SPENDER, hex(10**18), "0x0"]
    assert deposit_call.contract_address == TOKEN0
    assert deposit_call.calldata == [TOKEN0, TOKEN1, "0x7", "0x1", "0x3"]

    assert result.approve_hash == "0x1"
    assert result.deposit_hash == "0x2"
    assert result.approval_receipt.transaction_hash == "0x1"
    assert result.deposit_receipt.transaction_hash == "0x2"


@pytest.mark.asyncio
async def test_deposit_waits_for_approval_finality(
    wallet: FakeWallet, session: WalletSession, payload
):
    wallet.receipt_script["0x1"] = [hash_not_found(), hash_not_found()]

    await submit_loop_deposit(session, payload)

    deposit_index = wallet.events.index("execute:deposit")
    assert wallet.events[:deposit_index] == [
        "execute:approve",
        "receipt:0x1",
        "receipt:0x1",
        "receipt:0x1",
    ]


@pytest.mark.asyncio
async def test_missing_spender_fails_before_network(
    wallet: FakeWallet, session: WalletSession, payload
):
    del payload["approve_data"]["spender"]

    with pytest.raises(ValidationError) as exc_info:
        await submit_loop_deposit(session, payload)

    assert exc_info.value.field == "approve_data.spender"
    assert wallet.network_calls == 0


@pytest.mark.asyncio
async def test_bad_deposit_amount_fails_before_network(
    wallet: FakeWallet, session: WalletSession, payload
):
    bad = copy.deepcopy(payload)
    bad["loop_liquidity_data"]["deposit_data"]["amount"] = str(2**256)

    with pytest.raises(EncodingError):
        await submit_loop_deposit(session, bad)

    assert wallet.network_calls == 0


@pytest.mark.asyncio
async def test_requires_connected_session(wallet: FakeWallet, payload):
    with pytest.raises(NotConnectedError):
        await submit_loop_deposit(WalletSession(wallet), payload)

    assert wallet.network_calls == 0


@pytest.mark.asyncio
async def test_submission_error_propagates(
    wallet: FakeWallet, session: WalletSession, payload
):
    refused = ProviderCallError(113, "USER_REFUSED_OP")
    wallet.execute_errors = [refused]

    with pytest.raises(ProviderCallError) as exc_info:
        await submit_loop_deposit(session, payload)

    assert exc_info.value is refused
    assert wallet.executed == []
    assert wallet.receipt_queries == []


@pytest.mark.asyncio
async def test_deposit_error_after_approval(
    wallet: FakeWallet, session: WalletSession, payload
):
    wallet.execute_errors = [None, ProviderCallError(-32000, "insufficient balance")]

    with pytest.raises(ProviderCallError, match="insufficient balance"):
        await submit_loop_deposit(session, payload)

    assert [call.entrypoint for call in wallet.executed] == ["approve"]


@pytest.mark.asyncio
async def test_unconfirmed_approval_never_deposits(
    wallet: FakeWallet, session: WalletSession, payload
):
    wallet.receipt_script["0x1"] = [hash_not_found() for _ in range(5)]

    with pytest.raises(ConfirmationTimeoutError):
        await submit_loop_deposit(session, payload, PollPolicy(max_attempts=2))

    assert "execute:deposit" not in wallet.events


def test_prepare_encodes_both_calls_without_a_wallet(payload):
    approve_call, deposit_call = prepare_loop_deposit(payload)

    assert approve_call.entrypoint == "approve"
    assert approve_call.calldata == [SPENDER, hex(10**18), "0x0"]
    assert deposit_call.entrypoint == "deposit"
    assert deposit_call.contract_address == TOKEN0
    assert deposit_call.calldata[2:] == ["0x7", "0x1", "0x3"]


def test_prepare_rejects_oversized_deposit(payload):
    payload["loop_liquidity_data"]["deposit_data"]["amount"] = "1e5000"

    with pytest.raises(EncodingError):
        prepare_loop_deposit(payload)
