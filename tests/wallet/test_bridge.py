from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from loop_liquidity.abi import Call, get_selector_from_name
from loop_liquidity.errors import ProviderCallError
from loop_liquidity.settings import LoopSettings
from loop_liquidity.wallet.bridge import BridgeWalletProvider


def create_provider(wallet_result=None, node_result=None) -> BridgeWalletProvider:
    wallet = MagicMock()
    wallet.request = AsyncMock(return_value=wallet_result)
    node = MagicMock()
    node.request = AsyncMock(return_value=node_result)
    return BridgeWalletProvider(wallet=wallet, node=node)


@pytest.mark.asyncio
async def test_enable_requests_accounts():
    provider = create_provider(wallet_result=["0xA", "0xB"])

    accounts = await provider.enable(silent=True)

    provider.wallet.request.assert_awaited_once_with(
        "wallet_requestAccounts", {"silent_mode": True}, retry=False
    )
    assert accounts == ["0xA", "0xB"]
    assert provider.is_connected
    assert provider.selected_address == "0xA"


@pytest.mark.asyncio
async def test_not_connected_before_enable():
    provider = create_provider()

    assert not provider.is_connected
    assert provider.selected_address is None


@pytest.mark.asyncio
async def test_execute_uses_wallet_api():
    provider = create_provider(wallet_result={"transaction_hash": "0x99"})
    call = Call("0xtoken", "approve", ["0x1", "0x2", "0x0"])

    result = await provider.execute([call])

    provider.wallet.request.assert_awaited_once_with(
        "wallet_addInvokeTransaction",
        {
            "calls": [
                {
                    "contract_address": "0xtoken",
                    "entry_point": "approve",
                    "calldata": ["0x1", "0x2", "0x0"],
                }
            ]
        },
        retry=False,
    )
    assert result.transaction_hash == "0x99"


@pytest.mark.asyncio
async def test_execute_without_hash_is_an_error():
    provider = create_provider(wallet_result={})

    with pytest.raises(ProviderCallError):
        await provider.execute([Call("0x1", "approve")])


@pytest.mark.asyncio
async def test_receipt_and_call_go_to_node():
    provider = create_provider(node_result={"finality_status": "ACCEPTED_ON_L2"})

    receipt = await provider.get_transaction_receipt("0x5")

    provider.node.request.assert_awaited_once_with(
        "starknet_getTransactionReceipt", {"transaction_hash": "0x5"}
    )
    assert receipt["finality_status"] == "ACCEPTED_ON_L2"
    provider.wallet.request.assert_not_awaited()


@pytest.mark.asyncio
async def test_call_contract_sends_selector():
    provider = create_provider(node_result=["0x10", "0x0"])

    result = await provider.call_contract(Call("0xtoken", "balanceOf", ["0xowner"]))

    method, params = provider.node.request.await_args.args
    assert method == "starknet_call"
    assert params["block_id"] == "latest"
    assert params["request"]["contract_address"] == "0xtoken"
    assert int(params["request"]["entry_point_selector"], 16) == get_selector_from_name(
        "balanceOf"
    )
    assert result == ["0x10", "0x0"]


def test_from_settings_wires_token_and_rpc():
    settings = LoopSettings(
        rpc_url="https://node.example",
        wallet_url="http://wallet.example/rpc",
        wallet_bridge_token="s3cret",
    )

    provider = BridgeWalletProvider.from_settings(settings)

    assert provider.node.url == "https://node.example"
    assert provider.wallet.url == "http://wallet.example/rpc"
    assert provider.wallet._session.headers["Authorization"] == "Bearer s3cret"
    assert "Authorization" not in provider.node._session.headers


def test_from_settings_requires_wallet_url():
    with pytest.raises(ValueError):
        BridgeWalletProvider.from_settings(LoopSettings(wallet_url=None))
