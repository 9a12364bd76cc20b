"""Wallet provider backed by a wallet-API signer and a Starknet node."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from ..abi import Call, InvokeResult
from ..clients.json_rpc import JsonRpcClient
from ..errors import ProviderCallError
from ..logger import get_logger
from .base import WalletProvider

if TYPE_CHECKING:
    from ..settings import LoopSettings

logger = get_logger(__name__)


class BridgeWalletProvider(WalletProvider):
    """Signs through the wallet API endpoint, reads through the node RPC.

    The wallet endpoint speaks the Starknet wallet API
    (``wallet_requestAccounts``, ``wallet_addInvokeTransaction``); keys never
    leave the wallet.
    """

    def __init__(self, wallet: JsonRpcClient, node: JsonRpcClient):
        self.wallet = wallet
        self.node = node
        self._accounts: list[str] = []

    @classmethod
    def from_settings(cls, settings: LoopSettings) -> "BridgeWalletProvider":
        if not settings.wallet_url:
            raise ValueError("wallet_url must be configured")
        token = (
            settings.wallet_bridge_token.get_secret_value()
            if settings.wallet_bridge_token
            else None
        )
        wallet = JsonRpcClient(
            settings.wallet_url, token=token, request_timeout=settings.rpc_timeout
        )
        node = JsonRpcClient(
            settings.rpc_url_resolved, request_timeout=settings.rpc_timeout
        )
        return cls(wallet=wallet, node=node)

    async def enable(self, silent: bool = False) -> list[str]:
        result = await self.wallet.request(
            "wallet_requestAccounts", {"silent_mode": silent}, retry=False
        )
        if not isinstance(result, list):
            raise ProviderCallError(
                None, f"wallet_requestAccounts returned {type(result).__name__}"
            )
        self._accounts = [str(account) for account in result]
        logger.debug("Wallet authorised %d account(s)", len(self._accounts))
        return list(self._accounts)

    @property
    def is_connected(self) -> bool:
        return bool(self._accounts)

    @property
    def selected_address(self) -> str | None:
        return self._accounts[0] if self._accounts else None

    async def execute(self, calls: list[Call]) -> InvokeResult:
        result = await self.wallet.request(
            "wallet_addInvokeTransaction",
            {"calls": [call.to_wallet_call() for call in calls]},
            retry=False,
        )
        if not isinstance(result, dict) or "transaction_hash" not in result:
            raise ProviderCallError(
                None, f"wallet_addInvokeTransaction returned no hash: {result!r}"
            )
        return InvokeResult(transaction_hash=str(result["transaction_hash"]))

    async def get_transaction_receipt(self, transaction_hash: str) -> dict[str, Any]:
        result = await self.node.request(
            "starknet_getTransactionReceipt",
            {"transaction_hash": transaction_hash},
        )
        if not isinstance(result, dict):
            raise ProviderCallError(None, f"Empty receipt for {transaction_hash}")
        return result

    async def call_contract(self, call: Call) -> list[str]:
        result = await self.node.request(
            "starknet_call",
            {"request": call.to_rpc_request(), "block_id": "latest"},
        )
        if not isinstance(result, list):
            raise ProviderCallError(
                None, f"starknet_call returned {type(result).__name__}"
            )
        return [str(item) for item in result]

    async def close(self) -> None:
        await asyncio.to_thread(self.wallet.close)
        await asyncio.to_thread(self.node.close)
