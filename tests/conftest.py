from __future__ import annotations

from typing import Any

import pytest

from loop_liquidity.abi import Call, InvokeResult
from loop_liquidity.errors import ProviderCallError
from loop_liquidity.wallet.base import WalletProvider
from loop_liquidity.wallet.session import WalletSession

ACCOUNT = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcd"


def accepted_receipt(tx_hash: str) -> dict[str, Any]:
    return {
        "transaction_hash": tx_hash,
        "finality_status": "ACCEPTED_ON_L2",
        "execution_status": "SUCCEEDED",
    }


def hash_not_found() -> ProviderCallError:
    return ProviderCallError(29, "Transaction hash not found")


class FakeWallet(WalletProvider):
    """Scripted provider that records every call it receives."""

    def __init__(
        self,
        accounts: list[str] | None = None,
        enable_error: Exception | None = None,
    ):
        self.accounts = [ACCOUNT] if accounts is None else accounts
        self.enable_error = enable_error
        self._enabled: list[str] = []
        self.events: list[str] = []
        self.executed: list[Call] = []
        self.execute_errors: list[Exception | None] = []
        self.receipt_script: dict[str, list[Any]] = {}
        self.receipt_queries: list[str] = []
        self.call_results: dict[str, Any] = {}
        self.contract_calls: list[Call] = []

    @property
    def network_calls(self) -> int:
        return len(self.executed) + len(self.receipt_queries) + len(self.contract_calls)

    async def enable(self, silent: bool = False) -> list[str]:
        self.events.append(f"enable(silent={silent})")
        if self.enable_error is not None:
            raise self.enable_error
        self._enabled = list(self.accounts)
        return list(self._enabled)

    @property
    def is_connected(self) -> bool:
        return bool(self._enabled)

    @property
    def selected_address(self) -> str | None:
        return self._enabled[0] if self._enabled else None

    async def execute(self, calls: list[Call]) -> InvokeResult:
        (call,) = calls
        self.events.append(f"execute:{call.entrypoint}")
        if self.execute_errors:
            error = self.execute_errors.pop(0)
            if error is not None:
                raise error
        self.executed.append(call)
        return InvokeResult(transaction_hash=f"0x{len(self.executed):x}")

    async def get_transaction_receipt(self, transaction_hash: str) -> dict[str, Any]:
        self.events.append(f"receipt:{transaction_hash}")
        self.receipt_queries.append(transaction_hash)
        script = self.receipt_script.get(transaction_hash, [])
        if script:
            step = script.pop(0)
            if isinstance(step, Exception):
                raise step
            return step
        return accepted_receipt(transaction_hash)

    async def call_contract(self, call: Call) -> list[str]:
        self.contract_calls.append(call)
        result = self.call_results[call.contract_address]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture
def session(wallet: FakeWallet) -> WalletSession:
    wallet._enabled = list(wallet.accounts)
    return WalletSession(wallet, address=wallet.accounts[0])
