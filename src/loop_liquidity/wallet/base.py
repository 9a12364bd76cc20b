"""Interface every wallet provider implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..abi import Call, InvokeResult


class WalletProvider(ABC):
    """Abstract signing wallet plus the node it reads from.

    Implementations own transport concerns only. Validation, encoding and
    confirmation policy live in the session and transaction modules.
    """

    @abstractmethod
    async def enable(self, silent: bool = False) -> list[str]:
        """Request account access; returns the authorised addresses.

        Raises:
            ProviderCallError: With the wallet's structured code when refused
        """
        ...

    @property
    @abstractmethod
    def is_connected(self) -> bool: ...

    @property
    @abstractmethod
    def selected_address(self) -> str | None: ...

    @abstractmethod
    async def execute(self, calls: list[Call]) -> InvokeResult:
        """Sign and submit ``calls`` as one invoke transaction."""
        ...

    @abstractmethod
    async def get_transaction_receipt(self, transaction_hash: str) -> dict[str, Any]:
        """Fetch the receipt; raises while the hash is unknown to the node."""
        ...

    @abstractmethod
    async def call_contract(self, call: Call) -> list[str]:
        """Run a read-only call and return the raw felt results."""
        ...

    async def close(self) -> None:
        """Release transport resources."""
        return None
