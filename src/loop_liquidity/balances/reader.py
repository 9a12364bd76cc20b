"""Token balance reads with per-token failure isolation."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass

from ..errors import ProviderCallError
from ..logger import get_logger
from ..transactions.calls import build_balance_of_call
from ..units import format_units, from_uint256
from ..wallet.session import WalletSession

logger = get_logger(__name__)

FAILED_DISPLAY_VALUE = "0"


@dataclass(frozen=True)
class BalanceResult:
    """Either a raw balance or the reason the lookup failed."""

    token_address: str
    raw: int | None = None
    error: str | None = None

    @classmethod
    def ok(cls, token_address: str, raw: int) -> "BalanceResult":
        return cls(token_address=token_address, raw=raw)

    @classmethod
    def failed(cls, token_address: str, error: BaseException) -> "BalanceResult":
        return cls(token_address=token_address, error=str(error) or type(error).__name__)

    @property
    def is_ok(self) -> bool:
        return self.raw is not None


@dataclass(frozen=True)
class TokenBalanceSet:
    balances: dict[str, BalanceResult]
    decimals: int = 18
    places: int = 4

    def __getitem__(self, symbol: str) -> BalanceResult:
        return self.balances[symbol]

    def formatted(self, symbol: str) -> str | None:
        """Display amount for ``symbol``, or None when the lookup failed."""
        result = self.balances[symbol]
        if result.raw is None:
            return None
        return format_units(result.raw, self.decimals, self.places)

    def as_display(self) -> dict[str, str]:
        """Symbol -> display string, with failed lookups shown as ``"0"``."""
        return {
            symbol: self.formatted(symbol) or FAILED_DISPLAY_VALUE
            for symbol in self.balances
        }

    @property
    def failed_symbols(self) -> list[str]:
        return [symbol for symbol, result in self.balances.items() if not result.is_ok]


def decode_balance(result: list[str]) -> int:
    """Decode a ``balanceOf`` result: ``[low, high]`` uint256 or a single felt."""
    if not result:
        raise ProviderCallError(None, "balanceOf returned no data")
    words = [int(word, 0) for word in result]
    if len(words) >= 2:
        return from_uint256(words[0], words[1])
    return words[0]


async def _read_balance(session: WalletSession, token_address: str, owner: str) -> int:
    call = build_balance_of_call(token_address, owner)
    return decode_balance(await session.provider.call_contract(call))


async def read_balances(
    session: WalletSession,
    address: str,
    token_addresses: Mapping[str, str],
    *,
    decimals: int = 18,
    places: int = 4,
) -> TokenBalanceSet:
    """Read ``balanceOf(address)`` for every token.

    Lookups run concurrently and never raise; a failing token becomes a
    failed :class:`BalanceResult` while the others still resolve.
    """
    symbols = list(token_addresses)
    results = await asyncio.gather(
        *[
            _read_balance(session, token_addresses[symbol], address)
            for symbol in symbols
        ],
        return_exceptions=True,
    )

    balances: dict[str, BalanceResult] = {}
    for symbol, result in zip(symbols, results):
        token_address = token_addresses[symbol]
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.error(
                "Error fetching balance for token %s (%s): %s",
                symbol,
                token_address,
                result,
            )
            balances[symbol] = BalanceResult.failed(token_address, result)
        else:
            balances[symbol] = BalanceResult.ok(token_address, result)

    return TokenBalanceSet(balances=balances, decimals=decimals, places=places)
