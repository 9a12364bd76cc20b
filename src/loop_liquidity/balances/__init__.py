from __future__ import annotations

from .reader import BalanceResult, TokenBalanceSet, read_balances

__all__ = ["BalanceResult", "TokenBalanceSet", "read_balances"]
