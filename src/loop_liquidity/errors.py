"""Exception hierarchy for loop-liquidity."""

from __future__ import annotations

from typing import Any


class LoopLiquidityError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(LoopLiquidityError):
    """Raised when a request payload is missing a field or has a malformed one."""

    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f"Missing or invalid field: {field}")
        self.field = field


class EncodingError(LoopLiquidityError):
    """Raised when a numeric value cannot be encoded for calldata."""


class WalletConnectionError(LoopLiquidityError):
    """Raised when no wallet session could be established."""


class ConnectionCancelledError(WalletConnectionError):
    """Raised when the user declined the wallet connection request."""


class NotConnectedError(LoopLiquidityError):
    """Raised when an operation needs a connected wallet session."""


class ProviderCallError(LoopLiquidityError):
    """JSON-RPC error object returned by the wallet or the node."""

    def __init__(self, code: int | None, message: str, data: Any = None):
        super().__init__(f"[{code}] {message}" if code is not None else message)
        self.code = code
        self.message = message
        self.data = data


class TransientPollError(LoopLiquidityError):
    """A receipt lookup that should be retried. Never leaves the poller."""


class ConfirmationTimeoutError(LoopLiquidityError, TimeoutError):
    """Raised when a transaction did not reach finality within the poll policy."""

    def __init__(self, transaction_hash: str, attempts: int, message: str):
        super().__init__(message)
        self.transaction_hash = transaction_hash
        self.attempts = attempts


class TransactionRevertedError(LoopLiquidityError):
    """Raised when a transaction was accepted but its execution reverted."""

    def __init__(self, transaction_hash: str, reason: str | None):
        super().__init__(
            f"Transaction {transaction_hash} reverted"
            + (f": {reason}" if reason else "")
        )
        self.transaction_hash = transaction_hash
        self.reason = reason
