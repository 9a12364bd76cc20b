"""Waits for submitted transactions to reach finality."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import requests

from ..constants import ACCEPTED_FINALITY_STATUSES, REVERTED_EXECUTION_STATUS
from ..errors import (
    ConfirmationTimeoutError,
    ProviderCallError,
    TransactionRevertedError,
    TransientPollError,
)
from ..logger import get_logger

if TYPE_CHECKING:
    from ..wallet.session import WalletSession

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 5.0


@dataclass(frozen=True)
class PollPolicy:
    """How long to keep asking for a receipt.

    ``max_attempts=None`` and ``timeout=None`` together poll until the
    receipt arrives or the caller cancels.
    """

    interval: float = DEFAULT_POLL_INTERVAL
    backoff_factor: float = 1.0
    max_interval: float = 60.0
    max_attempts: int | None = 120
    timeout: float | None = None

    def delay_after(self, attempt: int) -> float:
        """Delay following the ``attempt``-th failed query (1-based)."""
        delay = self.interval * (self.backoff_factor ** (attempt - 1))
        return min(delay, max(self.max_interval, self.interval))


@dataclass(frozen=True)
class TransactionReceipt:
    transaction_hash: str
    finality_status: str | None
    execution_status: str | None
    revert_reason: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_rpc(cls, transaction_hash: str, raw: dict[str, Any]) -> "TransactionReceipt":
        return cls(
            transaction_hash=str(raw.get("transaction_hash") or transaction_hash),
            finality_status=raw.get("finality_status"),
            execution_status=raw.get("execution_status"),
            revert_reason=raw.get("revert_reason"),
            raw=raw,
        )

    @property
    def is_final(self) -> bool:
        # Receipts without a finality status come from nodes that only serve accepted txs
        return (
            self.finality_status is None
            or self.finality_status in ACCEPTED_FINALITY_STATUSES
        )

    @property
    def reverted(self) -> bool:
        return self.execution_status == REVERTED_EXECUTION_STATUS


async def _query_receipt(
    session: WalletSession, transaction_hash: str
) -> TransactionReceipt:
    try:
        raw = await session.provider.get_transaction_receipt(transaction_hash)
    except (ProviderCallError, requests.exceptions.RequestException) as e:
        raise TransientPollError(str(e)) from e

    receipt = TransactionReceipt.from_rpc(transaction_hash, raw)
    if receipt.reverted:
        raise TransactionRevertedError(transaction_hash, receipt.revert_reason)
    if not receipt.is_final:
        raise TransientPollError(f"finality status is {receipt.finality_status}")
    return receipt


async def await_finality(
    session: WalletSession,
    transaction_hash: str,
    policy: PollPolicy | None = None,
) -> TransactionReceipt:
    """Poll for the receipt of ``transaction_hash`` until it is final.

    Any failed lookup, including "hash not found" while the transaction is
    still propagating, is retried after the policy delay.

    Args:
        session: Connected wallet session whose provider is queried
        transaction_hash: Hash returned on submission
        policy: Retry policy; defaults to a fixed 5s interval

    Returns:
        The accepted receipt

    Raises:
        ConfirmationTimeoutError: Attempts or deadline exhausted
        TransactionRevertedError: The transaction was accepted but reverted
        asyncio.CancelledError: The caller cancelled the wait
    """
    policy = policy or PollPolicy()
    attempts = 0

    async def _poll() -> TransactionReceipt:
        nonlocal attempts
        while True:
            attempts += 1
            try:
                receipt = await _query_receipt(session, transaction_hash)
            except TransientPollError as e:
                if policy.max_attempts is not None and attempts >= policy.max_attempts:
                    raise ConfirmationTimeoutError(
                        transaction_hash,
                        attempts,
                        f"Transaction {transaction_hash} not accepted after "
                        f"{attempts} attempt(s): {e}",
                    ) from e
                delay = policy.delay_after(attempts)
                logger.info(
                    "Waiting for transaction %s to be accepted (attempt %d, retry in %.1fs)",
                    transaction_hash,
                    attempts,
                    delay,
                )
                logger.debug("Receipt lookup failed: %s", e)
                await asyncio.sleep(delay)
                continue

            logger.info(
                "Transaction accepted: %s (%s)",
                transaction_hash,
                receipt.finality_status or "accepted",
            )
            return receipt

    if policy.timeout is None:
        return await _poll()

    try:
        async with asyncio.timeout(policy.timeout):
            return await _poll()
    except ConfirmationTimeoutError:
        raise
    except TimeoutError as exc:
        logger.error(
            "Timed out waiting for transaction %s after %d attempt(s)",
            transaction_hash,
            attempts,
        )
        raise ConfirmationTimeoutError(
            transaction_hash,
            attempts,
            f"Transaction {transaction_hash} not accepted within {policy.timeout}s",
        ) from exc
