"""Approve-then-deposit workflow."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import requests

from ..abi import Call
from ..errors import ProviderCallError
from ..logger import get_logger
from ..wallet.session import WalletSession
from .calls import build_approve_call, build_deposit_call
from .models import LoopDepositRequest
from .poller import PollPolicy, TransactionReceipt, await_finality

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoopDepositResult:
    approve_hash: str
    deposit_hash: str
    approval_receipt: TransactionReceipt
    deposit_receipt: TransactionReceipt

    def to_dict(self) -> dict[str, str | None]:
        return {
            "approve_hash": self.approve_hash,
            "deposit_hash": self.deposit_hash,
            "approve_finality": self.approval_receipt.finality_status,
            "deposit_finality": self.deposit_receipt.finality_status,
        }


async def _submit(session: WalletSession, call: Call, label: str) -> str:
    try:
        result = await session.provider.execute([call])
    except (ProviderCallError, requests.exceptions.RequestException) as e:
        logger.error("Error sending %s transaction: %s", label, e)
        raise
    logger.info("%s transaction submitted: %s", label, result.transaction_hash)
    return result.transaction_hash


def prepare_loop_deposit(
    request: LoopDepositRequest | Mapping[str, Any],
) -> tuple[Call, Call]:
    """Validate ``request`` and encode its approve and deposit calls.

    Runs no I/O, so callers can reject a bad payload before reaching the
    wallet.

    Raises:
        ValidationError: Missing or malformed request field
        EncodingError: Amount or multiplier out of range
    """
    if not isinstance(request, LoopDepositRequest):
        request = LoopDepositRequest.from_dict(request)
    request.validate()
    return build_approve_call(request.approval), build_deposit_call(request.deposit)


async def submit_loop_deposit(
    session: WalletSession,
    request: LoopDepositRequest | Mapping[str, Any],
    policy: PollPolicy | None = None,
) -> LoopDepositResult:
    """Approve the spender, wait for finality, then deposit into the pool.

    Both calls are validated and encoded before anything is sent, so a bad
    payload never reaches the wallet. The deposit is only submitted once the
    approval receipt is final.

    Args:
        session: Connected wallet session
        request: Parsed request or its wire-format mapping
        policy: Confirmation policy used for both transactions

    Returns:
        Both transaction hashes and their final receipts

    Raises:
        ValidationError: Missing or malformed request field
        EncodingError: Amount or multiplier out of range
        NotConnectedError: Session is not connected
        ProviderCallError: The wallet rejected a submission
        ConfirmationTimeoutError: A transaction did not reach finality in time
        TransactionRevertedError: A transaction reverted
    """
    approve_call, deposit_call = prepare_loop_deposit(request)
    session.require_connected()

    approve_hash = await _submit(session, approve_call, "Approve")
    approval_receipt = await await_finality(session, approve_hash, policy)

    deposit_hash = await _submit(session, deposit_call, "Deposit")
    deposit_receipt = await await_finality(session, deposit_hash, policy)

    return LoopDepositResult(
        approve_hash=approve_hash,
        deposit_hash=deposit_hash,
        approval_receipt=approval_receipt,
        deposit_receipt=deposit_receipt,
    )
