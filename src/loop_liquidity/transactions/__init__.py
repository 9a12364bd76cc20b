from __future__ import annotations

from .models import ApprovalRequest, DepositData, DepositRequest, LoopDepositRequest, PoolKey
from .poller import PollPolicy, TransactionReceipt, await_finality
from .submitter import LoopDepositResult, prepare_loop_deposit, submit_loop_deposit

__all__ = [
    "ApprovalRequest",
    "DepositData",
    "DepositRequest",
    "LoopDepositRequest",
    "LoopDepositResult",
    "PollPolicy",
    "PoolKey",
    "TransactionReceipt",
    "await_finality",
    "prepare_loop_deposit",
    "submit_loop_deposit",
]
