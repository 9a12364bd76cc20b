"""Builders for the contract calls the workflow submits or reads."""

from __future__ import annotations

from eth_utils import to_hex

from ..abi import Call
from ..constants import APPROVE_ENTRYPOINT, BALANCE_OF_ENTRYPOINT, DEPOSIT_ENTRYPOINT
from ..units import to_felt, to_uint256
from .models import ApprovalRequest, DepositRequest


def build_approve_call(approval: ApprovalRequest) -> Call:
    """``approve(spender, amount.low, amount.high)`` on the approval target."""
    amount = to_uint256(approval.amount)
    return Call(
        contract_address=approval.target_address,
        entrypoint=APPROVE_ENTRYPOINT,
        calldata=[approval.spender_address, *amount.to_calldata()],
    )


def build_deposit_call(deposit: DepositRequest) -> Call:
    """``deposit(token0, token1, amount.low, amount.high, multiplier)`` on token0."""
    if deposit.pool_key is None or deposit.deposit_data is None:
        raise ValueError("deposit request must be validated before encoding")
    pool_key = deposit.pool_key
    amount = to_uint256(deposit.deposit_data.amount)
    multiplier = to_felt(deposit.deposit_data.multiplier)
    return Call(
        contract_address=pool_key.token0,
        entrypoint=DEPOSIT_ENTRYPOINT,
        calldata=[
            pool_key.token0,
            pool_key.token1,
            *amount.to_calldata(),
            to_hex(multiplier),
        ],
    )


def build_balance_of_call(token_address: str, owner: str) -> Call:
    return Call(
        contract_address=token_address,
        entrypoint=BALANCE_OF_ENTRYPOINT,
        calldata=[owner],
    )
