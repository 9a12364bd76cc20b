"""Request payloads for the approve + deposit workflow.

Wire shape::

    {
        "approve_data": {"to_address": ..., "spender": ..., "amount": ...},
        "loop_liquidity_data": {
            "pool_key": {"token0": ..., "token1": ...},
            "deposit_data": {"amount": ..., "multiplier": ...},
        },
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from eth_utils import is_0x_prefixed, is_hex

from ..constants import FELT_PRIME
from ..errors import ValidationError
from ..units import Numeric


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(value: Any, field: str) -> Any:
    if _is_missing(value):
        raise ValidationError(field)
    return value


def _require_address(value: Any, field: str) -> str:
    _require(value, field)
    if not (isinstance(value, str) and is_0x_prefixed(value) and is_hex(value)):
        raise ValidationError(field, f"{field} must be a 0x-prefixed hex address")
    if len(value) <= 2 or int(value, 16) >= FELT_PRIME:
        raise ValidationError(field, f"{field} is not a valid Starknet address")
    return value


def _require_mapping(payload: Any, field: str) -> Mapping[str, Any]:
    if _is_missing(payload):
        raise ValidationError(field)
    if not isinstance(payload, Mapping):
        raise ValidationError(field, f"{field} must be an object")
    return payload


@dataclass(frozen=True)
class ApprovalRequest:
    target_address: str
    spender_address: str
    amount: Numeric

    def validate(self, prefix: str = "approve_data") -> None:
        _require_address(self.target_address, f"{prefix}.to_address")
        _require_address(self.spender_address, f"{prefix}.spender")
        _require(self.amount, f"{prefix}.amount")

    @classmethod
    def from_dict(cls, payload: Any, prefix: str = "approve_data") -> "ApprovalRequest":
        data = _require_mapping(payload, prefix)
        return cls(
            target_address=data.get("to_address"),  # type: ignore[arg-type]
            spender_address=data.get("spender"),  # type: ignore[arg-type]
            amount=data.get("amount"),  # type: ignore[arg-type]
        )


@dataclass(frozen=True)
class PoolKey:
    token0: str
    token1: str


@dataclass(frozen=True)
class DepositData:
    amount: Numeric
    multiplier: Numeric


@dataclass(frozen=True)
class DepositRequest:
    pool_key: PoolKey | None
    deposit_data: DepositData | None

    def validate(self, prefix: str = "loop_liquidity_data") -> None:
        if self.pool_key is None:
            raise ValidationError(f"{prefix}.pool_key")
        if self.deposit_data is None:
            raise ValidationError(f"{prefix}.deposit_data")
        _require_address(self.pool_key.token0, f"{prefix}.pool_key.token0")
        _require_address(self.pool_key.token1, f"{prefix}.pool_key.token1")
        _require(self.deposit_data.amount, f"{prefix}.deposit_data.amount")
        _require(self.deposit_data.multiplier, f"{prefix}.deposit_data.multiplier")

    @classmethod
    def from_dict(
        cls, payload: Any, prefix: str = "loop_liquidity_data"
    ) -> "DepositRequest":
        data = _require_mapping(payload, prefix)
        pool = _require_mapping(data.get("pool_key"), f"{prefix}.pool_key")
        deposit = _require_mapping(data.get("deposit_data"), f"{prefix}.deposit_data")
        return cls(
            pool_key=PoolKey(
                token0=pool.get("token0"),  # type: ignore[arg-type]
                token1=pool.get("token1"),  # type: ignore[arg-type]
            ),
            deposit_data=DepositData(
                amount=deposit.get("amount"),  # type: ignore[arg-type]
                multiplier=deposit.get("multiplier"),  # type: ignore[arg-type]
            ),
        )


@dataclass(frozen=True)
class LoopDepositRequest:
    approval: ApprovalRequest
    deposit: DepositRequest

    def validate(self) -> None:
        self.approval.validate()
        self.deposit.validate()

    @classmethod
    def from_dict(cls, payload: Any) -> "LoopDepositRequest":
        """Parse the wire payload.

        Raises:
            ValidationError: Naming the first missing or malformed field
        """
        data = _require_mapping(payload, "request")
        request = cls(
            approval=ApprovalRequest.from_dict(data.get("approve_data")),
            deposit=DepositRequest.from_dict(data.get("loop_liquidity_data")),
        )
        request.validate()
        return request
