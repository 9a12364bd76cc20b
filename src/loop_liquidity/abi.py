"""Starknet contract-call primitives: entry point selectors and call payloads."""

from __future__ import annotations

from dataclasses import dataclass, field

from eth_utils import keccak, to_hex

MASK_250 = 2**250 - 1


def get_selector_from_name(entrypoint: str) -> int:
    """Return the Starknet selector for an entry point name.

    ``starknet_keccak``: keccak256 of the ASCII name, truncated to 250 bits.
    """
    return int.from_bytes(keccak(text=entrypoint), "big") & MASK_250


@dataclass(frozen=True)
class Call:
    """A single contract invocation with felt-encoded calldata."""

    contract_address: str
    entrypoint: str
    calldata: list[str] = field(default_factory=list)

    @property
    def selector(self) -> str:
        return to_hex(get_selector_from_name(self.entrypoint))

    def to_wallet_call(self) -> dict[str, object]:
        """Shape expected by ``wallet_addInvokeTransaction``."""
        return {
            "contract_address": self.contract_address,
            "entry_point": self.entrypoint,
            "calldata": list(self.calldata),
        }

    def to_rpc_request(self) -> dict[str, object]:
        """Shape expected by ``starknet_call``."""
        return {
            "contract_address": self.contract_address,
            "entry_point_selector": self.selector,
            "calldata": list(self.calldata),
        }


@dataclass(frozen=True)
class InvokeResult:
    """Receipt handle returned by the wallet on submission."""

    transaction_hash: str
