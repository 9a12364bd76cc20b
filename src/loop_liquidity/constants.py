"""Starknet token addresses, endpoints and protocol constants."""

from typing import TypedDict


class NetworkTokens(TypedDict):
    ETH: str
    USDC: str
    STRK: str


MAINNET_TOKENS: NetworkTokens = {
    "ETH": "0x49d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7",
    "USDC": "0x53c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8",
    "STRK": "0x4718f5a0fc34cc1af16a1cdee98ffb20c31f5cd61d6ab07201858f4287c938d",
}

SEPOLIA_TOKENS: NetworkTokens = {
    "ETH": "0x49d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7",
    "USDC": "0x53b40a647cedfca6ca84f542a0fe36736031905a9639a7f19a3c1e66bfd5080",
    "STRK": "0x4718f5a0fc34cc1af16a1cdee98ffb20c31f5cd61d6ab07201858f4287c938d",
}

DEFAULT_MAINNET_RPC_URL = "https://starknet-mainnet.public.blastapi.io/rpc/v0_7"
DEFAULT_SEPOLIA_RPC_URL = "https://starknet-sepolia.public.blastapi.io/rpc/v0_7"

DEFAULT_WALLET_URL = "http://127.0.0.1:5050/rpc"
DEFAULT_DASHBOARD_API_URL = "http://127.0.0.1:8000"

# Starknet field prime: 2**251 + 17 * 2**192 + 1
FELT_PRIME = 2**251 + 17 * 2**192 + 1
UINT128_BOUND = 2**128
UINT256_BOUND = 2**256

APPROVE_ENTRYPOINT = "approve"
DEPOSIT_ENTRYPOINT = "deposit"
BALANCE_OF_ENTRYPOINT = "balanceOf"

# Wallet API (SNIP-12 style wallet RPC) error codes
WALLET_USER_REFUSED_OP = 113

# Node JSON-RPC error codes
RPC_TXN_HASH_NOT_FOUND = 29

ACCEPTED_FINALITY_STATUSES = frozenset({"ACCEPTED_ON_L2", "ACCEPTED_ON_L1"})
REVERTED_EXECUTION_STATUS = "REVERTED"
