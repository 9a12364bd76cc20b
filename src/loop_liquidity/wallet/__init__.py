from __future__ import annotations

from .base import WalletProvider
from .bridge import BridgeWalletProvider
from .session import ConnectOptions, WalletSession, connect
from .store import SessionStore, logout

__all__ = [
    "BridgeWalletProvider",
    "ConnectOptions",
    "SessionStore",
    "WalletProvider",
    "WalletSession",
    "connect",
    "logout",
]
