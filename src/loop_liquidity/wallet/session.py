"""Explicit wallet session passed to every wallet operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import requests

from ..constants import WALLET_USER_REFUSED_OP
from ..errors import (
    ConnectionCancelledError,
    NotConnectedError,
    ProviderCallError,
    WalletConnectionError,
)
from ..logger import get_logger
from .base import WalletProvider
from .store import SessionStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConnectOptions:
    """How to ask the wallet for access.

    ``modal_mode="alwaysAsk"`` forces a prompt even when ``silent`` is set.
    """

    silent: bool = False
    modal_mode: Literal["alwaysAsk", "canAsk", "neverAsk"] = "alwaysAsk"

    @property
    def silent_mode(self) -> bool:
        if self.modal_mode == "alwaysAsk":
            return False
        if self.modal_mode == "neverAsk":
            return True
        return self.silent


class WalletSession:
    """A connected wallet. Holds no transaction logic of its own."""

    def __init__(
        self,
        provider: WalletProvider,
        address: str | None = None,
        store: SessionStore | None = None,
    ):
        self.provider = provider
        self._address = address
        self._store = store

    @property
    def is_connected(self) -> bool:
        return self._address is not None and self.provider.is_connected

    def current_address(self) -> str:
        if not self.is_connected or self._address is None:
            raise NotConnectedError("Wallet not connected")
        return self._address

    def require_connected(self) -> None:
        self.current_address()

    def disconnect(self) -> None:
        """Forget the address and the persisted wallet id. Idempotent."""
        self._address = None
        if self._store is not None:
            self._store.clear()


async def connect(
    provider: WalletProvider | None,
    options: ConnectOptions | None = None,
    store: SessionStore | None = None,
) -> WalletSession:
    """Enable the wallet and return a connected session.

    Raises:
        ConnectionCancelledError: If the user refused the request
        WalletConnectionError: If no provider is available, the wallet
            failed, or it reports no connected account after enabling
    """
    options = options or ConnectOptions()
    if provider is None:
        raise WalletConnectionError("No wallet provider available")

    try:
        await provider.enable(silent=options.silent_mode)
    except ProviderCallError as e:
        if e.code == WALLET_USER_REFUSED_OP:
            logger.info("Wallet connection cancelled by user")
            raise ConnectionCancelledError("Wallet connection cancelled by user") from e
        logger.error("Error connecting wallet: %s", e)
        raise WalletConnectionError(f"Failed to connect to wallet: {e}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Wallet provider unreachable: %s", e)
        raise WalletConnectionError(
            "No wallet provider available; make sure the wallet is running"
        ) from e

    address = provider.selected_address
    if not provider.is_connected or not address:
        raise WalletConnectionError("Wallet connection failed")

    logger.info("Wallet connected. Address: %s", address)
    if store is not None:
        store.save(address)
    return WalletSession(provider, address=address, store=store)
