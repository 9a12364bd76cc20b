"""Persisted wallet identifier, the only state kept between runs."""

from __future__ import annotations

import json
from pathlib import Path

from ..logger import get_logger

logger = get_logger(__name__)

WALLET_ID_KEY = "wallet_id"


class SessionStore:
    """Single key/value entry in a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable session file %s", self.path)
            return None
        if not isinstance(data, dict):
            return None
        wallet_id = data.get(WALLET_ID_KEY)
        return str(wallet_id) if wallet_id else None

    def save(self, wallet_id: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({WALLET_ID_KEY: wallet_id}))
        logger.debug("Stored wallet id in %s", self.path)

    def clear(self) -> None:
        """Remove the stored wallet id. Safe to call repeatedly."""
        self.path.unlink(missing_ok=True)


def logout(store: SessionStore) -> None:
    store.clear()
    logger.info("Logged out; cleared stored wallet id")
