"""Application state container."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .settings import LoopSettings


@dataclass
class AppState:
    """Container for application-wide state and dependencies.

    Passed to every command to avoid global state and enable testing.
    """

    settings: LoopSettings
    logger: logging.Logger
