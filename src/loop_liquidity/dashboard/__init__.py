from __future__ import annotations

from .client import fetch_dashboard_data

__all__ = ["fetch_dashboard_data"]
