from __future__ import annotations

from .json_rpc import JsonRpcClient

__all__ = ["JsonRpcClient"]
