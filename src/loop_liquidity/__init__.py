"""Starknet wallet helpers for approve-then-deposit loop liquidity."""

__version__ = "0.1.0"
