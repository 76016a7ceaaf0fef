"""Poker league ledger settlement service."""

__version__ = "1.0.0"
