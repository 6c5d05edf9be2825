"""Ledger storage abstractions and implementations."""

from .base import LedgerStore, StorageError
from .jsonl import JsonlLedger
from .memory import InMemoryLedger

__all__ = ["InMemoryLedger", "JsonlLedger", "LedgerStore", "StorageError"]
