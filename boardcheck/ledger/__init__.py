"""Verification ledger and storage backends."""

from .log import (
    FileLedgerStore,
    LedgerEntry,
    LedgerStore,
    MemoryLedgerStore,
    VerificationLedger,
    VerificationResult,
    verify_ledger,
)

__all__ = [
    "FileLedgerStore",
    "LedgerEntry",
    "LedgerStore",
    "MemoryLedgerStore",
    "VerificationLedger",
    "VerificationResult",
    "verify_ledger",
]
