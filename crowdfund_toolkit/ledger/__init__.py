from .client import (
    LedgerClient,
    TransactionHandle,
    Web3LedgerClient,
    get_ledger_client,
)

__all__ = [
    "LedgerClient",
    "TransactionHandle",
    "Web3LedgerClient",
    "get_ledger_client",
]
