"""
Ledger engine error taxonomy.
"""

from typing import Optional


class LedgerError(Exception):
    """Base class for errors raised by the ledger services."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Input is malformed or violates a transaction invariant."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(LedgerError):
    """Referenced entity does not exist or belongs to another user."""


class ConsistencyError(LedgerError):
    """An atomic unit was aborted; nothing it did was persisted."""
