class LedgerError(Exception):
    """Base class for every failure surfaced to the menu loop."""


class AccountNotFoundError(LedgerError):
    """Raised when an account id is missing from the store."""


class InsufficientFundsError(LedgerError):
    """Raised when a withdrawal would drop balance below zero."""


class StorageError(LedgerError):
    """Raised when the underlying database read or write fails."""


class InvalidInputError(LedgerError, ValueError):
    """Raised for an unparseable or non-positive amount."""
