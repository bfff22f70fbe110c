"""
Error taxonomy for ledger and catalog operations.

Services raise these; the API layer maps them to HTTP status
codes. A raised error always means the whole operation was
rolled back; nothing is partially applied.
"""


class LedgerError(Exception):
    """Base class for all back-office errors."""


class ValidationError(LedgerError, ValueError):
    """Command input is malformed or references something unusable."""


class NotFoundError(LedgerError, LookupError):
    """A referenced record does not exist."""


class ConflictError(LedgerError):
    """
    The write collided with existing data (duplicate bill number,
    unique constraint). The caller may retry the whole operation.
    """


class PersistenceError(LedgerError):
    """The underlying store rejected the transaction."""
