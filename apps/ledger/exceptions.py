"""
Domain exceptions for ledger app.

These exceptions represent business rule violations and store failures.
Services and the coordinator raise them; views catch them and convert
them to HTTP responses.

Exception Hierarchy:
    LedgerServiceError (base)
    ├── ValidationFailedError
    │   ├── InvalidAmountError
    │   └── InvalidInstallmentError
    ├── TransactionNotFoundError
    ├── PropertyNotFoundError
    └── PersistenceError
"""


class LedgerServiceError(Exception):
    """Base exception for all ledger service errors."""
    pass


class ValidationFailedError(LedgerServiceError):
    """Raised when an entry is missing its description or amount."""
    pass


class InvalidAmountError(ValidationFailedError):
    """Raised when an amount is not a finite positive number."""
    pass


class InvalidInstallmentError(ValidationFailedError):
    """Raised when an installment count is outside the accepted range."""
    pass


class TransactionNotFoundError(LedgerServiceError):
    """Raised when a transaction id does not exist in the store."""
    pass


class PropertyNotFoundError(LedgerServiceError):
    """Raised when a property id does not exist in the store."""
    pass


class PersistenceError(LedgerServiceError):
    """
    Raised when the underlying store rejects or fails an operation.

    The original database error is chained as ``__cause__``. Operations are
    never retried automatically.
    """
    pass
