"""zkarena error handling.

Exception hierarchy shared by the circuit layer, the proving facade and the
settlement ledger.
"""

from .exceptions import (
    ConfigurationError,
    ConstraintViolationError,
    CryptographicError,
    DoubleSpendError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InputShapeError,
    LedgerError,
    ResourceError,
    ValidationError,
    ZKArenaError,
)

__all__ = [
    "ZKArenaError",
    "ValidationError",
    "InputShapeError",
    "ConstraintViolationError",
    "CryptographicError",
    "ConfigurationError",
    "ResourceError",
    "LedgerError",
    "DoubleSpendError",
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorContext",
]
