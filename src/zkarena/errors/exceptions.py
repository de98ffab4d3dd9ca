"""Exception hierarchy for zkarena.

Proof construction has exactly two failure modes: malformed input (rejected
before any constraint is evaluated) and an unsatisfiable constraint system.
Both are fatal to the proof attempt and are never retried here.
"""

import time
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories."""

    VALIDATION = "validation"
    INPUT_SHAPE = "input_shape"
    CONSTRAINT = "constraint"
    CRYPTOGRAPHIC = "cryptographic"
    CONFIGURATION = "configuration"
    RESOURCE = "resource"
    LEDGER = "ledger"
    SYSTEM = "system"


@dataclass
class ErrorContext:
    """Context information for an error."""

    timestamp: float = field(default_factory=time.time)
    component: Optional[str] = None
    operation: Optional[str] = None
    circuit_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary."""
        return {
            "timestamp": self.timestamp,
            "component": self.component,
            "operation": self.operation,
            "circuit_id": self.circuit_id,
            "metadata": self.metadata,
        }


class ZKArenaError(Exception):
    """Base exception for all zkarena errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context or ErrorContext()
        self.cause = cause
        self.metadata = metadata or {}
        self.timestamp = time.time()
        self.traceback = traceback.format_exc()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        parts = [f"{self.__class__.__name__}: {self.message}"]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.severity != ErrorSeverity.MEDIUM:
            parts.append(f"Severity: {self.severity.value}")

        if self.category != ErrorCategory.SYSTEM:
            parts.append(f"Category: {self.category.value}")

        return " | ".join(parts)


class ValidationError(ZKArenaError):
    """A value failed validation."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[Any] = None,
        **kwargs,
    ):
        kwargs.setdefault("category", ErrorCategory.VALIDATION)
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.expected = expected

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "field": self.field,
                "value": str(self.value) if self.value is not None else None,
                "expected": str(self.expected) if self.expected is not None else None,
            }
        )
        return data


class InputShapeError(ValidationError):
    """Wrong array length, missing input or out-of-range value.

    Raised before constraint synthesis begins.
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", "INPUT_SHAPE")
        super().__init__(message, category=ErrorCategory.INPUT_SHAPE, **kwargs)


class ConstraintViolationError(ZKArenaError):
    """The constraint system has no satisfying assignment for the inputs."""

    def __init__(
        self,
        message: str,
        annotation: Optional[str] = None,
        constraint_kind: Optional[str] = None,
        violations: int = 1,
        **kwargs,
    ):
        kwargs.setdefault("error_code", "UNSATISFIABLE")
        super().__init__(
            message,
            category=ErrorCategory.CONSTRAINT,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.annotation = annotation
        self.constraint_kind = constraint_kind
        self.violations = violations

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "annotation": self.annotation,
                "constraint_kind": self.constraint_kind,
                "violations": self.violations,
            }
        )
        return data


class CryptographicError(ZKArenaError):
    """Cryptographic error."""

    def __init__(self, message: str, algorithm: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CRYPTOGRAPHIC,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.algorithm = algorithm

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["algorithm"] = self.algorithm
        return data


class ConfigurationError(ZKArenaError):
    """Invalid configuration."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.config_key = config_key

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["config_key"] = self.config_key
        return data


class ResourceError(ZKArenaError):
    """A configured resource limit was exceeded."""

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        limit: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(message, category=ErrorCategory.RESOURCE, **kwargs)
        self.resource_type = resource_type
        self.limit = limit

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"resource_type": self.resource_type, "limit": self.limit})
        return data


class LedgerError(ZKArenaError):
    """A settlement operation was rejected by the ledger."""

    def __init__(self, message: str, note_hash: Optional[int] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.LEDGER, **kwargs)
        self.note_hash = note_hash

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["note_hash"] = hex(self.note_hash) if self.note_hash is not None else None
        return data


class DoubleSpendError(LedgerError):
    """A nullifier was presented twice."""

    def __init__(self, message: str, nullifier: Optional[int] = None, **kwargs):
        kwargs.setdefault("error_code", "NULLIFIER_USED")
        super().__init__(message, severity=ErrorSeverity.HIGH, **kwargs)
        self.nullifier = nullifier

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["nullifier"] = hex(self.nullifier) if self.nullifier is not None else None
        return data
