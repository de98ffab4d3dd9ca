"""
Unit tests for the zkarena exception hierarchy.
"""

import logging

logger = logging.getLogger(__name__)
import pytest

from zkarena.errors import (
    ConfigurationError,
    ConstraintViolationError,
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


class TestZKArenaError:
    """Test the base error."""

    def test_defaults(self):
        """Test default severity, category and context."""
        error = ZKArenaError("boom")
        assert error.message == "boom"
        assert error.severity == ErrorSeverity.MEDIUM
        assert error.category == ErrorCategory.SYSTEM
        assert isinstance(error.context, ErrorContext)

    def test_to_dict(self):
        """Test dictionary conversion."""
        context = ErrorContext(component="prover", circuit_id="card_draw")
        error = ZKArenaError("boom", error_code="E1", context=context)
        data = error.to_dict()
        assert data["type"] == "ZKArenaError"
        assert data["error_code"] == "E1"
        assert data["context"]["circuit_id"] == "card_draw"
        assert data["cause"] is None

    def test_str_includes_code(self):
        error = ZKArenaError("boom", error_code="E1", severity=ErrorSeverity.HIGH)
        text = str(error)
        assert "boom" in text
        assert "Code: E1" in text
        assert "Severity: high" in text


class TestSubclasses:
    """Test the specialised errors."""

    def test_input_shape_error(self):
        """Test that input shape errors are validation errors with their own code."""
        error = InputShapeError("bad length", field="deckCards", value=3, expected=52)
        assert isinstance(error, ValidationError)
        assert error.error_code == "INPUT_SHAPE"
        assert error.category == ErrorCategory.INPUT_SHAPE
        data = error.to_dict()
        assert data["field"] == "deckCards"
        assert data["value"] == "3"
        assert data["expected"] == "52"

    def test_constraint_violation_error(self):
        error = ConstraintViolationError(
            "unsatisfiable", annotation="transfer/ownership", constraint_kind="curve", violations=2
        )
        assert error.error_code == "UNSATISFIABLE"
        assert error.severity == ErrorSeverity.HIGH
        data = error.to_dict()
        assert data["annotation"] == "transfer/ownership"
        assert data["constraint_kind"] == "curve"
        assert data["violations"] == 2

    def test_configuration_error(self):
        error = ConfigurationError("bad", config_key="deck_size")
        assert error.category == ErrorCategory.CONFIGURATION
        assert error.to_dict()["config_key"] == "deck_size"

    def test_resource_error(self):
        error = ResourceError("too big", resource_type="constraints", limit=10)
        assert error.to_dict()["limit"] == 10

    def test_double_spend_is_ledger_error(self):
        """Test that double spends are ledger errors carrying the nullifier."""
        error = DoubleSpendError("Nullifier already used", nullifier=0xAB)
        assert isinstance(error, LedgerError)
        assert error.error_code == "NULLIFIER_USED"
        assert error.category == ErrorCategory.LEDGER
        assert error.to_dict()["nullifier"] == "0xab"

    def test_errors_are_raisable(self):
        with pytest.raises(ZKArenaError, match="spent"):
            raise LedgerError("Note does not exist or already spent")
