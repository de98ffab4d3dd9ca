"""
Unit tests for BN254 scalar field helpers.
"""

from zkarena.crypto.field import (
    FIELD_MODULUS,
    FieldElement,
    field_inverse,
    is_canonical,
    to_int,
)


class TestField:
    """Test field helpers."""

    def test_modulus(self):
        assert FIELD_MODULUS == (
            21888242871839275222246405745257275088548364400416034343698204186575808495617
        )

    def test_field_element_arithmetic(self):
        """Test that arithmetic wraps around the modulus."""
        x = FieldElement(FIELD_MODULUS - 1)
        assert (x + 2).n == 1
        assert (FieldElement(3) * FieldElement(5)).n == 15

    def test_to_int(self):
        assert to_int(FieldElement(7)) == 7
        assert to_int(-1) == FIELD_MODULUS - 1
        assert to_int(FIELD_MODULUS + 3) == 3

    def test_field_inverse(self):
        """Test inverses, including the zero convention."""
        assert field_inverse(0) == 0
        assert field_inverse(2) * 2 % FIELD_MODULUS == 1
        assert field_inverse(FieldElement(12345)) * 12345 % FIELD_MODULUS == 1

    def test_is_canonical(self):
        assert is_canonical(0)
        assert is_canonical(FIELD_MODULUS - 1)
        assert not is_canonical(FIELD_MODULUS)
        assert not is_canonical(-1)
        assert not is_canonical(True)
        assert not is_canonical("5")
