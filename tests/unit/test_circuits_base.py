"""
Unit tests for the circuit base class, input validation and registry.
"""

import logging

logger = logging.getLogger(__name__)
import pytest

from zkarena.circuits import (
    CardDrawCircuit,
    LootBoxCircuit,
    PrivateTransferCircuit,
    ZKCircuit,
    registry,
)
from zkarena.circuits.base import CircuitRegistry
from zkarena.config import CircuitConfig
from zkarena.crypto.field import FIELD_MODULUS
from zkarena.errors import (
    ConfigurationError,
    ConstraintViolationError,
    InputShapeError,
    ValidationError,
)
from zkarena.notes import setup_transfer

COLLECTION = 0xC011EC7


@pytest.fixture(scope="module")
def transfer(alice, bob):
    return setup_transfer(1, COLLECTION, alice, bob)


class TestRegistry:
    """Test the circuit registry."""

    def test_builtin_circuits(self):
        assert registry.list_circuits() == [
            "card_draw",
            "gaming_item_trade",
            "loot_box_open",
            "private_nft_transfer",
        ]
        assert "loot_box_open" in registry

    def test_unknown_circuit(self):
        with pytest.raises(ValidationError):
            registry.get("poker")

    def test_create(self):
        circuit = registry.create("card_draw", CircuitConfig(deck_size=8))
        assert isinstance(circuit, CardDrawCircuit)
        assert circuit.array_inputs() == {"deckCards": 8}

    def test_register_requires_id(self):
        class Nameless(ZKCircuit):
            def synthesize(self, cs, signals):
                pass

        with pytest.raises(ValidationError):
            CircuitRegistry().register(Nameless)

    def test_register_conflict(self):
        local = CircuitRegistry()
        local.register(PrivateTransferCircuit)
        local.register(PrivateTransferCircuit)

        class Impostor(PrivateTransferCircuit):
            pass

        with pytest.raises(ValidationError):
            local.register(Impostor)

    def test_invalid_config(self):
        with pytest.raises(ConfigurationError):
            PrivateTransferCircuit(CircuitConfig(deck_size=1))


class TestInputValidation:
    """Test input shape checks that run before synthesis."""

    def test_missing_input(self, transfer):
        inputs = dict(transfer.circuit_inputs)
        del inputs["oldSalt"]
        with pytest.raises(InputShapeError) as exc_info:
            PrivateTransferCircuit().validate_inputs(inputs)
        assert exc_info.value.field == "oldSalt"

    def test_unknown_input(self, transfer):
        inputs = dict(transfer.circuit_inputs, extra=1)
        with pytest.raises(InputShapeError) as exc_info:
            PrivateTransferCircuit().validate_inputs(inputs)
        assert exc_info.value.field == "extra"

    @pytest.mark.parametrize("bad", [FIELD_MODULUS, -1, True, 1.5, "zz", None])
    def test_bad_value(self, transfer, bad):
        inputs = dict(transfer.circuit_inputs, nftId=bad)
        with pytest.raises(InputShapeError):
            PrivateTransferCircuit().validate_inputs(inputs)

    def test_string_values(self, transfer):
        """Test that decimal and hex strings are accepted."""
        inputs = dict(transfer.circuit_inputs, nftId="0x1", collectionAddress=str(COLLECTION))
        normalized = PrivateTransferCircuit().validate_inputs(inputs)
        assert normalized["nftId"] == 1
        assert normalized["collectionAddress"] == COLLECTION

    def test_array_length(self):
        circuit = LootBoxCircuit()
        inputs = circuit.blank_inputs()
        inputs["rarityThresholds"] = [100, 500, 10000]
        with pytest.raises(InputShapeError) as exc_info:
            circuit.validate_inputs(inputs)
        assert exc_info.value.field == "rarityThresholds"

    def test_array_must_be_sequence(self):
        circuit = LootBoxCircuit()
        inputs = dict(circuit.blank_inputs(), rarityThresholds=10000)
        with pytest.raises(InputShapeError):
            circuit.validate_inputs(inputs)

    def test_array_element(self):
        circuit = LootBoxCircuit()
        inputs = dict(circuit.blank_inputs(), rarityThresholds=[1, 2, 3, FIELD_MODULUS])
        with pytest.raises(InputShapeError) as exc_info:
            circuit.validate_inputs(inputs)
        assert exc_info.value.field == "rarityThresholds[3]"

    def test_draw_index_bound(self):
        circuit = CardDrawCircuit()
        inputs = dict(circuit.blank_inputs(), drawIndex=52)
        with pytest.raises(InputShapeError) as exc_info:
            circuit.validate_inputs(inputs)
        assert exc_info.value.field == "drawIndex"


class TestWitness:
    """Test witness generation on the transfer circuit."""

    def test_public_signals(self, transfer):
        circuit = PrivateTransferCircuit()
        inputs = transfer.circuit_inputs
        assert circuit.public_signals(inputs) == [
            inputs["oldNftHash"],
            inputs["newNftHash"],
            inputs["nftId"],
            inputs["collectionAddress"],
            inputs["nullifier"],
        ]

    def test_generate_and_verify(self, transfer):
        circuit = PrivateTransferCircuit()
        witness = circuit.generate_witness(transfer.circuit_inputs)
        assert witness.public_signals() == circuit.public_signals(transfer.circuit_inputs)
        assert witness.public_order == list(PrivateTransferCircuit.PUBLIC_INPUTS)
        assert circuit.verify_witness(witness)

    def test_unsatisfiable(self, transfer):
        inputs = dict(transfer.circuit_inputs, nullifier=transfer.nullifier + 1)
        with pytest.raises(ConstraintViolationError) as exc_info:
            PrivateTransferCircuit().generate_witness(inputs)
        assert exc_info.value.annotation == "private_nft_transfer/nullifier/nullifier"

    def test_layout_is_value_independent(self, transfer):
        circuit = PrivateTransferCircuit()
        honest = circuit.build(transfer.circuit_inputs)
        blank = circuit.build(circuit.blank_inputs())
        assert honest.num_constraints == blank.num_constraints
        assert honest.num_variables == blank.num_variables

    def test_circuit_info(self):
        info = PrivateTransferCircuit().get_circuit_info()
        assert info["circuit_id"] == "private_nft_transfer"
        assert info["public_inputs"][-1] == "nullifier"
        assert info["constraint_count"] > 0
        assert info["array_inputs"] == {}
