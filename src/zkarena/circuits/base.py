"""
Application circuit base class and registry.

A circuit declares its ordered public inputs and its private inputs; the base
class validates input shape, allocates the inputs in that order and hands the
signals to :meth:`ZKCircuit.synthesize`.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union

from ..config import DEFAULT_CONFIG, CircuitConfig
from ..crypto.field import is_canonical
from ..errors import InputShapeError, ValidationError, ZKArenaError
from .constraint_system import ConstraintSystem, Signal, Witness

logger = logging.getLogger(__name__)

InputValue = Union[int, List[int]]
Inputs = Mapping[str, Any]
Signals = Dict[str, Union[Signal, List[Signal]]]


def _to_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InputShapeError(f"Input {name} must be an integer", field=name, value=value)
    if isinstance(value, str):
        try:
            value = int(value, 0)
        except ValueError:
            raise InputShapeError(
                f"Input {name} is not a decimal or hex integer", field=name, value=value
            )
    if not isinstance(value, int) or not is_canonical(value):
        raise InputShapeError(
            f"Input {name} is not a field element",
            field=name,
            value=value,
            expected="integer in [0, p)",
        )
    return value


class ZKCircuit(ABC):
    """Abstract base class for application circuits."""

    circuit_id: str = ""
    PUBLIC_INPUTS: Tuple[str, ...] = ()
    PRIVATE_INPUTS: Tuple[str, ...] = ()

    def __init__(self, config: Optional[CircuitConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.config.validate()

    def array_inputs(self) -> Dict[str, int]:
        """Private inputs that are fixed-length arrays, with their lengths."""
        return {}

    @property
    def input_names(self) -> Tuple[str, ...]:
        return self.PUBLIC_INPUTS + self.PRIVATE_INPUTS

    def validate_inputs(self, inputs: Inputs) -> Dict[str, InputValue]:
        """Check names, array lengths and value ranges before synthesis."""
        arrays = self.array_inputs()
        expected = set(self.input_names)
        missing = sorted(expected - set(inputs))
        if missing:
            raise InputShapeError(
                f"Missing inputs for {self.circuit_id}: {', '.join(missing)}",
                field=missing[0],
            )
        unknown = sorted(set(inputs) - expected)
        if unknown:
            raise InputShapeError(
                f"Unknown inputs for {self.circuit_id}: {', '.join(unknown)}",
                field=unknown[0],
            )

        normalized: Dict[str, InputValue] = {}
        for name in self.input_names:
            value = inputs[name]
            if name in arrays:
                if not isinstance(value, (list, tuple)) or len(value) != arrays[name]:
                    raise InputShapeError(
                        f"Input {name} must be an array of length {arrays[name]}",
                        field=name,
                        value=len(value) if isinstance(value, (list, tuple)) else value,
                        expected=arrays[name],
                    )
                normalized[name] = [_to_int(f"{name}[{i}]", v) for i, v in enumerate(value)]
            else:
                normalized[name] = _to_int(name, value)
        self.check_input_bounds(normalized)
        return normalized

    def check_input_bounds(self, inputs: Dict[str, InputValue]) -> None:
        """Hook for circuit-specific index bounds checked before synthesis."""

    def allocate(self, cs: ConstraintSystem, inputs: Dict[str, InputValue]) -> Signals:
        signals: Signals = {}
        for name in self.PUBLIC_INPUTS:
            signals[name] = cs.public_input(name, inputs[name])
        for name in self.PRIVATE_INPUTS:
            value = inputs[name]
            if isinstance(value, list):
                signals[name] = cs.private_inputs(name, value)
            else:
                signals[name] = cs.private_input(name, value)
        return signals

    @abstractmethod
    def synthesize(self, cs: ConstraintSystem, signals: Signals) -> None:
        """Add this circuit's constraints over the allocated input signals."""

    def build(self, inputs: Inputs) -> ConstraintSystem:
        """Validate inputs and synthesize the constraint system with its assignment."""
        normalized = self.validate_inputs(inputs)
        cs = ConstraintSystem(self.circuit_id, self.config)
        signals = self.allocate(cs, normalized)
        with cs.namespace(self.circuit_id):
            self.synthesize(cs, signals)
        logger.debug(
            "Synthesized %s: %d constraints, %d variables",
            self.circuit_id,
            cs.num_constraints,
            cs.num_variables,
            extra={"circuit_id": self.circuit_id},
        )
        return cs

    def generate_witness(self, inputs: Inputs) -> Witness:
        """Build the circuit and return its witness; raises if unsatisfiable."""
        cs = self.build(inputs)
        cs.check()
        return cs.witness()

    def verify_witness(self, witness: Witness) -> bool:
        """Check a full assignment against this circuit's constraints."""
        inputs: Dict[str, Any] = dict(witness.public_values)
        for name, length in self.array_inputs().items():
            inputs[name] = [witness.private_values.get(f"{name}[{i}]") for i in range(length)]
        for name in self.PRIVATE_INPUTS:
            if name not in inputs:
                inputs[name] = witness.private_values.get(name)

        try:
            cs = self.build(inputs)
            cs.load_assignment(witness.assignment)
        except ZKArenaError as e:
            logger.debug(
                "Witness rejected for %s: %s", self.circuit_id, e, extra={"circuit_id": self.circuit_id}
            )
            return False
        loaded = cs.witness()
        if (
            loaded.public_values != witness.public_values
            or loaded.private_values != witness.private_values
        ):
            logger.debug(
                "Witness input values disagree with its assignment",
                extra={"circuit_id": self.circuit_id},
            )
            return False
        return cs.is_satisfied()

    def public_signals(self, inputs: Inputs) -> List[int]:
        """The ordered public vector for a set of inputs."""
        normalized = self.validate_inputs(inputs)
        return [normalized[name] for name in self.PUBLIC_INPUTS]

    def blank_inputs(self) -> Dict[str, InputValue]:
        """All-zero inputs of the right shape, used to size the circuit."""
        arrays = self.array_inputs()
        return {
            name: [0] * arrays[name] if name in arrays else 0 for name in self.input_names
        }

    def get_circuit_info(self) -> Dict[str, Any]:
        """Get information about the circuit."""
        cs = self.build(self.blank_inputs())
        info = cs.get_info()
        info.update(
            {
                "circuit_id": self.circuit_id,
                "public_inputs": list(self.PUBLIC_INPUTS),
                "private_inputs": list(self.PRIVATE_INPUTS),
                "array_inputs": self.array_inputs(),
            }
        )
        return info


class CircuitRegistry:
    """Maps circuit ids to circuit classes."""

    def __init__(self):
        self._circuits: Dict[str, Type[ZKCircuit]] = {}

    def register(self, circuit_class: Type[ZKCircuit]) -> Type[ZKCircuit]:
        """Register a circuit class; usable as a class decorator."""
        circuit_id = circuit_class.circuit_id
        if not circuit_id:
            raise ValidationError("circuit class must define circuit_id")
        if circuit_id in self._circuits and self._circuits[circuit_id] is not circuit_class:
            raise ValidationError(f"circuit {circuit_id} already registered", field="circuit_id")
        self._circuits[circuit_id] = circuit_class
        return circuit_class

    def get(self, circuit_id: str) -> Type[ZKCircuit]:
        try:
            return self._circuits[circuit_id]
        except KeyError:
            raise ValidationError(
                f"Unknown circuit: {circuit_id}", field="circuit_id", value=circuit_id
            )

    def create(self, circuit_id: str, config: Optional[CircuitConfig] = None) -> ZKCircuit:
        return self.get(circuit_id)(config)

    def list_circuits(self) -> List[str]:
        return sorted(self._circuits)

    def __contains__(self, circuit_id: str) -> bool:
        return circuit_id in self._circuits


registry = CircuitRegistry()
