"""
Rank-1 constraint systems and witnesses.

Every constraint has the form ``A * B = C`` where ``A``, ``B`` and ``C`` are
linear combinations over allocated variables and the constant wire ``one``.
Witness values are computed eagerly while constraints are added, so a circuit
is synthesized and assigned in a single pass; :meth:`ConstraintSystem.check`
then reports whether the assignment satisfies every constraint.
"""

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..config import DEFAULT_CONFIG, CircuitConfig
from ..crypto.field import FIELD_MODULUS, is_canonical
from ..errors import ConstraintViolationError, InputShapeError, ResourceError, ValidationError

logger = logging.getLogger(__name__)

P = FIELD_MODULUS
ONE = 0

Terms = Dict[int, int]


class ConstraintType(Enum):
    """Types of constraints in a circuit."""

    EQUALITY = "equality"
    BOOLEAN = "boolean"
    MULTIPLICATION = "multiplication"
    RANGE = "range"
    HASH = "hash"
    SELECTOR = "selector"
    CURVE = "curve"
    CUSTOM = "custom"


class Visibility(Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    INTERMEDIATE = "intermediate"


@dataclass
class Variable:
    index: int
    name: str
    visibility: Visibility


@dataclass
class Constraint:
    """A single ``a * b = c`` constraint."""

    constraint_id: int
    constraint_type: ConstraintType
    a: Terms
    b: Terms
    c: Terms
    annotation: str = ""

    def __post_init__(self):
        """Validate constraint after initialization."""
        if self.constraint_id < 0:
            raise ValueError("constraint_id cannot be negative")
        if not self.annotation:
            raise ValueError("constraint must carry an annotation")

    def is_satisfied(self, values: Sequence[int]) -> bool:
        a = _evaluate(self.a, values)
        b = _evaluate(self.b, values)
        return (a * b - _evaluate(self.c, values)) % P == 0

    def variables(self) -> List[int]:
        return sorted(set(self.a) | set(self.b) | set(self.c))


def _evaluate(terms: Terms, values: Sequence[int]) -> int:
    return sum(coeff * values[index] for index, coeff in terms.items()) % P


def _merge(left: Terms, right: Terms, scale: int = 1) -> Terms:
    merged = dict(left)
    for index, coeff in right.items():
        total = (merged.get(index, 0) + scale * coeff) % P
        if total:
            merged[index] = total
        else:
            merged.pop(index, None)
    return merged


class Signal:
    """A linear combination of variables in one constraint system.

    Signals support ``+``, ``-`` and multiplication. Multiplying two
    non-constant signals allocates a product variable and one constraint;
    everything else stays linear and costs nothing.
    """

    __slots__ = ("cs", "terms", "_value")

    def __init__(self, cs: "ConstraintSystem", terms: Terms, value: int):
        self.cs = cs
        self.terms = terms
        self._value = value % P

    @property
    def value(self) -> int:
        return self._value

    @property
    def is_constant(self) -> bool:
        return all(index == ONE for index in self.terms)

    def _coerce(self, other: Union["Signal", int]) -> "Signal":
        if isinstance(other, Signal):
            if other.cs is not self.cs:
                raise ValidationError("signals belong to different constraint systems")
            return other
        if isinstance(other, int):
            return self.cs.constant(other)
        return NotImplemented

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return Signal(self.cs, _merge(self.terms, other.terms), self._value + other._value)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return Signal(
            self.cs, _merge(self.terms, other.terms, -1), self._value - other._value
        )

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return other - self

    def __neg__(self):
        return self.scale(-1)

    def __mul__(self, other):
        if isinstance(other, int):
            return self.scale(other)
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        if other.is_constant:
            return self.scale(other._value)
        if self.is_constant:
            return other.scale(self._value)
        return self.cs.mul(self, other)

    __rmul__ = __mul__

    def scale(self, factor: int) -> "Signal":
        factor %= P
        if factor == 0:
            return Signal(self.cs, {}, 0)
        terms = {index: coeff * factor % P for index, coeff in self.terms.items()}
        return Signal(self.cs, terms, self._value * factor)

    def __repr__(self) -> str:
        return f"Signal(value={self._value}, terms={len(self.terms)})"


SignalLike = Union[Signal, int]


@dataclass
class Witness:
    """A full assignment for a constraint system."""

    assignment: List[int] = field(default_factory=list)
    public_values: Dict[str, int] = field(default_factory=dict)
    private_values: Dict[str, int] = field(default_factory=dict)
    public_order: List[str] = field(default_factory=list)

    def get_value(self, name: str) -> Optional[int]:
        """Get the value of a named input."""
        if name in self.public_values:
            return self.public_values[name]
        return self.private_values.get(name)

    def public_signals(self) -> List[int]:
        """Public inputs in declaration order."""
        return [self.public_values[name] for name in self.public_order]

    def to_bytes(self) -> bytes:
        """Serialize witness to bytes."""
        data = {
            "assignment": [hex(v) for v in self.assignment],
            "public_values": {k: hex(v) for k, v in self.public_values.items()},
            "private_values": {k: hex(v) for k, v in self.private_values.items()},
            "public_order": self.public_order,
        }
        return json.dumps(data, sort_keys=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "Witness":
        """Deserialize witness from bytes."""
        parsed = json.loads(data.decode("utf-8"))
        return cls(
            assignment=[int(v, 16) for v in parsed["assignment"]],
            public_values={k: int(v, 16) for k, v in parsed["public_values"].items()},
            private_values={k: int(v, 16) for k, v in parsed["private_values"].items()},
            public_order=list(parsed["public_order"]),
        )


class ConstraintSystem:
    """A system of R1CS constraints together with its assignment."""

    def __init__(
        self,
        name: str = "circuit",
        config: Optional[CircuitConfig] = None,
        max_constraints: Optional[int] = None,
    ):
        self.name = name
        self.config = config or DEFAULT_CONFIG
        self.max_constraints = max_constraints or self.config.max_constraints
        self.variables: List[Variable] = [Variable(ONE, "one", Visibility.PUBLIC)]
        self.values: List[int] = [1]
        self.constraints: List[Constraint] = []
        self.public_indices: List[int] = []
        self._inputs: Dict[str, int] = {}
        self._scope: List[str] = []

    # Allocation

    def _qualify(self, name: str) -> str:
        return "/".join(self._scope + [name]) if self._scope else name

    def _allocate(self, name: str, value: int, visibility: Visibility) -> Signal:
        index = len(self.values)
        self.variables.append(Variable(index, name, visibility))
        self.values.append(value % P)
        return Signal(self, {index: 1}, value)

    def _input(self, name: str, value: int, visibility: Visibility) -> Signal:
        if not is_canonical(value):
            raise InputShapeError(
                f"Input {name} is not a field element",
                field=name,
                value=value,
                expected="integer in [0, p)",
            )
        if name in self._inputs:
            raise InputShapeError(f"Input {name} already declared", field=name)

        signal = self._allocate(name, value, visibility)
        self._inputs[name] = next(iter(signal.terms))
        if visibility is Visibility.PUBLIC:
            self.public_indices.append(self._inputs[name])
        return signal

    def public_input(self, name: str, value: int) -> Signal:
        """Declare a public input."""
        return self._input(name, value, Visibility.PUBLIC)

    def private_input(self, name: str, value: int) -> Signal:
        """Declare a private input."""
        return self._input(name, value, Visibility.PRIVATE)

    def private_inputs(self, name: str, values: Sequence[int]) -> List[Signal]:
        """Declare a private input array as ``name[0]``, ``name[1]``, ..."""
        return [self.private_input(f"{name}[{i}]", v) for i, v in enumerate(values)]

    def alloc(self, name: str, value: int) -> Signal:
        """Allocate an intermediate variable whose value is supplied by a hint."""
        return self._allocate(self._qualify(name), value, Visibility.INTERMEDIATE)

    def constant(self, value: int) -> Signal:
        value %= P
        return Signal(self, {ONE: value} if value else {}, value)

    def lift(self, value: SignalLike) -> Signal:
        if isinstance(value, Signal):
            return value
        return self.constant(value)

    def weighted_sum(self, signals: Iterable[SignalLike], coeffs: Iterable[int]) -> Signal:
        """``sum(c_i * s_i)`` built as a single linear combination."""
        terms: Terms = {}
        value = 0
        for signal, coeff in zip(signals, coeffs):
            signal = self.lift(signal)
            coeff %= P
            for index, c in signal.terms.items():
                terms[index] = (terms.get(index, 0) + c * coeff) % P
            value += signal.value * coeff
        return Signal(self, {k: v for k, v in terms.items() if v}, value)

    def sum(self, signals: Iterable[SignalLike]) -> Signal:
        signals = list(signals)
        return self.weighted_sum(signals, [1] * len(signals))

    # Constraints

    def enforce(
        self,
        a: SignalLike,
        b: SignalLike,
        c: SignalLike,
        kind: ConstraintType = ConstraintType.MULTIPLICATION,
        annotation: str = "constraint",
    ) -> None:
        """Add the constraint ``a * b = c``."""
        if len(self.constraints) >= self.max_constraints:
            raise ResourceError(
                f"Circuit {self.name} exceeds {self.max_constraints} constraints",
                resource_type="constraints",
                limit=self.max_constraints,
            )
        a, b, c = self.lift(a), self.lift(b), self.lift(c)
        self.constraints.append(
            Constraint(
                constraint_id=len(self.constraints),
                constraint_type=kind,
                a=a.terms,
                b=b.terms,
                c=c.terms,
                annotation=self._qualify(annotation),
            )
        )

    def mul(self, a: Signal, b: Signal, name: str = "product") -> Signal:
        """Allocate ``a * b`` and constrain it."""
        product = self.alloc(name, a.value * b.value)
        self.enforce(a, b, product, ConstraintType.MULTIPLICATION, name)
        return product

    def assert_equal(
        self,
        a: SignalLike,
        b: SignalLike,
        annotation: str = "equal",
        kind: ConstraintType = ConstraintType.EQUALITY,
    ) -> None:
        self.enforce(self.lift(a) - b, self.constant(1), self.constant(0), kind, annotation)

    def assert_zero(self, x: SignalLike, annotation: str = "zero") -> None:
        self.assert_equal(x, 0, annotation)

    def assert_bool(self, x: Signal, annotation: str = "boolean") -> None:
        self.enforce(x, x - 1, self.constant(0), ConstraintType.BOOLEAN, annotation)

    @contextmanager
    def namespace(self, name: str) -> Iterator[None]:
        """Prefix annotations of constraints added inside the block."""
        self._scope.append(name)
        try:
            yield
        finally:
            self._scope.pop()

    # Evaluation

    def load_assignment(self, assignment: Sequence[int]) -> None:
        """Replace the assignment, e.g. with one received from elsewhere."""
        if len(assignment) != len(self.values):
            raise InputShapeError(
                "Assignment length does not match the constraint system",
                field="assignment",
                value=len(assignment),
                expected=len(self.values),
            )
        if assignment[ONE] != 1:
            raise InputShapeError("Assignment must bind the constant wire to 1")
        self.values = [v % P for v in assignment]

    def unsatisfied(self) -> List[Constraint]:
        return [c for c in self.constraints if not c.is_satisfied(self.values)]

    def is_satisfied(self) -> bool:
        return all(c.is_satisfied(self.values) for c in self.constraints)

    def check(self) -> None:
        """Raise ConstraintViolationError unless every constraint holds."""
        failing = self.unsatisfied()
        if failing:
            first = failing[0]
            logger.debug(
                "Circuit %s unsatisfied: %d failing, first=%s",
                self.name,
                len(failing),
                first.annotation,
            )
            raise ConstraintViolationError(
                f"Circuit {self.name} is unsatisfiable at {first.annotation}",
                annotation=first.annotation,
                constraint_kind=first.constraint_type.value,
                violations=len(failing),
            )

    def public_signals(self) -> List[int]:
        return [self.values[i] for i in self.public_indices]

    def public_names(self) -> List[str]:
        return [self.variables[i].name for i in self.public_indices]

    def witness(self) -> Witness:
        """Snapshot the current assignment."""
        public_values = {}
        private_values = {}
        for name, index in self._inputs.items():
            if self.variables[index].visibility is Visibility.PUBLIC:
                public_values[name] = self.values[index]
            else:
                private_values[name] = self.values[index]
        return Witness(
            assignment=list(self.values),
            public_values=public_values,
            private_values=private_values,
            public_order=self.public_names(),
        )

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    @property
    def num_variables(self) -> int:
        return len(self.variables)

    def constraint_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for constraint in self.constraints:
            key = constraint.constraint_type.value
            counts[key] = counts.get(key, 0) + 1
        return counts

    def get_info(self) -> Dict[str, Any]:
        """Get information about the constraint system."""
        return {
            "name": self.name,
            "constraint_count": self.num_constraints,
            "variable_count": self.num_variables,
            "public_inputs": self.public_names(),
            "private_inputs": [
                name
                for name, index in self._inputs.items()
                if self.variables[index].visibility is Visibility.PRIVATE
            ],
            "constraint_types": self.constraint_counts(),
        }


def system_of(*values: Any) -> ConstraintSystem:
    """Return the constraint system the given signals belong to."""
    for value in values:
        if isinstance(value, Signal):
            return value.cs
        if isinstance(value, (list, tuple)):
            for item in value:
                if isinstance(item, Signal):
                    return item.cs
    raise ValidationError("at least one argument must be a Signal")
