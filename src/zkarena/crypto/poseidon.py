"""
Poseidon hash over the BN254 scalar field.

Width ``t = n + 1`` for ``n`` inputs, 8 full rounds, x^5 S-box, capacity element
first. Round constants and the Cauchy MDS matrix are generated per width with
the Grain LFSR procedure from the Poseidon paper and cached for the life of the
process.
"""

import logging

logger = logging.getLogger(__name__)
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Sequence, Tuple

from ..errors import InputShapeError, ValidationError
from .field import FIELD_MODULUS, FieldElement, is_canonical

FULL_ROUNDS = 8
PARTIAL_ROUNDS = [56, 57, 56, 60, 60, 63, 64, 63, 60, 66, 60, 65, 70, 60, 64, 68]
MAX_INPUTS = len(PARTIAL_ROUNDS)
FIELD_SIZE_BITS = 254

_LFSR_BITS = 80
_LFSR_MASK = (1 << _LFSR_BITS) - 1


@dataclass(frozen=True)
class PoseidonParameters:
    """Round structure and constants for one state width."""

    width: int
    full_rounds: int
    partial_rounds: int
    round_constants: Tuple[int, ...]
    mds: Tuple[Tuple[int, ...], ...]

    @property
    def total_rounds(self) -> int:
        return self.full_rounds + self.partial_rounds

    def is_full_round(self, r: int) -> bool:
        """True if round ``r`` applies the S-box to every state element."""
        half = self.full_rounds // 2
        return r < half or r >= half + self.partial_rounds


class GrainLFSR:
    """80-bit Grain LFSR used to derive Poseidon parameters.

    The register is an int whose bit ``k`` is position ``k`` of the sequence.
    """

    def __init__(self, width: int, full_rounds: int, partial_rounds: int):
        init_bits = (
            format(1, "02b")  # prime field
            + format(0, "04b")  # x^alpha S-box
            + format(FIELD_SIZE_BITS, "012b")
            + format(width, "012b")
            + format(full_rounds, "010b")
            + format(partial_rounds, "010b")
            + "1" * 30
        )
        self._state = 0
        for k, bit in enumerate(init_bits):
            if bit == "1":
                self._state |= 1 << k

        for _ in range(160):
            self._clock()

    def _clock(self) -> int:
        s = self._state
        new_bit = ((s >> 62) ^ (s >> 51) ^ (s >> 38) ^ (s >> 23) ^ (s >> 13) ^ s) & 1
        self._state = ((s >> 1) | (new_bit << (_LFSR_BITS - 1))) & _LFSR_MASK
        return new_bit

    def next_bit(self) -> int:
        """Self-shrinking output: emit the second bit of a pair whose first bit is 1."""
        while True:
            first = self._clock()
            second = self._clock()
            if first == 1:
                return second

    def next_int(self, bits: int = FIELD_SIZE_BITS) -> int:
        """Read ``bits`` output bits as an integer, most significant first."""
        value = 0
        for _ in range(bits):
            value = (value << 1) | self.next_bit()
        return value

    def next_field_element(self) -> int:
        """Rejection-sample a value below the field modulus."""
        while True:
            value = self.next_int()
            if value < FIELD_MODULUS:
                return value


def _cauchy_mds(lfsr: GrainLFSR, width: int) -> Tuple[Tuple[int, ...], ...]:
    while True:
        values = [lfsr.next_int() % FIELD_MODULUS for _ in range(2 * width)]
        if len(set(values)) == len(values):
            break

    xs, ys = values[:width], values[width:]
    matrix = []
    for i in range(width):
        row = []
        for j in range(width):
            denominator = FieldElement(xs[i]) + FieldElement(ys[j])
            row.append((FieldElement.one() / denominator).n)
        matrix.append(tuple(row))
    return tuple(matrix)


@lru_cache(maxsize=None)
def get_parameters(width: int) -> PoseidonParameters:
    """Return (and cache) the Poseidon parameters for state width ``width``."""
    if not 2 <= width <= MAX_INPUTS + 1:
        raise InputShapeError(
            f"Poseidon width must be in [2, {MAX_INPUTS + 1}]",
            field="width",
            value=width,
        )

    partial_rounds = PARTIAL_ROUNDS[width - 2]
    lfsr = GrainLFSR(width, FULL_ROUNDS, partial_rounds)
    count = (FULL_ROUNDS + partial_rounds) * width
    constants = tuple(lfsr.next_field_element() for _ in range(count))
    mds = _cauchy_mds(lfsr, width)

    logger.debug(
        "Generated Poseidon parameters: width=%d partial_rounds=%d constants=%d",
        width,
        partial_rounds,
        count,
    )
    return PoseidonParameters(
        width=width,
        full_rounds=FULL_ROUNDS,
        partial_rounds=partial_rounds,
        round_constants=constants,
        mds=mds,
    )


def _sbox(x: int) -> int:
    return pow(x, 5, FIELD_MODULUS)


def poseidon_permutation(state: Sequence[int]) -> List[int]:
    """Apply the Poseidon permutation to a full state vector."""
    params = get_parameters(len(state))
    t = params.width
    p = FIELD_MODULUS
    constants = params.round_constants
    mds = params.mds
    state = list(state)

    for r in range(params.total_rounds):
        state = [(s + constants[r * t + i]) % p for i, s in enumerate(state)]
        if params.is_full_round(r):
            state = [_sbox(s) for s in state]
        else:
            state[0] = _sbox(state[0])
        state = [sum(m * s for m, s in zip(row, state)) % p for row in mds]

    return state


def poseidon_hash(inputs: Sequence[int]) -> int:
    """Hash 1 to 16 field elements to a single field element.

    Args:
        inputs: Integers in ``[0, p)``.

    Returns:
        The first element of the permuted state.
    """
    if not 1 <= len(inputs) <= MAX_INPUTS:
        raise InputShapeError(
            f"Poseidon takes 1 to {MAX_INPUTS} inputs, got {len(inputs)}",
            field="inputs",
            value=len(inputs),
        )

    for value in inputs:
        if not is_canonical(value):
            raise ValidationError(
                "Poseidon input is not a canonical field element",
                field="inputs",
                value=value,
                expected="integer in [0, p)",
            )

    return poseidon_permutation([0] + list(inputs))[0]
