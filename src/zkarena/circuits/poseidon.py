"""Poseidon hash gadget, matching :func:`zkarena.crypto.poseidon.poseidon_hash`."""

from typing import Sequence

from ..crypto.poseidon import MAX_INPUTS, get_parameters
from ..errors import InputShapeError
from .constraint_system import ConstraintType, Signal, SignalLike, system_of


def _sbox(x: Signal) -> Signal:
    x2 = x * x
    x4 = x2 * x2
    return x4 * x


def poseidon(inputs: Sequence[SignalLike]) -> Signal:
    """Hash 1 to 16 signals; costs three constraints per S-box."""
    if not 1 <= len(inputs) <= MAX_INPUTS:
        raise InputShapeError(
            f"Poseidon takes 1 to {MAX_INPUTS} inputs, got {len(inputs)}",
            field="inputs",
            value=len(inputs),
        )
    cs = system_of(inputs)
    params = get_parameters(len(inputs) + 1)
    t = params.width
    constants = params.round_constants

    with cs.namespace(f"poseidon{len(inputs)}"):
        state = [cs.constant(0)] + [cs.lift(x) for x in inputs]
        for r in range(params.total_rounds):
            state = [s + constants[r * t + i] for i, s in enumerate(state)]
            if params.is_full_round(r):
                state = [_sbox(s) for s in state]
            else:
                state[0] = _sbox(state[0])
            state = [cs.weighted_sum(state, row) for row in params.mds]

        out = cs.alloc("out", state[0].value)
        cs.assert_equal(out, state[0], "out", ConstraintType.HASH)
    return out
