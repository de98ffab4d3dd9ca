"""
Verifiable Fisher-Yates shuffle.

Replays the standard in-place shuffle of ``[0, n)`` inside the circuit and
constrains the result to equal the claimed deck. For ``step = 0 .. n-2`` and
``i = n-1-step``::

    r = Poseidon(seed, step)
    j = (low RANDOM_BITS bits of r) mod (i + 1)
    swap(deck[i], deck[j])

``i`` is fixed while building the circuit, so ``deck[i]`` is read and written
directly; ``j`` is a witness value, so ``deck[j]`` goes through a selector.
Each step costs O(n) constraints and the whole shuffle O(n^2).
"""

import logging
from typing import List, Sequence

from ..config import DEFAULT_CONFIG
from ..errors import InputShapeError
from .comparators import bits2num, checked_div_mod, num2bits_strict
from .constraint_system import ConstraintType, Signal, SignalLike, system_of
from .poseidon import poseidon
from .selectors import select_with, selector_bits, write_at_index

logger = logging.getLogger(__name__)


def extract_random_bits(value: Signal, bits: int = DEFAULT_CONFIG.random_bits) -> Signal:
    """Low ``bits`` bits of ``value``, read from its strict decomposition."""
    return bits2num(num2bits_strict(value)[:bits])


def shuffle_deck(seed: Signal, n: int, random_bits: int = DEFAULT_CONFIG.random_bits) -> List[Signal]:
    """Return the deck produced by shuffling ``[0, n)`` with ``seed``."""
    if n < 2:
        raise InputShapeError("deck must hold at least two cards", field="n", value=n)
    if n > 1 << random_bits:
        raise InputShapeError(
            f"deck size must not exceed 2^{random_bits}", field="n", value=n
        )

    cs = system_of(seed)
    deck: List[Signal] = [cs.constant(k) for k in range(n)]
    with cs.namespace("shuffle"):
        for step in range(n - 1):
            i = n - 1 - step
            with cs.namespace(f"step{step}"):
                r = poseidon([seed, step])
                extracted = extract_random_bits(r, random_bits)
                _, j = checked_div_mod(
                    extracted, i + 1, random_bits, (i + 1).bit_length()
                )
                flags = selector_bits(j, n)
                value_at_j = select_with(deck, flags)
                value_at_i = deck[i]
                deck = write_at_index(deck, flags, value_at_i, skip=i)
                deck[i] = value_at_j

    logger.debug("Synthesized %d-card shuffle, constraints so far: %d", n, cs.num_constraints)
    return deck


def verify_shuffle(seed: Signal, verify_deck: Sequence[SignalLike], random_bits: int = DEFAULT_CONFIG.random_bits) -> None:
    """Constrain ``verify_deck`` to be the shuffle of ``[0, n)`` under ``seed``."""
    cs = system_of(seed)
    shuffled = shuffle_deck(seed, len(verify_deck), random_bits)
    for k, (expected, claimed) in enumerate(zip(shuffled, verify_deck)):
        cs.assert_equal(expected, claimed, f"shuffle/deck[{k}]", ConstraintType.EQUALITY)
