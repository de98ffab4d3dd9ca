"""Merkle inclusion gadgets over Poseidon(left, right)."""

from typing import Sequence

from .comparators import mux_pair, num2bits
from .constraint_system import ConstraintType, Signal, SignalLike, system_of
from .poseidon import poseidon


def merkle_root(leaf: SignalLike, path_elements: Sequence[SignalLike], path_index: Signal) -> Signal:
    """Recompute the root for ``leaf`` at ``path_index``.

    ``path_index`` is decomposed into ``len(path_elements)`` bits, so it must be
    below ``2^depth``. Bit ``i`` set puts the running node on the right at
    level ``i``.
    """
    cs = system_of(leaf, path_index)
    with cs.namespace("merkle"):
        bits = num2bits(path_index, len(path_elements))
        current = cs.lift(leaf)
        for level, (sibling, bit) in enumerate(zip(path_elements, bits)):
            with cs.namespace(f"level{level}"):
                left, right = mux_pair(current, sibling, bit)
                current = poseidon([left, right])
    return current


def merkle_verify(
    leaf: SignalLike,
    root: SignalLike,
    path_elements: Sequence[SignalLike],
    path_index: Signal,
) -> None:
    """Constrain the recomputed root to equal ``root``."""
    cs = system_of(leaf, root, path_index)
    computed = merkle_root(leaf, path_elements, path_index)
    cs.assert_equal(computed, root, "merkle_root", ConstraintType.HASH)
