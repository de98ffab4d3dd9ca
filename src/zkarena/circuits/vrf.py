"""
Poseidon VRF and rarity tiers.

``vrf(sk, seed) = Poseidon(sk, seed)``. Its low RANDOM_BITS bits are reduced
into ``[0, RARITY_SCALE)`` with one conditional subtraction, which is exact
only because ``2^RANDOM_BITS < 2 * RARITY_SCALE``. The reduced value is then
placed in one of NUM_TIERS tiers delimited by cumulative thresholds.
"""

from typing import List, Sequence

from ..config import DEFAULT_CONFIG
from ..errors import InputShapeError
from .comparators import bits2num, greater_eq_than, is_equal, less_than, num2bits, num2bits_strict
from .constraint_system import ConstraintType, Signal, SignalLike, system_of
from .poseidon import poseidon


def vrf(sk: SignalLike, seed: SignalLike) -> Signal:
    return poseidon([sk, seed])


def vrf_mod(
    output: Signal,
    random_bits: int = DEFAULT_CONFIG.random_bits,
    scale: int = DEFAULT_CONFIG.rarity_scale,
) -> Signal:
    """Map a VRF output into ``[0, scale)``."""
    cs = system_of(output)
    with cs.namespace("vrf_mod"):
        random_val = bits2num(num2bits_strict(output)[:random_bits])
        wraps = greater_eq_than(random_val, scale, random_bits)
    return random_val - wraps * scale


def rarity_tier(
    value: Signal,
    thresholds: Sequence[Signal],
    item_rarity: Signal,
    random_bits: int = DEFAULT_CONFIG.random_bits,
    scale: int = DEFAULT_CONFIG.rarity_scale,
) -> List[Signal]:
    """Constrain ``item_rarity`` to the tier containing ``value``.

    Thresholds must be strictly increasing and end at ``scale``. Tier ``i``
    covers ``[thresholds[i-1], thresholds[i])`` with an implicit lower bound of
    0 for the first tier.

    Returns:
        The per-tier membership flags.
    """
    if not thresholds:
        raise InputShapeError("at least one rarity threshold is required", field="thresholds")

    cs = system_of(value, item_rarity)
    with cs.namespace("rarity"):
        for k, threshold in enumerate(thresholds):
            with cs.namespace(f"threshold{k}"):
                num2bits(threshold, random_bits)
        for k in range(1, len(thresholds)):
            with cs.namespace(f"increasing{k}"):
                cs.assert_equal(
                    less_than(thresholds[k - 1], thresholds[k], random_bits),
                    1,
                    "strictly_increasing",
                    ConstraintType.RANGE,
                )
        cs.assert_equal(thresholds[-1], scale, "last_threshold")

        cum_less = [less_than(value, t, random_bits) for t in thresholds]
        in_tier = [cum_less[0]] + [
            cum_less[k] - cum_less[k - 1] for k in range(1, len(thresholds))
        ]
        cs.assert_equal(cs.sum(in_tier), 1, "one_tier", ConstraintType.SELECTOR)

        matches = [is_equal(item_rarity, k) * flag for k, flag in enumerate(in_tier)]
        cs.assert_equal(cs.sum(matches), 1, "claimed_tier", ConstraintType.SELECTOR)
    return in_tier
