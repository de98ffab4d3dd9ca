"""
Array access at an index known only at proof time.

A proof-time index ``j`` is turned into selector flags ``eq[k] = (j == k)``;
reads are ``sum(eq[k] * values[k])`` and writes blend each slot towards the
new value by its flag. Indices known while building the circuit use plain
Python indexing instead.
"""

from typing import List, Optional, Sequence

from ..errors import InputShapeError
from .comparators import is_equal
from .constraint_system import ConstraintType, Signal, SignalLike, system_of


def selector_bits(index: Signal, n: int) -> List[Signal]:
    """Flags ``eq[k] = (index == k)`` for ``k < n``; exactly one must be set."""
    if n < 1:
        raise InputShapeError("selector needs at least one slot", field="n", value=n)
    cs = system_of(index)
    with cs.namespace("selector"):
        flags = [is_equal(index, k) for k in range(n)]
        cs.assert_equal(cs.sum(flags), 1, "one_hot", ConstraintType.SELECTOR)
    return flags


def select_with(values: Sequence[SignalLike], flags: Sequence[Signal]) -> Signal:
    """Read ``values`` at the slot whose flag is set."""
    if len(values) != len(flags):
        raise InputShapeError(
            "values and selector flags differ in length",
            field="values",
            value=len(values),
            expected=len(flags),
        )
    cs = system_of(flags)
    return cs.sum(flag * value for flag, value in zip(flags, values))


def select_by_index(values: Sequence[SignalLike], index: Signal) -> Signal:
    return select_with(values, selector_bits(index, len(values)))


def write_at_index(
    values: Sequence[SignalLike],
    flags: Sequence[Signal],
    new_value: SignalLike,
    skip: Optional[int] = None,
) -> List[Signal]:
    """Return ``values`` with the flagged slot replaced by ``new_value``.

    Slot ``skip`` is copied unchanged so the caller can assign it directly.
    """
    if len(values) != len(flags):
        raise InputShapeError(
            "values and selector flags differ in length",
            field="values",
            value=len(values),
            expected=len(flags),
        )
    cs = system_of(flags)
    new_value = cs.lift(new_value)
    updated = []
    for k, (value, flag) in enumerate(zip(values, flags)):
        value = cs.lift(value)
        if k == skip:
            updated.append(value)
            continue
        delta = new_value - value
        slot = cs.alloc(f"slot[{k}]", value.value + flag.value * delta.value)
        cs.enforce(flag, delta, slot - value, ConstraintType.SELECTOR, f"write[{k}]")
        updated.append(slot)
    return updated
