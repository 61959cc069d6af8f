"""Numeric conversion instructions."""

from __future__ import annotations

import math
from dataclasses import dataclass

from minijvm.instruction import NoOperandsInstruction, ValueKind
from minijvm.rtda import Frame

_NUMERIC = frozenset({ValueKind.INT, ValueKind.LONG, ValueKind.FLOAT, ValueKind.DOUBLE})
_INTEGRAL_BITS = {ValueKind.INT: 32, ValueKind.LONG: 64}


def _float_to_integral(value: float, bits: int) -> int:
    """Truncate toward zero, saturating at the range ends; NaN becomes 0."""
    if math.isnan(value):
        return 0
    low = -(1 << (bits - 1))
    high = (1 << (bits - 1)) - 1
    if math.isinf(value):
        return high if value > 0 else low
    return max(low, min(high, math.trunc(value)))


@dataclass
class Convert(NoOperandsInstruction):
    """Converts the value on top from one numeric kind to another."""

    source: ValueKind
    target: ValueKind

    def __post_init__(self) -> None:
        if self.source not in _NUMERIC or self.target not in _NUMERIC:
            raise ValueError("conversions take numeric kinds only")
        if self.source is self.target:
            raise ValueError(f"cannot convert {self.source.name} to itself")

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        value = self.source.pop(stack)
        bits = _INTEGRAL_BITS.get(self.target)
        if bits is None:
            result = float(value)
        elif self.source in _INTEGRAL_BITS:
            result = value
        else:
            result = _float_to_integral(value, bits)
        self.target.push(stack, result)


@dataclass
class IntNarrow(NoOperandsInstruction):
    """Narrows the int on top to ``bits`` bits, sign-extended or zero-extended."""

    bits: int
    signed: bool

    def __post_init__(self) -> None:
        if not 0 < self.bits < 32:
            raise ValueError(f"cannot narrow an int to {self.bits} bits")

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        value = stack.pop_int() & ((1 << self.bits) - 1)
        if self.signed and value & (1 << (self.bits - 1)):
            value -= 1 << self.bits
        stack.push_int(value)