"""Arithmetic, bitwise, shift and increment instructions."""

from __future__ import annotations

import math
import operator
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from minijvm.instruction import (
    BytecodeReader,
    Instruction,
    NoOperandsInstruction,
    ValueKind,
)
from minijvm.rtda import Frame

_NUMERIC = frozenset({ValueKind.INT, ValueKind.LONG, ValueKind.FLOAT, ValueKind.DOUBLE})
_INTEGRAL = frozenset({ValueKind.INT, ValueKind.LONG})


class JavaArithmeticError(ArithmeticError):
    """Raised for an arithmetic fault in executed bytecode, such as division by zero."""


def _trunc_div(dividend: int, divisor: int) -> int:
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend < 0) == (divisor < 0) else -quotient


def _trunc_rem(dividend: int, divisor: int) -> int:
    return dividend - divisor * _trunc_div(dividend, divisor)


def _float_rem(dividend: float, divisor: float) -> float:
    # fmod rejects infinite dividends and zero divisors; both give NaN here.
    try:
        return math.fmod(dividend, divisor)
    except ValueError:
        return math.nan


class _KindedInstruction(NoOperandsInstruction):
    """An operand-free instruction specialised to one value kind."""

    _allowed: frozenset = _NUMERIC

    def __init__(self, kind: ValueKind) -> None:
        if kind not in self._allowed:
            raise ValueError(f"{type(self).__name__} does not take {kind.name} operands")
        self.kind = kind

    @property
    def _integral(self) -> bool:
        return self.kind in _INTEGRAL

    def _binary(self, frame: Frame, op: Callable[[Any, Any], Any]) -> None:
        stack = frame.operand_stack
        right = self.kind.pop(stack)
        left = self.kind.pop(stack)
        self.kind.push(stack, op(left, right))

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.kind == self.kind  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.kind))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name})"


class Add(_KindedInstruction):
    """Adds the top two values."""

    def execute(self, frame: Frame) -> None:
        self._binary(frame, operator.add)


class Sub(_KindedInstruction):
    """Subtracts the top value from the one below it."""

    def execute(self, frame: Frame) -> None:
        self._binary(frame, operator.sub)


class Mul(_KindedInstruction):
    """Multiplies the top two values."""

    def execute(self, frame: Frame) -> None:
        self._binary(frame, operator.mul)


class Div(_KindedInstruction):
    """Divides the second value by the top value; a zero divisor is an error."""

    def execute(self, frame: Frame) -> None:
        divide = _trunc_div if self._integral else operator.truediv

        def checked(left: Any, right: Any) -> Any:
            if right == 0:
                raise JavaArithmeticError("/ by zero")
            return divide(left, right)

        self._binary(frame, checked)


class Rem(_KindedInstruction):
    """Pushes the remainder of the second value divided by the top value."""

    def execute(self, frame: Frame) -> None:
        if not self._integral:
            self._binary(frame, _float_rem)
            return

        def checked(left: int, right: int) -> int:
            if right == 0:
                raise JavaArithmeticError("/ by zero")
            return _trunc_rem(left, right)

        self._binary(frame, checked)


class Neg(_KindedInstruction):
    """Negates the top value."""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        self.kind.push(stack, -self.kind.pop(stack))


class _Shift(_KindedInstruction):
    _allowed = _INTEGRAL

    def _shift(self, frame: Frame, op: Callable[[int, int, int], int]) -> None:
        stack = frame.operand_stack
        amount = stack.pop_int()
        value = self.kind.pop(stack)
        bits = 32 if self.kind is ValueKind.INT else 64
        self.kind.push(stack, op(value, amount & (bits - 1), bits))


class ShiftLeft(_Shift):
    """Shifts the second value left by the int on top."""

    def execute(self, frame: Frame) -> None:
        self._shift(frame, lambda value, amount, bits: value << amount)


class ShiftRight(_Shift):
    """Shifts the second value right, keeping its sign."""

    def execute(self, frame: Frame) -> None:
        self._shift(frame, lambda value, amount, bits: value >> amount)


class UnsignedShiftRight(_Shift):
    """Shifts the second value right, filling with zeros."""

    def execute(self, frame: Frame) -> None:
        self._shift(
            frame, lambda value, amount, bits: (value & ((1 << bits) - 1)) >> amount
        )


class _Bitwise(_KindedInstruction):
    _allowed = _INTEGRAL


class And(_Bitwise):
    """Bitwise and of the top two values."""

    def execute(self, frame: Frame) -> None:
        self._binary(frame, operator.and_)


class Or(_Bitwise):
    """Bitwise or of the top two values."""

    def execute(self, frame: Frame) -> None:
        self._binary(frame, operator.or_)


class Xor(_Bitwise):
    """Bitwise exclusive or of the top two values."""

    def execute(self, frame: Frame) -> None:
        self._binary(frame, operator.xor)


@dataclass
class IInc(Instruction):
    """Adds a signed constant to an int local variable."""

    index: int = 0
    const: int = 0

    def fetch_operands(self, reader: BytecodeReader) -> None:
        self.index = reader.read_u8()
        self.const = reader.read_i8()

    def execute(self, frame: Frame) -> None:
        local_vars = frame.local_vars
        local_vars.set_int(self.index, local_vars.get_int(self.index) + self.const)