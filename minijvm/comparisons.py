"""Comparison and conditional branch instructions."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from minijvm.instruction import BranchInstruction, NoOperandsInstruction, branch
from minijvm.rtda import Frame


class Condition(Enum):
    """A comparison between two values."""

    EQ = "eq"
    NE = "ne"
    LT = "lt"
    GE = "ge"
    GT = "gt"
    LE = "le"

    def holds(self, left: Any, right: Any) -> bool:
        """Return whether ``left <op> right`` is true."""
        return bool(getattr(operator, self.value)(left, right))


def _compare_floats(left: float, right: float, nan_result: int) -> int:
    if left > right:
        return 1
    if left == right:
        return 0
    if left < right:
        return -1
    return nan_result


class LCmp(NoOperandsInstruction):
    """Compares two longs and pushes 1, 0 or -1."""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        right = stack.pop_long()
        left = stack.pop_long()
        stack.push_int((left > right) - (left < right))

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self).__name__)

    def __repr__(self) -> str:
        return "LCmp()"


@dataclass
class FCmp(NoOperandsInstruction):
    """Compares two floats; a NaN gives 1 when ``greater`` is set, else -1."""

    greater: bool

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        right = stack.pop_float()
        left = stack.pop_float()
        stack.push_int(_compare_floats(left, right, 1 if self.greater else -1))


@dataclass
class DCmp(NoOperandsInstruction):
    """Compares two doubles; a NaN gives 1 when ``greater`` is set, else -1."""

    greater: bool

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        right = stack.pop_double()
        left = stack.pop_double()
        stack.push_int(_compare_floats(left, right, 1 if self.greater else -1))


class _ConditionalBranch(BranchInstruction):
    def __init__(self, condition: Condition, offset: int = 0) -> None:
        super().__init__(offset)
        self.condition = condition

    def __eq__(self, other: object) -> bool:
        return (
            type(other) is type(self)
            and other.condition is self.condition  # type: ignore[attr-defined]
            and other.offset == self.offset  # type: ignore[attr-defined]
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.condition, self.offset))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.condition.name}, offset={self.offset})"


class IfCond(_ConditionalBranch):
    """Branches when the int on top compares with zero as the condition says."""

    def execute(self, frame: Frame) -> None:
        value = frame.operand_stack.pop_int()
        if self.condition.holds(value, 0):
            branch(frame, self.offset)


class IfICmp(_ConditionalBranch):
    """Branches when two ints compare as the condition says."""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        right = stack.pop_int()
        left = stack.pop_int()
        if self.condition.holds(left, right):
            branch(frame, self.offset)


class IfACmp(_ConditionalBranch):
    """Branches when two references are (EQ) or are not (NE) the same."""

    def __init__(self, condition: Condition, offset: int = 0) -> None:
        if condition not in (Condition.EQ, Condition.NE):
            raise ValueError(f"references compare only for EQ or NE, not {condition.name}")
        super().__init__(condition, offset)

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        right = stack.pop_ref()
        left = stack.pop_ref()
        if (left is right) == (self.condition is Condition.EQ):
            branch(frame, self.offset)