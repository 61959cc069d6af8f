"""Instructions that rearrange slots on the operand stack."""

from __future__ import annotations

from minijvm.instruction import NoOperandsInstruction
from minijvm.rtda import Frame


class _StackInstruction(NoOperandsInstruction):
    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Pop(_StackInstruction):
    """Discards the top slot."""

    def execute(self, frame: Frame) -> None:
        frame.operand_stack.pop_slot()


class Pop2(_StackInstruction):
    """Discards the top two slots."""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        stack.pop_slot()
        stack.pop_slot()


class Dup(_StackInstruction):
    """[.. b a] -> [.. b a a]"""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        slot = stack.pop_slot()
        stack.push_slot(slot)
        stack.push_slot(slot)


class DupX1(_StackInstruction):
    """[.. b a] -> [.. a b a]"""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        first = stack.pop_slot()
        second = stack.pop_slot()
        for slot in (first, second, first):
            stack.push_slot(slot)


class DupX2(_StackInstruction):
    """[.. c b a] -> [.. a c b a]"""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        first = stack.pop_slot()
        second = stack.pop_slot()
        third = stack.pop_slot()
        for slot in (first, third, second, first):
            stack.push_slot(slot)


class Dup2(_StackInstruction):
    """[.. b a] -> [.. b a b a]"""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        first = stack.pop_slot()
        second = stack.pop_slot()
        for slot in (second, first, second, first):
            stack.push_slot(slot)


class Dup2X1(_StackInstruction):
    """[.. c b a] -> [.. b a c b a]"""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        first = stack.pop_slot()
        second = stack.pop_slot()
        third = stack.pop_slot()
        for slot in (second, first, third, second, first):
            stack.push_slot(slot)


class Dup2X2(_StackInstruction):
    """[.. d c b a] -> [.. b a d c b a]"""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        first = stack.pop_slot()
        second = stack.pop_slot()
        third = stack.pop_slot()
        fourth = stack.pop_slot()
        for slot in (second, first, fourth, third, second, first):
            stack.push_slot(slot)


class Swap(_StackInstruction):
    """[.. b a] -> [.. a b]"""

    def execute(self, frame: Frame) -> None:
        stack = frame.operand_stack
        first = stack.pop_slot()
        second = stack.pop_slot()
        stack.push_slot(first)
        stack.push_slot(second)