"""Instructions that store the top of the operand stack into local variables."""

from __future__ import annotations

from typing import Optional

from minijvm.instruction import BytecodeReader, Index8Instruction, ValueKind
from minijvm.rtda import Frame


class Store(Index8Instruction):
    """Pops a value of the given kind into a local variable.

    With an index given at construction the instruction is one of the
    short forms (``istore_0`` and the like) and reads no operand.
    """

    def __init__(self, kind: ValueKind, index: Optional[int] = None) -> None:
        super().__init__(0 if index is None else index)
        self.kind = kind
        self.implicit = index is not None

    def fetch_operands(self, reader: BytecodeReader) -> None:
        if not self.implicit:
            super().fetch_operands(reader)

    def execute(self, frame: Frame) -> None:
        value = self.kind.pop(frame.operand_stack)
        self.kind.store(frame.local_vars, self.index, value)

    def __repr__(self) -> str:
        return f"Store({self.kind.name}, {self.index})"