"""Instructions that load local variables onto the operand stack."""

from __future__ import annotations

from typing import Optional

from minijvm.instruction import BytecodeReader, Index8Instruction, ValueKind
from minijvm.rtda import Frame


class Load(Index8Instruction):
    """Pushes a local variable of the given kind.

    With an index given at construction the instruction is one of the
    short forms (``iload_0`` and the like) and reads no operand.
    """

    def __init__(self, kind: ValueKind, index: Optional[int] = None) -> None:
        super().__init__(0 if index is None else index)
        self.kind = kind
        self.implicit = index is not None

    def fetch_operands(self, reader: BytecodeReader) -> None:
        if not self.implicit:
            super().fetch_operands(reader)

    def execute(self, frame: Frame) -> None:
        value = self.kind.load(frame.local_vars, self.index)
        self.kind.push(frame.operand_stack, value)

    def __repr__(self) -> str:
        return f"Load({self.kind.name}, {self.index})"