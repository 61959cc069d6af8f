"""Wide jumps, null tests and the wide prefix."""

from __future__ import annotations

from typing import Optional

from minijvm.arithmetic import IInc
from minijvm.instruction import (
    BranchInstruction,
    BytecodeReader,
    Instruction,
    ValueKind,
    branch,
)
from minijvm.loads import Load
from minijvm.rtda import Frame
from minijvm.stores import Store

_WIDE_LOADS = {
    0x15: ValueKind.INT,
    0x16: ValueKind.LONG,
    0x17: ValueKind.FLOAT,
    0x18: ValueKind.DOUBLE,
    0x19: ValueKind.REF,
}
_WIDE_STORES = {
    0x36: ValueKind.INT,
    0x37: ValueKind.LONG,
    0x38: ValueKind.FLOAT,
    0x39: ValueKind.DOUBLE,
    0x3A: ValueKind.REF,
}
_IINC = 0x84


class GotoW(Instruction):
    """Jumps by a signed 32-bit offset."""

    def __init__(self, offset: int = 0) -> None:
        self.offset = offset

    def fetch_operands(self, reader: BytecodeReader) -> None:
        self.offset = reader.read_i32()

    def execute(self, frame: Frame) -> None:
        branch(frame, self.offset)

    def __repr__(self) -> str:
        return f"GotoW(offset={self.offset})"


class IfNull(BranchInstruction):
    """Branches when the reference on top is null."""

    def execute(self, frame: Frame) -> None:
        if frame.operand_stack.pop_ref() is None:
            branch(frame, self.offset)

    def __repr__(self) -> str:
        return f"IfNull(offset={self.offset})"


class IfNonNull(BranchInstruction):
    """Branches when the reference on top is not null."""

    def execute(self, frame: Frame) -> None:
        if frame.operand_stack.pop_ref() is not None:
            branch(frame, self.offset)

    def __repr__(self) -> str:
        return f"IfNonNull(offset={self.offset})"


class Wide(Instruction):
    """Widens the index (and for iinc the constant) of the instruction that follows."""

    def __init__(self) -> None:
        self.modified_instruction: Optional[Instruction] = None

    def fetch_operands(self, reader: BytecodeReader) -> None:
        opcode = reader.read_u8()
        if opcode in _WIDE_LOADS:
            self.modified_instruction = Load(_WIDE_LOADS[opcode], reader.read_u16())
        elif opcode in _WIDE_STORES:
            self.modified_instruction = Store(_WIDE_STORES[opcode], reader.read_u16())
        elif opcode == _IINC:
            index = reader.read_u16()
            self.modified_instruction = IInc(index, reader.read_i16())
        else:
            raise ValueError(f"Unsupported opcode: 0x{opcode:x}!")

    def execute(self, frame: Frame) -> None:
        if self.modified_instruction is None:
            raise RuntimeError("wide instruction executed before its operands were read")
        self.modified_instruction.execute(frame)

    def __repr__(self) -> str:
        return f"Wide({self.modified_instruction!r})"