"""Unconditional jumps and switch instructions."""

from __future__ import annotations

from dataclasses import dataclass, field

from minijvm.instruction import BranchInstruction, BytecodeReader, Instruction, branch
from minijvm.rtda import Frame


class Goto(BranchInstruction):
    """Jumps by a signed 16-bit offset."""

    def execute(self, frame: Frame) -> None:
        branch(frame, self.offset)

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.offset == self.offset  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash(("Goto", self.offset))

    def __repr__(self) -> str:
        return f"Goto(offset={self.offset})"


@dataclass
class TableSwitch(Instruction):
    """Jumps through a table indexed by the int on top, from ``low`` to ``high``."""

    default_offset: int = 0
    low: int = 0
    high: int = -1
    jump_offsets: list[int] = field(default_factory=list)

    def fetch_operands(self, reader: BytecodeReader) -> None:
        reader.skip_padding()
        self.default_offset = reader.read_i32()
        self.low = reader.read_i32()
        self.high = reader.read_i32()
        self.jump_offsets = reader.read_i32s(self.high - self.low + 1)

    def execute(self, frame: Frame) -> None:
        key = frame.operand_stack.pop_int()
        if self.low <= key <= self.high:
            branch(frame, self.jump_offsets[key - self.low])
        else:
            branch(frame, self.default_offset)


@dataclass
class LookupSwitch(Instruction):
    """Jumps to the offset paired with the int on top, or to the default."""

    default_offset: int = 0
    pairs: list[tuple[int, int]] = field(default_factory=list)

    def fetch_operands(self, reader: BytecodeReader) -> None:
        reader.skip_padding()
        self.default_offset = reader.read_i32()
        npairs = reader.read_i32()
        values = reader.read_i32s(npairs * 2)
        self.pairs = list(zip(values[::2], values[1::2]))

    def execute(self, frame: Frame) -> None:
        key = frame.operand_stack.pop_int()
        offset = next(
            (target for match, target in self.pairs if match == key), self.default_offset
        )
        branch(frame, offset)