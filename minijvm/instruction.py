"""Instruction base classes, the bytecode reader and branching."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from minijvm.rtda import Frame, LocalVars, OperandStack


class ValueKind(Enum):
    """The type of a value moved between the operand stack and local variables."""

    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    REF = "ref"

    def push(self, stack: OperandStack, value: Any) -> None:
        getattr(stack, f"push_{self.value}")(value)

    def pop(self, stack: OperandStack) -> Any:
        return getattr(stack, f"pop_{self.value}")()

    def load(self, local_vars: LocalVars, index: int) -> Any:
        return getattr(local_vars, f"get_{self.value}")(index)

    def store(self, local_vars: LocalVars, index: int, value: Any) -> None:
        getattr(local_vars, f"set_{self.value}")(index, value)


class BytecodeReader:
    """Reads big-endian operands from method bytecode."""

    __slots__ = ("code", "pc")

    def __init__(self, code: bytes = b"", pc: int = 0) -> None:
        self.code = bytes(code)
        self.pc = pc

    def reset(self, code: bytes, pc: int) -> None:
        self.code = bytes(code)
        self.pc = pc

    def read_u8(self) -> int:
        if not 0 <= self.pc < len(self.code):
            raise IndexError(f"bytecode read past end at pc {self.pc}")
        value = self.code[self.pc]
        self.pc += 1
        return value

    def read_i8(self) -> int:
        value = self.read_u8()
        return value - 0x100 if value & 0x80 else value

    def read_u16(self) -> int:
        high = self.read_u8()
        return (high << 8) | self.read_u8()

    def read_i16(self) -> int:
        value = self.read_u16()
        return value - 0x10000 if value & 0x8000 else value

    def read_i32(self) -> int:
        value = 0
        for _ in range(4):
            value = (value << 8) | self.read_u8()
        return value - 0x100000000 if value & 0x80000000 else value

    def read_i32s(self, count: int) -> list[int]:
        return [self.read_i32() for _ in range(count)]

    def skip_padding(self) -> None:
        """Advance to the next multiple of four."""
        while self.pc % 4:
            self.read_u8()


class Instruction(ABC):
    """A decoded bytecode instruction."""

    @abstractmethod
    def fetch_operands(self, reader: BytecodeReader) -> None:
        """Read this instruction's operands from the bytecode."""

    @abstractmethod
    def execute(self, frame: Frame) -> None:
        """Run the instruction against a frame."""


class NoOperandsInstruction(Instruction):
    """An instruction that takes no operands from the bytecode."""

    def fetch_operands(self, reader: BytecodeReader) -> None:
        pass


class BranchInstruction(Instruction):
    """An instruction with a signed 16-bit branch offset."""

    def __init__(self, offset: int = 0) -> None:
        self.offset = offset

    def fetch_operands(self, reader: BytecodeReader) -> None:
        self.offset = reader.read_i16()


class Index8Instruction(Instruction):
    """An instruction with a one-byte local variable index."""

    def __init__(self, index: int = 0) -> None:
        self.index = index

    def fetch_operands(self, reader: BytecodeReader) -> None:
        self.index = reader.read_u8()


class Index16Instruction(Instruction):
    """An instruction with a two-byte index."""

    def __init__(self, index: int = 0) -> None:
        self.index = index

    def fetch_operands(self, reader: BytecodeReader) -> None:
        self.index = reader.read_u16()


def branch(frame: Frame, offset: int) -> None:
    """Make the frame continue at the current instruction's pc plus ``offset``."""
    frame.next_pc = frame.thread.pc + offset