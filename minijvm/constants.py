"""Instructions that push constants onto the operand stack."""

from __future__ import annotations

from dataclasses import dataclass

from minijvm.instruction import BytecodeReader, Instruction, NoOperandsInstruction
from minijvm.rtda import Frame


class Nop(NoOperandsInstruction):
    """Does nothing."""

    def execute(self, frame: Frame) -> None:
        pass

    def __repr__(self) -> str:
        return "Nop()"


class AConstNull(NoOperandsInstruction):
    """Pushes a null reference."""

    def execute(self, frame: Frame) -> None:
        frame.operand_stack.push_ref(None)

    def __repr__(self) -> str:
        return "AConstNull()"


@dataclass
class IConst(NoOperandsInstruction):
    """Pushes a fixed int."""

    value: int

    def execute(self, frame: Frame) -> None:
        frame.operand_stack.push_int(self.value)


@dataclass
class LConst(NoOperandsInstruction):
    """Pushes a fixed long."""

    value: int

    def execute(self, frame: Frame) -> None:
        frame.operand_stack.push_long(self.value)


@dataclass
class FConst(NoOperandsInstruction):
    """Pushes a fixed float."""

    value: float

    def execute(self, frame: Frame) -> None:
        frame.operand_stack.push_float(self.value)


@dataclass
class DConst(NoOperandsInstruction):
    """Pushes a fixed double."""

    value: float

    def execute(self, frame: Frame) -> None:
        frame.operand_stack.push_double(self.value)


@dataclass
class BIPush(Instruction):
    """Pushes a signed byte operand as an int."""

    value: int = 0

    def fetch_operands(self, reader: BytecodeReader) -> None:
        self.value = reader.read_i8()

    def execute(self, frame: Frame) -> None:
        frame.operand_stack.push_int(self.value)


@dataclass
class SIPush(Instruction):
    """Pushes a signed short operand as an int."""

    value: int = 0

    def fetch_operands(self, reader: BytecodeReader) -> None:
        self.value = reader.read_i16()

    def execute(self, frame: Frame) -> None:
        frame.operand_stack.push_int(self.value)