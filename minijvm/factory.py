"""Mapping from opcodes to instruction objects."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from itertools import permutations

from minijvm.arithmetic import (
    Add,
    And,
    Div,
    IInc,
    Mul,
    Neg,
    Or,
    Rem,
    ShiftLeft,
    ShiftRight,
    Sub,
    UnsignedShiftRight,
    Xor,
)
from minijvm.comparisons import Condition, DCmp, FCmp, IfACmp, IfCond, IfICmp, LCmp
from minijvm.constants import AConstNull, BIPush, DConst, FConst, IConst, LConst, Nop, SIPush
from minijvm.control import Goto, LookupSwitch, TableSwitch
from minijvm.conversions import Convert, IntNarrow
from minijvm.extended import GotoW, IfNonNull, IfNull, Wide
from minijvm.instruction import Instruction, ValueKind
from minijvm.loads import Load
from minijvm.stack_ops import Dup, Dup2, Dup2X1, Dup2X2, DupX1, DupX2, Pop, Pop2, Swap
from minijvm.stores import Store

_NUMERIC_ORDER = (ValueKind.INT, ValueKind.LONG, ValueKind.FLOAT, ValueKind.DOUBLE)
_LOCAL_ORDER = _NUMERIC_ORDER + (ValueKind.REF,)
_CONDITION_ORDER = (
    Condition.EQ,
    Condition.NE,
    Condition.LT,
    Condition.GE,
    Condition.GT,
    Condition.LE,
)


class UnsupportedOpcodeError(ValueError):
    """Raised for an opcode the interpreter does not implement."""

    def __init__(self, opcode: int) -> None:
        self.opcode = opcode
        super().__init__(f"Unsupported opcode: 0x{opcode:x}!")


def _build_shared() -> dict[int, Instruction]:
    """Instructions without operands; one instance serves every use."""
    shared: dict[int, Instruction] = {0x00: Nop(), 0x01: AConstNull()}
    shared.update({0x02 + i: IConst(value) for i, value in enumerate(range(-1, 6))})
    shared.update(
        {
            0x09: LConst(0),
            0x0A: LConst(1),
            0x0B: FConst(0.0),
            0x0C: FConst(1.0),
            0x0D: FConst(2.0),
            0x0E: DConst(0.0),
            0x0F: DConst(1.0),
        }
    )
    for kind_number, kind in enumerate(_LOCAL_ORDER):
        for index in range(4):
            shared[0x1A + 4 * kind_number + index] = Load(kind, index)
            shared[0x3B + 4 * kind_number + index] = Store(kind, index)
    stack_ops = (Pop, Pop2, Dup, DupX1, DupX2, Dup2, Dup2X1, Dup2X2, Swap)
    shared.update({0x57 + i: cls() for i, cls in enumerate(stack_ops)})
    for base, cls in ((0x60, Add), (0x64, Sub), (0x68, Mul), (0x6C, Div), (0x70, Rem), (0x74, Neg)):
        shared.update({base + i: cls(kind) for i, kind in enumerate(_NUMERIC_ORDER)})
    integral_ops = (
        (0x78, ShiftLeft),
        (0x7A, ShiftRight),
        (0x7C, UnsignedShiftRight),
        (0x7E, And),
        (0x80, Or),
        (0x82, Xor),
    )
    for base, cls in integral_ops:
        shared[base] = cls(ValueKind.INT)
        shared[base + 1] = cls(ValueKind.LONG)
    shared.update(
        {
            0x85 + i: Convert(source, target)
            for i, (source, target) in enumerate(permutations(_NUMERIC_ORDER, 2))
        }
    )
    shared.update(
        {
            0x91: IntNarrow(8, True),
            0x92: IntNarrow(16, False),
            0x93: IntNarrow(16, True),
            0x94: LCmp(),
            0x95: FCmp(False),
            0x96: FCmp(True),
            0x97: DCmp(False),
            0x98: DCmp(True),
        }
    )
    return shared


def _build_fresh() -> dict[int, Callable[[], Instruction]]:
    """Instructions with operands; each use needs its own instance."""
    fresh: dict[int, Callable[[], Instruction]] = {0x10: BIPush, 0x11: SIPush, 0x84: IInc}
    for i, kind in enumerate(_LOCAL_ORDER):
        fresh[0x15 + i] = partial(Load, kind)
        fresh[0x36 + i] = partial(Store, kind)
    for i, condition in enumerate(_CONDITION_ORDER):
        fresh[0x99 + i] = partial(IfCond, condition)
        fresh[0x9F + i] = partial(IfICmp, condition)
    fresh.update(
        {
            0xA5: partial(IfACmp, Condition.EQ),
            0xA6: partial(IfACmp, Condition.NE),
            0xA7: Goto,
            0xAA: TableSwitch,
            0xAB: LookupSwitch,
            0xC4: Wide,
            0xC6: IfNull,
            0xC7: IfNonNull,
            0xC8: GotoW,
        }
    )
    return fresh


_SHARED = _build_shared()
_FRESH = _build_fresh()


def new_instruction(opcode: int) -> Instruction:
    """Return the instruction for ``opcode``."""
    shared = _SHARED.get(opcode)
    if shared is not None:
        return shared
    make = _FRESH.get(opcode)
    if make is None:
        raise UnsupportedOpcodeError(opcode)
    return make()