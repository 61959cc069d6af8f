"""Run-time data areas: slots, local variables, operand stacks, frames, threads."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Optional

_DEFAULT_STACK_SIZE = 1024


class JObject:
    """A reference to an object on the heap."""


def _to_int32(value: int) -> int:
    return ((int(value) + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def _to_int64(value: int) -> int:
    return ((int(value) + 0x8000000000000000) & 0xFFFFFFFFFFFFFFFF) - 0x8000000000000000


def _float32_bits(value: float) -> int:
    value = float(value)
    try:
        packed = struct.pack(">f", value)
    except OverflowError:
        packed = struct.pack(">f", math.copysign(math.inf, value))
    return struct.unpack(">i", packed)[0]


def _float32_from_bits(bits: int) -> float:
    return struct.unpack(">f", struct.pack(">i", _to_int32(bits)))[0]


def _float64_bits(value: float) -> int:
    return struct.unpack(">q", struct.pack(">d", float(value)))[0]


def _float64_from_bits(bits: int) -> float:
    return struct.unpack(">d", struct.pack(">q", _to_int64(bits)))[0]


@dataclass(frozen=True)
class Slot:
    """One 32-bit value or one reference."""

    num: int = 0
    ref: Optional[JObject] = None


_EMPTY = Slot()


class LocalVars:
    """The local variable table of a frame."""

    __slots__ = ("_slots",)

    def __init__(self, max_locals: int) -> None:
        self._slots = [_EMPTY] * max_locals

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, index: int) -> Slot:
        return self._slots[self._check(index)]

    def __repr__(self) -> str:
        return f"LocalVars({self._slots!r})"

    def _check(self, index: int) -> int:
        if not 0 <= index < len(self._slots):
            raise IndexError(f"local variable index out of range: {index}")
        return index

    def _set_num(self, index: int, num: int) -> None:
        self._slots[self._check(index)] = Slot(num=_to_int32(num))

    def set_int(self, index: int, value: int) -> None:
        self._set_num(index, value)

    def get_int(self, index: int) -> int:
        return self._slots[self._check(index)].num

    def set_float(self, index: int, value: float) -> None:
        self._set_num(index, _float32_bits(value))

    def get_float(self, index: int) -> float:
        return _float32_from_bits(self.get_int(index))

    def set_long(self, index: int, value: int) -> None:
        value = _to_int64(value)
        self._check(index + 1)
        self._set_num(index, value)
        self._set_num(index + 1, value >> 32)

    def get_long(self, index: int) -> int:
        low = self.get_int(index) & 0xFFFFFFFF
        high = self.get_int(index + 1) & 0xFFFFFFFF
        return _to_int64((high << 32) | low)

    def set_double(self, index: int, value: float) -> None:
        self.set_long(index, _float64_bits(value))

    def get_double(self, index: int) -> float:
        return _float64_from_bits(self.get_long(index))

    def set_ref(self, index: int, value: Optional[JObject]) -> None:
        self._slots[self._check(index)] = Slot(ref=value)

    def get_ref(self, index: int) -> Optional[JObject]:
        return self._slots[self._check(index)].ref


class OperandStack:
    """A bounded stack of slots used by instructions."""

    __slots__ = ("max_stack", "_slots")

    def __init__(self, max_stack: int) -> None:
        self.max_stack = max_stack
        self._slots: list[Slot] = []

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"OperandStack({self._slots!r}, max_stack={self.max_stack})"

    def push_slot(self, slot: Slot) -> None:
        if len(self._slots) >= self.max_stack:
            raise IndexError("operand stack overflow")
        self._slots.append(slot)

    def pop_slot(self) -> Slot:
        if not self._slots:
            raise IndexError("operand stack underflow")
        return self._slots.pop()

    def push_int(self, value: int) -> None:
        self.push_slot(Slot(num=_to_int32(value)))

    def pop_int(self) -> int:
        return self.pop_slot().num

    def push_float(self, value: float) -> None:
        self.push_int(_float32_bits(value))

    def pop_float(self) -> float:
        return _float32_from_bits(self.pop_int())

    def push_long(self, value: int) -> None:
        value = _to_int64(value)
        if len(self._slots) + 2 > self.max_stack:
            raise IndexError("operand stack overflow")
        self.push_int(value)
        self.push_int(value >> 32)

    def pop_long(self) -> int:
        if len(self._slots) < 2:
            raise IndexError("operand stack underflow")
        high = self.pop_int() & 0xFFFFFFFF
        low = self.pop_int() & 0xFFFFFFFF
        return _to_int64((high << 32) | low)

    def push_double(self, value: float) -> None:
        self.push_long(_float64_bits(value))

    def pop_double(self) -> float:
        return _float64_from_bits(self.pop_long())

    def push_ref(self, value: Optional[JObject]) -> None:
        self.push_slot(Slot(ref=value))

    def pop_ref(self) -> Optional[JObject]:
        return self.pop_slot().ref


class Frame:
    """A method activation: local variables, operand stack and next pc."""

    def __init__(
        self, max_locals: int, max_stack: int, thread: Optional[Thread] = None
    ) -> None:
        self.lower: Optional[Frame] = None
        self.local_vars = LocalVars(max_locals)
        self.operand_stack = OperandStack(max_stack)
        self.thread = thread
        self.next_pc = 0

    def __repr__(self) -> str:
        return (
            f"Frame(local_vars={self.local_vars!r}, "
            f"operand_stack={self.operand_stack!r}, next_pc={self.next_pc})"
        )


class StackOverflowError(RuntimeError):
    """Raised when a thread's frame stack is full."""


class EmptyStackError(RuntimeError):
    """Raised when popping or peeking an empty frame stack."""


class JvmStack:
    """A thread's stack of frames with a maximum depth."""

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size
        self._frames: list[Frame] = []

    def __len__(self) -> int:
        return len(self._frames)

    def push(self, frame: Frame) -> None:
        if len(self._frames) >= self.max_size:
            raise StackOverflowError("java.lang.StackOverflowError")
        if self._frames:
            frame.lower = self._frames[-1]
        self._frames.append(frame)

    def pop(self) -> Frame:
        if not self._frames:
            raise EmptyStackError("jvm stack is empty")
        return self._frames.pop()

    def top(self) -> Frame:
        if not self._frames:
            raise EmptyStackError("jvm stack is empty")
        return self._frames[-1]


class Thread:
    """A thread of execution with its pc register and frame stack."""

    def __init__(self, max_depth: int = _DEFAULT_STACK_SIZE) -> None:
        self.pc = 0
        self.stack = JvmStack(max_depth)

    def push_frame(self, frame: Frame) -> None:
        self.stack.push(frame)

    def pop_frame(self) -> Frame:
        return self.stack.pop()

    def current_frame(self) -> Frame:
        return self.stack.top()

    def new_frame(self, max_locals: int, max_stack: int) -> Frame:
        return Frame(max_locals, max_stack, self)