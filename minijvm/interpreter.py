"""Running a method's bytecode."""

from __future__ import annotations

from typing import NoReturn

from minijvm.class_file import MemberInfo
from minijvm.factory import new_instruction
from minijvm.instruction import BytecodeReader
from minijvm.rtda import Thread


def interpret(method_info: MemberInfo) -> NoReturn:
    """Run a method's code in a new thread until an error stops it.

    When execution stops, the frame's local variables and operand stack
    are printed and the error is raised again.
    """
    code_attr = method_info.code_attribute()
    if code_attr is None:
        raise ValueError("method has no Code attribute")
    thread = Thread()
    frame = thread.new_frame(code_attr.max_locals, code_attr.max_stack)
    thread.push_frame(frame)
    try:
        loop(thread, code_attr.code)
    except Exception:
        print(f"LocalVars:{frame.local_vars!r}")
        print(f"OperandStack:{frame.operand_stack!r}")
        raise


def loop(thread: Thread, bytecode: bytes) -> NoReturn:
    """Pop the thread's frame and decode and execute instructions until one fails."""
    frame = thread.pop_frame()
    reader = BytecodeReader()
    while True:
        pc = frame.next_pc
        thread.pc = pc
        reader.reset(bytecode, pc)
        instruction = new_instruction(reader.read_u8())
        instruction.fetch_operands(reader)
        frame.next_pc = reader.pc
        instruction.execute(frame)