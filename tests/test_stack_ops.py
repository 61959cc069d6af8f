import pytest

from minijvm.rtda import Frame, JObject
from minijvm.stack_ops import (
    Dup,
    Dup2,
    Dup2X1,
    Dup2X2,
    DupX1,
    DupX2,
    Pop,
    Pop2,
    Swap,
)


def frame_with(*values):
    frame = Frame(1, 16)
    for value in values:
        frame.operand_stack.push_int(value)
    return frame


def contents(frame):
    """Drain the stack and return its ints from bottom to top."""
    stack = frame.operand_stack
    values = [stack.pop_int() for _ in range(len(stack))]
    return values[::-1]


@pytest.mark.parametrize(
    "instruction,before,after",
    [
        (Pop(), [9, 3, 2, 1], [9, 3, 2]),
        (Pop2(), [9, 3, 2, 1], [9, 3]),
        (Dup(), [9, 3, 2, 1], [9, 3, 2, 1, 1]),
        (DupX1(), [9, 3, 2, 1], [9, 3, 1, 2, 1]),
        (DupX2(), [9, 3, 2, 1], [9, 1, 3, 2, 1]),
        (Dup2(), [9, 3, 2, 1], [9, 3, 2, 1, 2, 1]),
        (Dup2X1(), [9, 3, 2, 1], [9, 2, 1, 3, 2, 1]),
        (Dup2X2(), [9, 4, 3, 2, 1], [9, 2, 1, 4, 3, 2, 1]),
        (Swap(), [9, 3, 2, 1], [9, 3, 1, 2]),
    ],
)
def test_rearrangements(instruction, before, after):
    frame = frame_with(*before)
    instruction.execute(frame)
    assert contents(frame) == after


def test_swap_twice_is_identity():
    frame = frame_with(5, 6, 7)
    Swap().execute(frame)
    Swap().execute(frame)
    assert contents(frame) == [5, 6, 7]


def test_dup_keeps_reference_identity():
    frame = Frame(1, 4)
    obj = JObject()
    frame.operand_stack.push_ref(obj)
    Dup().execute(frame)
    assert frame.operand_stack.pop_ref() is obj
    assert frame.operand_stack.pop_ref() is obj


def test_dup_x1_with_references():
    frame = Frame(1, 4)
    first, second = JObject(), JObject()
    frame.operand_stack.push_ref(second)
    frame.operand_stack.push_ref(first)
    DupX1().execute(frame)
    popped = [frame.operand_stack.pop_ref() for _ in range(3)]
    assert popped[0] is first
    assert popped[1] is second
    assert popped[2] is first


def test_dup2_copies_a_long():
    frame = Frame(1, 8)
    frame.operand_stack.push_long(2997924580)
    Dup2().execute(frame)
    assert frame.operand_stack.pop_long() == 2997924580
    assert frame.operand_stack.pop_long() == 2997924580


def test_pop2_discards_a_long():
    frame = Frame(1, 8)
    frame.operand_stack.push_int(100)
    frame.operand_stack.push_long(-2997924580)
    Pop2().execute(frame)
    assert contents(frame) == [100]


def test_pop_on_empty_stack_raises():
    with pytest.raises(IndexError):
        Pop().execute(Frame(1, 2))


def test_dup_on_full_stack_raises():
    frame = Frame(1, 1)
    frame.operand_stack.push_int(1)
    with pytest.raises(IndexError):
        Dup().execute(frame)


def test_instructions_compare_by_type():
    assert Dup() == Dup()
    assert Dup() != Dup2()
    assert repr(DupX2()) == "DupX2()"