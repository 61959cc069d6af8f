import pytest

from minijvm.control import Goto, LookupSwitch, TableSwitch
from minijvm.instruction import BytecodeReader
from minijvm.rtda import Thread


def _frame(pc=0):
    thread = Thread()
    thread.pc = pc
    return thread.new_frame(2, 4)


def _i32s(*values):
    return b"".join(v.to_bytes(4, "big", signed=True) for v in values)


def test_goto_branches_from_current_pc():
    frame = _frame(pc=12)
    Goto(offset=-12).execute(frame)
    assert frame.next_pc == 0


def test_goto_reads_signed_offset():
    reader = BytecodeReader((-7).to_bytes(2, "big", signed=True))
    goto = Goto()
    goto.fetch_operands(reader)
    assert goto.offset == -7


TABLE_DEFAULT = 100
TABLE_LOW = 5
TABLE_OFFSETS = [20, 30, 40]


def _table_code():
    high = TABLE_LOW + len(TABLE_OFFSETS) - 1
    return b"\xaa" + b"\x00" * 3 + _i32s(TABLE_DEFAULT, TABLE_LOW, high, *TABLE_OFFSETS)


def test_tableswitch_reads_padded_operands():
    code = _table_code()
    reader = BytecodeReader(code, 1)
    switch = TableSwitch()
    switch.fetch_operands(reader)
    assert reader.pc == len(code)
    assert switch.default_offset == TABLE_DEFAULT
    assert switch.low == TABLE_LOW
    assert switch.high == TABLE_LOW + len(TABLE_OFFSETS) - 1
    assert switch.jump_offsets == TABLE_OFFSETS


@pytest.mark.parametrize("position", range(len(TABLE_OFFSETS)))
def test_tableswitch_jumps_to_table_entry(position):
    switch = TableSwitch()
    switch.fetch_operands(BytecodeReader(_table_code(), 1))
    frame = _frame(pc=50)
    frame.operand_stack.push_int(TABLE_LOW + position)
    switch.execute(frame)
    assert frame.next_pc == 50 + TABLE_OFFSETS[position]


@pytest.mark.parametrize("key", [TABLE_LOW - 1, TABLE_LOW + len(TABLE_OFFSETS)])
def test_tableswitch_uses_default_out_of_range(key):
    switch = TableSwitch(TABLE_DEFAULT, TABLE_LOW, TABLE_LOW + 2, list(TABLE_OFFSETS))
    frame = _frame(pc=50)
    frame.operand_stack.push_int(key)
    switch.execute(frame)
    assert frame.next_pc == 50 + TABLE_DEFAULT


LOOKUP_PAIRS = [(-1, 11), (8, 22), (1000, 33)]


def _lookup_code():
    flat = [v for pair in LOOKUP_PAIRS for v in pair]
    return b"\xab" + b"\x00" * 3 + _i32s(-60, len(LOOKUP_PAIRS), *flat)


def test_lookupswitch_reads_padded_pairs():
    code = _lookup_code()
    reader = BytecodeReader(code, 1)
    switch = LookupSwitch()
    switch.fetch_operands(reader)
    assert reader.pc == len(code)
    assert switch.default_offset == -60
    assert switch.pairs == LOOKUP_PAIRS


@pytest.mark.parametrize("key,offset", LOOKUP_PAIRS)
def test_lookupswitch_jumps_to_matching_pair(key, offset):
    switch = LookupSwitch()
    switch.fetch_operands(BytecodeReader(_lookup_code(), 1))
    frame = _frame(pc=70)
    frame.operand_stack.push_int(key)
    switch.execute(frame)
    assert frame.next_pc == 70 + offset


def test_lookupswitch_uses_default_without_match():
    switch = LookupSwitch(default_offset=-60, pairs=list(LOOKUP_PAIRS))
    frame = _frame(pc=70)
    frame.operand_stack.push_int(9)
    switch.execute(frame)
    assert frame.next_pc == 70 - 60