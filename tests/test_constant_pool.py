import struct

import pytest

from minijvm.constant_pool import (
    ClassFormatError,
    ClassReader,
    ConstantClassInfo,
    ConstantDoubleInfo,
    ConstantFloatInfo,
    ConstantIntegerInfo,
    ConstantInterfaceMethodrefInfo,
    ConstantInvokeDynamicInfo,
    ConstantLongInfo,
    ConstantMethodHandleInfo,
    ConstantMethodrefInfo,
    ConstantMethodTypeInfo,
    ConstantNameAndTypeInfo,
    ConstantPool,
    ConstantTag,
    ConstantUtf8Info,
    decode_mutf8,
    read_constant_info,
    read_constant_pool,
)

OBJECT = "java/lang/Object"
METHOD = "toString"
DESCRIPTOR = "()Ljava/lang/String;"
LONG_VALUE = 2997924580
DOUBLE_VALUE = 2.71828182845
INT_VALUE = -100
FLOAT_VALUE = 1.5


def utf8(text):
    raw = text.encode("utf-8")
    return struct.pack(">BH", ConstantTag.UTF8, len(raw)) + raw


def u16_entry(tag, *values):
    return struct.pack(">B" + "H" * len(values), tag, *values)


def pool_bytes(count, *entries):
    return struct.pack(">H", count) + b"".join(entries)


def sample_pool():
    data = pool_bytes(
        17,
        utf8(OBJECT),  # 1
        u16_entry(ConstantTag.CLASS, 1),  # 2
        utf8(METHOD),  # 3
        utf8(DESCRIPTOR),  # 4
        u16_entry(ConstantTag.NAME_AND_TYPE, 3, 4),  # 5
        u16_entry(ConstantTag.METHODREF, 2, 5),  # 6
        struct.pack(">Bq", ConstantTag.LONG, LONG_VALUE),  # 7, 8
        struct.pack(">Bd", ConstantTag.DOUBLE, DOUBLE_VALUE),  # 9, 10
        struct.pack(">Bi", ConstantTag.INTEGER, INT_VALUE),  # 11
        struct.pack(">Bf", ConstantTag.FLOAT, FLOAT_VALUE),  # 12
        struct.pack(">BBH", ConstantTag.METHOD_HANDLE, 6, 6),  # 13
        u16_entry(ConstantTag.METHOD_TYPE, 4),  # 14
        u16_entry(ConstantTag.INVOKE_DYNAMIC, 0, 5),  # 15
        u16_entry(ConstantTag.STRING, 3),  # 16
    )
    reader = ClassReader(data)
    pool = read_constant_pool(reader)
    return pool, reader


def test_reader_round_trips_big_endian_values():
    data = struct.pack(">BHIQ", 0xAB, 0xBEEF, 0xCAFEBABE, 2**63 + 7)
    reader = ClassReader(data)
    assert reader.read_u8() == 0xAB
    assert reader.read_u16() == 0xBEEF
    assert reader.read_u32() == 0xCAFEBABE
    assert reader.read_u64() == 2**63 + 7
    assert reader.remaining == 0


def test_reader_u16s_and_bytes():
    reader = ClassReader(struct.pack(">HHHH", 3, 10, 20, 30) + b"tail")
    assert reader.read_u16s() == [10, 20, 30]
    assert reader.read_bytes(4) == b"tail"


def test_reader_truncated_data_raises():
    reader = ClassReader(b"\x01")
    with pytest.raises(ClassFormatError):
        reader.read_u16()
    with pytest.raises(ClassFormatError):
        ClassReader(b"abc").read_bytes(4)


def test_decode_mutf8_round_trip():
    for text in ("hello", "héllo", OBJECT):
        assert decode_mutf8(text.encode("utf-8")) == text


def test_pool_consumes_all_bytes_and_has_declared_size():
    pool, reader = sample_pool()
    assert len(pool) == 17
    assert reader.remaining == 0
    assert pool[0] is None


def test_class_and_member_references_resolve():
    pool, _ = sample_pool()
    assert pool.get_utf8(1) == OBJECT
    assert pool.get_class_name(2) == OBJECT
    assert isinstance(pool[2], ConstantClassInfo)
    assert pool[2].name() == OBJECT
    assert pool.get_name_and_type(5) == (METHOD, DESCRIPTOR)
    methodref = pool[6]
    assert isinstance(methodref, ConstantMethodrefInfo)
    assert methodref.class_name() == OBJECT
    assert methodref.name_and_descriptor() == (METHOD, DESCRIPTOR)


def test_numeric_constants():
    pool, _ = sample_pool()
    assert pool[7] == ConstantLongInfo(LONG_VALUE)
    assert pool[9] == ConstantDoubleInfo(DOUBLE_VALUE)
    assert pool[11] == ConstantIntegerInfo(INT_VALUE)
    assert pool[12] == ConstantFloatInfo(FLOAT_VALUE)


def test_long_and_double_take_two_slots():
    pool, _ = sample_pool()
    assert pool[8] is None
    assert pool[10] is None
    with pytest.raises(ClassFormatError):
        pool.get_constant_info(8)


def test_dynamic_constants():
    pool, _ = sample_pool()
    assert pool[13] == ConstantMethodHandleInfo(reference_kind=6, reference_index=6)
    assert pool[14] == ConstantMethodTypeInfo(descriptor_index=4)
    assert pool[15] == ConstantInvokeDynamicInfo(
        bootstrap_method_attr_index=0, name_and_type_index=5
    )


@pytest.mark.parametrize("index", [0, 17, 100, -1])
def test_invalid_index_raises(index):
    pool, _ = sample_pool()
    with pytest.raises(ClassFormatError):
        pool.get_constant_info(index)


def test_wrong_entry_kind_raises():
    pool, _ = sample_pool()
    with pytest.raises(ClassFormatError):
        pool.get_utf8(2)
    with pytest.raises(ClassFormatError):
        pool.get_class_name(1)
    with pytest.raises(ClassFormatError):
        pool.get_name_and_type(6)


def test_unknown_tag_raises():
    reader = ClassReader(pool_bytes(2, b"\x02\x00\x00"))
    with pytest.raises(ClassFormatError):
        read_constant_pool(reader)


def test_read_constant_info_interface_methodref():
    pool = ConstantPool([None, ConstantUtf8Info(OBJECT)])
    reader = ClassReader(u16_entry(ConstantTag.INTERFACE_METHODREF, 1, 2))
    info = read_constant_info(reader, pool)
    assert isinstance(info, ConstantInterfaceMethodrefInfo)
    assert (info.class_index, info.name_and_type_index) == (1, 2)
    assert reader.remaining == 0


def test_read_constant_info_name_and_type():
    reader = ClassReader(u16_entry(ConstantTag.NAME_AND_TYPE, 3, 4))
    assert read_constant_info(reader, ConstantPool()) == ConstantNameAndTypeInfo(3, 4)


def test_entries_share_the_pool():
    pool, _ = sample_pool()
    assert pool[2].pool is pool
    assert pool[6].pool is pool