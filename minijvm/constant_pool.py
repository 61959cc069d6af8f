"""Big-endian class file reader and the class constant pool."""

from __future__ import annotations

import struct
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union


class ClassFormatError(ValueError):
    """Raised when class file data is malformed."""


class ClassReader:
    """Reads unsigned big-endian values from class file data."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _take(self, count: int) -> bytes:
        end = self._pos + count
        if count < 0 or end > len(self._data):
            raise ClassFormatError("unexpected end of class data")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u16(self) -> int:
        return int.from_bytes(self._take(2), "big")

    def read_u32(self) -> int:
        return int.from_bytes(self._take(4), "big")

    def read_u64(self) -> int:
        return int.from_bytes(self._take(8), "big")

    def read_u16s(self) -> list[int]:
        """Read a u2 count followed by that many u2 values."""
        return [self.read_u16() for _ in range(self.read_u16())]

    def read_bytes(self, length: int) -> bytes:
        return self._take(length)


class ConstantTag(IntEnum):
    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    INVOKE_DYNAMIC = 18


def decode_mutf8(data: bytes) -> str:
    """Decode the text of a Utf8 constant."""
    return bytes(data).decode("utf-8", errors="replace")


@dataclass
class ConstantIntegerInfo:
    value: int


@dataclass
class ConstantFloatInfo:
    value: float


@dataclass
class ConstantLongInfo:
    value: int


@dataclass
class ConstantDoubleInfo:
    value: float


@dataclass
class ConstantUtf8Info:
    value: str


@dataclass
class _ConstantStringInfo:
    pool: ConstantPool = field(repr=False, compare=False)
    string_index: int


@dataclass
class ConstantClassInfo:
    pool: ConstantPool = field(repr=False, compare=False)
    name_index: int

    def name(self) -> str:
        return self.pool.get_utf8(self.name_index)


@dataclass
class ConstantMemberrefInfo:
    pool: ConstantPool = field(repr=False, compare=False)
    class_index: int
    name_and_type_index: int

    def class_name(self) -> str:
        return self.pool.get_class_name(self.class_index)

    def name_and_descriptor(self) -> tuple[str, str]:
        return self.pool.get_name_and_type(self.name_and_type_index)


class ConstantFieldrefInfo(ConstantMemberrefInfo):
    pass


class ConstantMethodrefInfo(ConstantMemberrefInfo):
    pass


class ConstantInterfaceMethodrefInfo(ConstantMemberrefInfo):
    pass


@dataclass
class ConstantNameAndTypeInfo:
    name_index: int
    descriptor_index: int


@dataclass
class ConstantMethodHandleInfo:
    reference_kind: int
    reference_index: int


@dataclass
class ConstantMethodTypeInfo:
    descriptor_index: int


@dataclass
class ConstantInvokeDynamicInfo:
    bootstrap_method_attr_index: int
    name_and_type_index: int


ConstantInfo = Union[
    ConstantIntegerInfo,
    ConstantFloatInfo,
    ConstantLongInfo,
    ConstantDoubleInfo,
    ConstantUtf8Info,
    _ConstantStringInfo,
    ConstantClassInfo,
    ConstantMemberrefInfo,
    ConstantNameAndTypeInfo,
    ConstantMethodHandleInfo,
    ConstantMethodTypeInfo,
    ConstantInvokeDynamicInfo,
]


class ConstantPool:
    """The constant pool of a class; index 0 and the slot after a long or double are empty."""

    def __init__(self, entries: Iterable[Optional[ConstantInfo]] = ()) -> None:
        self._entries: list[Optional[ConstantInfo]] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Optional[ConstantInfo]]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Optional[ConstantInfo]:
        return self._entries[index]

    def __setitem__(self, index: int, info: Optional[ConstantInfo]) -> None:
        self._entries[index] = info

    def __repr__(self) -> str:
        return f"ConstantPool(size={len(self._entries)})"

    def get_constant_info(self, index: int) -> ConstantInfo:
        if 0 <= index < len(self._entries):
            info = self._entries[index]
            if info is not None:
                return info
        raise ClassFormatError(f"invalid constant pool index: {index}")

    def _get(self, index: int, kind: type):
        info = self.get_constant_info(index)
        if not isinstance(info, kind):
            raise ClassFormatError(
                f"constant pool entry {index} is {type(info).__name__}, "
                f"expected {kind.__name__}"
            )
        return info

    def get_name_and_type(self, index: int) -> tuple[str, str]:
        info = self._get(index, ConstantNameAndTypeInfo)
        return self.get_utf8(info.name_index), self.get_utf8(info.descriptor_index)

    def get_class_name(self, index: int) -> str:
        return self.get_utf8(self._get(index, ConstantClassInfo).name_index)

    def get_utf8(self, index: int) -> str:
        return self._get(index, ConstantUtf8Info).value


def _unpack(fmt: str, reader: ClassReader, size: int):
    return struct.unpack(fmt, reader.read_bytes(size))[0]


def _read_utf8(reader: ClassReader, pool: ConstantPool) -> ConstantUtf8Info:
    length = reader.read_u16()
    return ConstantUtf8Info(decode_mutf8(reader.read_bytes(length)))


_READERS: dict[ConstantTag, Callable[[ClassReader, ConstantPool], ConstantInfo]] = {
    ConstantTag.INTEGER: lambda r, p: ConstantIntegerInfo(_unpack(">i", r, 4)),
    ConstantTag.FLOAT: lambda r, p: ConstantFloatInfo(_unpack(">f", r, 4)),
    ConstantTag.LONG: lambda r, p: ConstantLongInfo(_unpack(">q", r, 8)),
    ConstantTag.DOUBLE: lambda r, p: ConstantDoubleInfo(_unpack(">d", r, 8)),
    ConstantTag.UTF8: _read_utf8,
    ConstantTag.STRING: lambda r, p: _ConstantStringInfo(p, r.read_u16()),
    ConstantTag.CLASS: lambda r, p: ConstantClassInfo(p, r.read_u16()),
    ConstantTag.FIELDREF: lambda r, p: ConstantFieldrefInfo(p, r.read_u16(), r.read_u16()),
    ConstantTag.METHODREF: lambda r, p: ConstantMethodrefInfo(p, r.read_u16(), r.read_u16()),
    ConstantTag.INTERFACE_METHODREF: lambda r, p: ConstantInterfaceMethodrefInfo(
        p, r.read_u16(), r.read_u16()
    ),
    ConstantTag.NAME_AND_TYPE: lambda r, p: ConstantNameAndTypeInfo(r.read_u16(), r.read_u16()),
    ConstantTag.METHOD_HANDLE: lambda r, p: ConstantMethodHandleInfo(r.read_u8(), r.read_u16()),
    ConstantTag.METHOD_TYPE: lambda r, p: ConstantMethodTypeInfo(r.read_u16()),
    ConstantTag.INVOKE_DYNAMIC: lambda r, p: ConstantInvokeDynamicInfo(
        r.read_u16(), r.read_u16()
    ),
}


def read_constant_info(reader: ClassReader, pool: ConstantPool) -> ConstantInfo:
    """Read one tagged constant pool entry."""
    raw_tag = reader.read_u8()
    try:
        tag = ConstantTag(raw_tag)
    except ValueError:
        raise ClassFormatError(f"constant pool tag {raw_tag}") from None
    return _READERS[tag](reader, pool)


def read_constant_pool(reader: ClassReader) -> ConstantPool:
    """Read the constant pool count and its entries."""
    count = reader.read_u16()
    pool = ConstantPool([None] * count)
    index = 1
    while index < count:
        info = read_constant_info(reader, pool)
        pool[index] = info
        # longs and doubles take two slots
        index += 2 if isinstance(info, (ConstantLongInfo, ConstantDoubleInfo)) else 1
    return pool