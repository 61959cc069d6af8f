"""Class file structure: attributes, fields, methods and the class itself."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional, Union

from minijvm.constant_pool import (
    ClassFormatError,
    ClassReader,
    ConstantPool,
    read_constant_pool,
)

_MAGIC = 0xCAFEBABE


class UnsupportedClassVersionError(ClassFormatError):
    """Raised when the class file version is not supported."""


@dataclass
class ExceptionTableEntry:
    start_pc: int
    end_pc: int
    handler_pc: int
    catch_type: int


@dataclass
class CodeAttribute:
    max_stack: int
    max_locals: int
    code: bytes
    exception_table: list[ExceptionTableEntry] = field(default_factory=list)
    attributes: list["AttributeInfo"] = field(default_factory=list)


@dataclass
class ConstantValueAttribute:
    constant_value_index: int


@dataclass
class ExceptionsAttribute:
    exception_index_table: list[int] = field(default_factory=list)


@dataclass
class LineNumberTableEntry:
    start_pc: int
    line_number: int


@dataclass
class LineNumberTableAttribute:
    line_number_table: list[LineNumberTableEntry] = field(default_factory=list)


@dataclass
class LocalVariableTableEntry:
    start_pc: int
    length: int
    name_index: int
    descriptor_index: int
    index: int


@dataclass
class LocalVariableTableAttribute:
    local_variable_table: list[LocalVariableTableEntry] = field(default_factory=list)


@dataclass
class DeprecatedAttribute:
    """Marker attribute with no content."""


@dataclass
class SyntheticAttribute:
    """Marker attribute with no content."""


@dataclass
class SourceFileAttribute:
    pool: ConstantPool = field(repr=False, compare=False)
    source_file_index: int

    def file_name(self) -> str:
        return self.pool.get_utf8(self.source_file_index)


@dataclass
class UnparsedAttribute:
    name: str
    length: int
    info: bytes


AttributeInfo = Union[
    CodeAttribute,
    ConstantValueAttribute,
    ExceptionsAttribute,
    LineNumberTableAttribute,
    LocalVariableTableAttribute,
    DeprecatedAttribute,
    SyntheticAttribute,
    SourceFileAttribute,
    UnparsedAttribute,
]


def _read_code(reader: ClassReader, pool: ConstantPool) -> CodeAttribute:
    max_stack = reader.read_u16()
    max_locals = reader.read_u16()
    code = reader.read_bytes(reader.read_u32())
    exception_table = [
        ExceptionTableEntry(
            reader.read_u16(), reader.read_u16(), reader.read_u16(), reader.read_u16()
        )
        for _ in range(reader.read_u16())
    ]
    attributes = read_attributes(reader, pool)
    return CodeAttribute(max_stack, max_locals, code, exception_table, attributes)


def _read_line_numbers(reader: ClassReader, pool: ConstantPool) -> LineNumberTableAttribute:
    return LineNumberTableAttribute(
        [
            LineNumberTableEntry(reader.read_u16(), reader.read_u16())
            for _ in range(reader.read_u16())
        ]
    )


def _read_local_variables(
    reader: ClassReader, pool: ConstantPool
) -> LocalVariableTableAttribute:
    return LocalVariableTableAttribute(
        [
            LocalVariableTableEntry(
                reader.read_u16(),
                reader.read_u16(),
                reader.read_u16(),
                reader.read_u16(),
                reader.read_u16(),
            )
            for _ in range(reader.read_u16())
        ]
    )


_ATTRIBUTE_READERS: dict[str, Callable[[ClassReader, ConstantPool], AttributeInfo]] = {
    "Code": _read_code,
    "ConstantValue": lambda r, p: ConstantValueAttribute(r.read_u16()),
    "Deprecated": lambda r, p: DeprecatedAttribute(),
    "Exceptions": lambda r, p: ExceptionsAttribute(r.read_u16s()),
    "LineNumberTable": _read_line_numbers,
    "LocalVariableTable": _read_local_variables,
    "SourceFile": lambda r, p: SourceFileAttribute(p, r.read_u16()),
    "Synthetic": lambda r, p: SyntheticAttribute(),
}


def read_attribute(reader: ClassReader, pool: ConstantPool) -> AttributeInfo:
    """Read one attribute, keeping the raw bytes of kinds it does not know."""
    name = pool.get_utf8(reader.read_u16())
    length = reader.read_u32()
    read = _ATTRIBUTE_READERS.get(name)
    if read is None:
        return UnparsedAttribute(name, length, reader.read_bytes(length))
    return read(reader, pool)


def read_attributes(reader: ClassReader, pool: ConstantPool) -> list[AttributeInfo]:
    """Read a u2 count followed by that many attributes."""
    return [read_attribute(reader, pool) for _ in range(reader.read_u16())]


@dataclass
class MemberInfo:
    """A field or method of a class."""

    pool: ConstantPool = field(repr=False, compare=False)
    access_flags: int
    name_index: int
    descriptor_index: int
    attributes: list[AttributeInfo] = field(default_factory=list)

    def name(self) -> str:
        return self.pool.get_utf8(self.name_index)

    def descriptor(self) -> str:
        return self.pool.get_utf8(self.descriptor_index)

    def code_attribute(self) -> Optional[CodeAttribute]:
        """Return the member's Code attribute, or None if it has none."""
        return next(
            (attr for attr in self.attributes if isinstance(attr, CodeAttribute)), None
        )


def read_member(reader: ClassReader, pool: ConstantPool) -> MemberInfo:
    access_flags = reader.read_u16()
    name_index = reader.read_u16()
    descriptor_index = reader.read_u16()
    attributes = read_attributes(reader, pool)
    return MemberInfo(pool, access_flags, name_index, descriptor_index, attributes)


def read_members(reader: ClassReader, pool: ConstantPool) -> list[MemberInfo]:
    return [read_member(reader, pool) for _ in range(reader.read_u16())]


@dataclass
class ClassFile:
    """A parsed class file."""

    minor_version: int
    major_version: int
    constant_pool: ConstantPool = field(repr=False)
    access_flags: int
    this_class: int
    super_class: int
    interfaces: list[int]
    fields: list[MemberInfo]
    methods: list[MemberInfo]
    attributes: list[AttributeInfo]

    def class_name(self) -> str:
        return self.constant_pool.get_class_name(self.this_class)

    def super_class_name(self) -> str:
        """Return the superclass name, or "" for a class with none."""
        if self.super_class > 0:
            return self.constant_pool.get_class_name(self.super_class)
        return ""

    def interface_names(self) -> list[str]:
        return [self.constant_pool.get_class_name(index) for index in self.interfaces]


def _check_version(minor: int, major: int) -> None:
    if major == 45:
        return
    if 46 <= major <= 52 and minor == 0:
        return
    raise UnsupportedClassVersionError(f"unsupported class version: {major}.{minor}")


def parse_class_file(data: bytes) -> ClassFile:
    """Parse class file bytes into a ClassFile."""
    reader = ClassReader(data)
    if reader.read_u32() != _MAGIC:
        raise ClassFormatError("bad magic number")
    minor = reader.read_u16()
    major = reader.read_u16()
    _check_version(minor, major)
    pool = read_constant_pool(reader)
    access_flags = reader.read_u16()
    this_class = reader.read_u16()
    super_class = reader.read_u16()
    interfaces = reader.read_u16s()
    fields = read_members(reader, pool)
    methods = read_members(reader, pool)
    attributes = read_attributes(reader, pool)
    return ClassFile(
        minor_version=minor,
        major_version=major,
        constant_pool=pool,
        access_flags=access_flags,
        this_class=this_class,
        super_class=super_class,
        interfaces=interfaces,
        fields=fields,
        methods=methods,
        attributes=attributes,
    )