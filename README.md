# minijvm

A small Java virtual machine written in Python, used as a library. It parses
class files (major versions 45 to 52, with a zero minor version above 45),
models the run-time data areas (threads, frames, local variables and operand
stacks), and interprets method bytecode.

The interpreter covers constants, loads and stores, stack manipulation,
int/long/float/double arithmetic, shifts and bitwise operations, conversions,
comparisons and conditional branches, `goto`, `tableswitch`, `lookupswitch`,
`goto_w`, `ifnull`/`ifnonnull` and `wide`.

## Installation

```
pip install .
```

## Parsing a class file

`minijvm.class_file.parse_class_file` takes the bytes of a class file and
returns a `ClassFile`. A bad magic number or a malformed constant pool raises
`ClassFormatError`; an unsupported version raises
`UnsupportedClassVersionError`.

```python
from pathlib import Path

from minijvm.class_file import parse_class_file

class_file = parse_class_file(Path("GuessTest.class").read_bytes())
print(class_file.major_version, class_file.minor_version)
print(class_file.class_name(), class_file.super_class_name())
print(class_file.interface_names())
for method in class_file.methods:
    print(method.name(), method.descriptor())
```

Each field and method is a `MemberInfo`; `code_attribute()` returns its
`CodeAttribute` (with `max_stack`, `max_locals` and `code`) or `None`.

## Running a method

`minijvm.interpreter.interpret` runs a method's code in a new `Thread`. It
keeps decoding and executing instructions until one fails; it then prints the
frame's local variables and operand stack and raises the error again.
Running off the end of the code raises `IndexError`, and an opcode it does not
implement raises `minijvm.factory.UnsupportedOpcodeError`.

```python
from minijvm.interpreter import interpret

main = next(
    m for m in class_file.methods
    if m.name() == "main" and m.descriptor() == "([Ljava/lang/String;)V"
)
interpret(main)
```

`minijvm.factory.new_instruction(opcode)` returns the instruction object for
a single opcode, for decoding bytecode by hand.

## Run-time data areas

```python
from minijvm.rtda import Thread

frame = Thread().new_frame(10, 10)
frame.local_vars.set_long(2, 2997924580)
frame.operand_stack.push_double(2.71828182845)
print(frame.local_vars.get_long(2), frame.operand_stack.pop_double())
```

## What it does not do

- There is no command-line program; the package is used from Python.
- There is no class path search: it does not look up classes in directories,
  jar or zip archives, or a JRE. Read the class file bytes yourself and pass
  them to `parse_class_file`.
- Method invocation, returns, object creation, arrays, field access and
  `ldc` are not implemented, so a method runs only until it reaches one of
  these (or the end of its code), and then stops with an error.

## Tests

```
pip install .[test]
pytest
```