"""A small Java virtual machine: class file parsing, run-time data areas and bytecode interpretation."""

__version__ = "0.5.0"