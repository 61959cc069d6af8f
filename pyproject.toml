[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minijvm"
version = "0.5.0"
description = "A small Java virtual machine: class file parsing, run-time data areas and a bytecode interpreter"
requires-python = ">=3.10"
dependencies = []
keywords = ["jvm", "java", "bytecode", "interpreter", "classfile", "virtual machine"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Programming Language :: Java",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["minijvm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
