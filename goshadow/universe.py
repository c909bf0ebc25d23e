# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go's predeclared identifiers (https://golang.org/ref/spec#Predeclared_identifiers).

The table is built once at import time and never mutated, so worker threads
read it without locking.
"""

from __future__ import annotations

UNIVERSE: frozenset[str] = frozenset(
	(
		# Types:
		"bool", "byte", "complex64", "complex128", "error", "float32", "float64",
		"int", "int8", "int16", "int32", "int64", "rune", "string",
		"uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
		# Constants:
		"true", "false", "iota",
		# Zero value:
		"nil",
		# Functions:
		"append", "cap", "close", "complex", "copy", "delete", "imag", "len",
		"make", "new", "panic", "print", "println", "real", "recover",
	)
)


__all__ = ["UNIVERSE"]
