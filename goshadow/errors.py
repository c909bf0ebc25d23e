# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error types raised by the parser and the package importer.

None of these abort a walk: `ParseError` is reported per file and
`BuildError` makes the walker skip one directory's files.
"""

from __future__ import annotations

from dataclasses import dataclass


class GoshadowError(Exception):
	"""Base class for errors raised by goshadow."""


@dataclass(eq=False)
class ParseError(GoshadowError):
	"""
	A Go source file could not be read or parsed.

	`line`/`column` are 1-based; a line of 0 means the failure has no source
	position (e.g. the file could not be opened).
	"""

	path: str
	line: int
	column: int
	message: str

	def __str__(self) -> str:
		return self.format_human()

	def format_human(self) -> str:
		if self.line <= 0:
			return f"{self.path}: {self.message}"
		return f"{self.path}:{self.line}:{self.column}: {self.message}"


@dataclass(eq=False)
class BuildError(GoshadowError):
	"""A directory could not be resolved as a compilable package."""

	path: str
	message: str

	def __str__(self) -> str:
		return self.message


class NoGoError(BuildError):
	def __init__(self, path: str) -> None:
		super().__init__(path, f"no buildable Go source files in {path}")


@dataclass(eq=False)
class MultiplePackageError(BuildError):
	packages: tuple[str, ...] = ()
	files: tuple[str, ...] = ()

	def __str__(self) -> str:
		return (
			f"found packages {self.packages[0]} ({self.files[0]}) and "
			f"{self.packages[1]} ({self.files[1]}) in {self.path}"
		)


class InvalidGoFileError(BuildError):
	"""A file's header (package clause and imports) is unreadable or malformed."""


__all__ = [
	"BuildError",
	"GoshadowError",
	"InvalidGoFileError",
	"MultiplePackageError",
	"NoGoError",
	"ParseError",
]
