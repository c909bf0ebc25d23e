# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Resolve a directory to the Go package compiled from it.

`import_dir` follows Go's `build.ImportDir` closely enough to pick the same
files for an ordinary package: file-name suffixes, build constraints, test
files, cgo files and the package clause. It does not read GOFLAGS or the
environment and knows nothing about modules or vendoring.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from goshadow.errors import BuildError, InvalidGoFileError, MultiplePackageError, NoGoError

from .constraint import ConstraintError, should_build
from .context import BuildContext, default_context

logger = logging.getLogger(__name__)

_HEADER_TOKEN = re.compile(
	r"""
	(?P<space>[ \t\r\f]+)
	| (?P<newline>\n)
	| (?P<comment>//[^\n]*|/\*.*?\*/)
	| (?P<string>"(?:[^"\\\n]|\\.)*"|`[^`]*`)
	| (?P<name>[^\W\d]\w*)
	| (?P<punct>[();.])
	""",
	re.S | re.X,
)


@dataclass
class Package:
	dir: str
	name: str = ""
	go_files: List[str] = field(default_factory=list)
	cgo_files: List[str] = field(default_factory=list)
	test_go_files: List[str] = field(default_factory=list)
	ignored_go_files: List[str] = field(default_factory=list)

	def go_file_paths(self) -> List[str]:
		return [os.path.normpath(os.path.join(self.dir, name)) for name in self.go_files]


@dataclass(frozen=True)
class FileHeader:
	package: str
	imports: Tuple[str, ...]


def import_dir(path: str, context: Optional[BuildContext] = None) -> Package:
	"""
	Return the package in directory `path`.

	Raises `NoGoError` when nothing in the directory is buildable,
	`MultiplePackageError` when files disagree on the package name,
	`InvalidGoFileError` for unreadable or malformed file headers and a plain
	`BuildError` when the directory itself cannot be read.
	"""
	if context is None:
		context = default_context()
	pkg = Package(dir=path)
	first_file = ""
	bad: Optional[BuildError] = None

	for name in _list_go_files(path):
		if name.startswith("_") or name.startswith("."):
			continue
		if not context.good_os_arch_file(name):
			pkg.ignored_go_files.append(name)
			continue

		full = os.path.join(path, name)
		try:
			with open(full, "rb") as fh:
				content = fh.read().decode("utf-8", errors="replace")
		except OSError as exc:
			bad = bad or InvalidGoFileError(path, f"{full}: {exc.strerror or exc}")
			continue

		try:
			if not should_build(content, context.match_tag):
				pkg.ignored_go_files.append(name)
				continue
		except ConstraintError as exc:
			bad = bad or InvalidGoFileError(path, f"{full}: {exc}")
			continue

		try:
			header = read_file_header(content)
		except InvalidGoFileError as exc:
			bad = bad or InvalidGoFileError(path, f"{full}: {exc.message}")
			continue

		pkg_name = header.package
		if pkg_name == "documentation":
			pkg.ignored_go_files.append(name)
			continue

		is_test = name.endswith("_test.go")
		if is_test and pkg_name.endswith("_test") and pkg.name != pkg_name:
			pkg_name = pkg_name[: -len("_test")]

		if not pkg.name:
			pkg.name = pkg_name
			first_file = name
		elif pkg_name != pkg.name:
			bad = bad or MultiplePackageError(
				path,
				"",
				packages=(pkg.name, pkg_name),
				files=(first_file, name),
			)
			continue

		if "C" in header.imports:
			if is_test:
				bad = bad or InvalidGoFileError(path, f"{full}: use of cgo in test not supported")
				continue
			if context.cgo_enabled:
				pkg.cgo_files.append(name)
			else:
				pkg.ignored_go_files.append(name)
		elif is_test:
			pkg.test_go_files.append(name)
		else:
			pkg.go_files.append(name)

	if bad is not None:
		raise bad
	logger.debug(
		"%s: package %s, %d go files, %d ignored",
		path,
		pkg.name,
		len(pkg.go_files),
		len(pkg.ignored_go_files),
	)
	if not (pkg.go_files or pkg.cgo_files or pkg.test_go_files):
		raise NoGoError(path)
	return pkg


def _list_go_files(path: str) -> List[str]:
	try:
		with os.scandir(path) as entries:
			names = []
			for entry in entries:
				if not entry.name.endswith(".go"):
					continue
				# Symlinks are resolved; a link to a directory is not a file.
				if entry.is_dir():
					continue
				names.append(entry.name)
	except OSError as exc:
		raise BuildError(path, f'cannot find package "." in:\n\t{path}') from exc
	return sorted(names)


def read_file_header(content: str) -> FileHeader:
	"""Read the package clause and import paths at the top of a Go file."""
	tokens = _header_tokens(content)
	kind, value = next(tokens, ("eof", ""))
	if value != "package":
		raise InvalidGoFileError("", f"expected 'package', found {_describe(kind, value)}")
	kind, value = next(tokens, ("eof", ""))
	if kind != "name" or value == "_":
		raise InvalidGoFileError("", f"expected package name, found {_describe(kind, value)}")
	package = value

	imports: List[str] = []
	kind, value = next(tokens, ("eof", ""))
	while True:
		if kind == "semi":
			kind, value = next(tokens, ("eof", ""))
			continue
		if value != "import":
			break
		kind, value = next(tokens, ("eof", ""))
		if value == "(":
			kind, value = next(tokens, ("eof", ""))
			while value != ")":
				if kind == "semi":
					kind, value = next(tokens, ("eof", ""))
					continue
				imports.append(_import_spec(tokens, kind, value))
				kind, value = next(tokens, ("eof", ""))
			kind, value = next(tokens, ("eof", ""))
		else:
			imports.append(_import_spec(tokens, kind, value))
			kind, value = next(tokens, ("eof", ""))
	return FileHeader(package=package, imports=tuple(imports))


def _import_spec(tokens: Iterator[Tuple[str, str]], kind: str, value: str) -> str:
	if kind == "name" or value == ".":
		kind, value = next(tokens, ("eof", ""))
	if kind != "string":
		raise InvalidGoFileError("", f"expected import path, found {_describe(kind, value)}")
	return value[1:-1]


def _header_tokens(content: str) -> Iterator[Tuple[str, str]]:
	"""
	Yield `(kind, text)` pairs, with newlines turned into `("semi", ...)` where
	Go would insert a semicolon. Comments and spaces are dropped.
	"""
	pos = 0
	prev = ""
	while pos < len(content):
		match = _HEADER_TOKEN.match(content, pos)
		if match is None:
			yield "other", content[pos]
			return
		pos = match.end()
		kind = match.lastgroup
		value = match.group()
		if kind == "space":
			continue
		if kind == "comment":
			if "\n" not in value:
				continue
			kind, value = "newline", "\n"
		if kind == "newline":
			if prev in ("name", "string", ")"):
				prev = ""
				yield "semi", "\n"
			continue
		if value == ";":
			kind = "semi"
		prev = ")" if value == ")" else kind
		yield kind, value


def _describe(kind: str, value: str) -> str:
	if kind == "eof":
		return "EOF"
	if kind == "semi":
		return "newline" if value == "\n" else "';'"
	return repr(value)


__all__ = ["FileHeader", "Package", "import_dir", "read_file_header"]
