# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go source parser built on lark.

The grammar lives next to this module in `grammar.lark`. Go terminates
statements with semicolons that the scanner inserts at line ends; lark's basic
lexer hands us every newline and comment and `SemicolonInserter` rewrites them
before the LALR parser sees the stream.
"""

from __future__ import annotations

import bisect
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from lark import Lark, Token, Tree, UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from goshadow.errors import ParseError

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


class _HeaderBraces:
	"""
	Find the `{` that opens the body of an if/for/switch/select statement.

	Between the keyword and its body, at the header's own nesting level, a `{`
	belongs to the statement unless it follows a composite type literal
	(`[]T`, `map[K]V`, `struct{...}`, `interface{...}`) or a function
	signature. Braces inside parentheses, brackets or other braces never do.
	Each open bracket saves the header state it interrupts and the matching
	close restores it.
	"""

	HEADER_KEYWORDS = {"if", "for", "switch", "select"}
	TYPE_KEYWORDS = {"func", "map", "chan", "struct", "interface"}
	OPERAND_TYPES = {"NAME", "NUMBER", "RUNE", "STRING", "RAW_STRING"}

	def __init__(self) -> None:
		self.header = False
		# A composite type or signature at header level may still take a `{`.
		self.pending = False
		self.stack: List[Tuple[bool, bool]] = []
		self.prev: Optional[Token] = None

	def feed(self, token: Token) -> Token:
		value = token.value
		out = token
		if token.type == "_SEMI":
			self.pending = False
		elif token.type in self.OPERAND_TYPES:
			pass
		elif value in self.HEADER_KEYWORDS:
			self.header = True
			self.pending = False
		elif value in self.TYPE_KEYWORDS:
			self.pending = self.header
		elif value == "[":
			if self.header and not self._after_operand():
				self.pending = True
			self._open(self.pending)
		elif value == "(":
			self._open(self.pending and self._prev_value() in ("func", ")"))
		elif value in (")", "]", "}"):
			self._close()
		elif value == "{":
			if self.header and not self.pending:
				out = Token.new_borrow_pos("_LBODY", value, token)
				self.header = False
				self._open(False)
			else:
				self._open(self._prev_value() in ("struct", "interface"))
		self.prev = token
		return out

	def _open(self, reopen_pending: bool) -> None:
		self.stack.append((self.header, reopen_pending))
		self.header = False
		self.pending = False

	def _close(self) -> None:
		if self.stack:
			self.header, self.pending = self.stack.pop()
		else:
			self.header = self.pending = False

	def _prev_value(self) -> str:
		return self.prev.value if self.prev is not None else ""

	def _after_operand(self) -> bool:
		prev = self.prev
		if prev is None:
			return False
		return prev.type in self.OPERAND_TYPES or prev.value in (")", "]", "}")


class SemicolonInserter:
	"""
	Post-lexer implementing Go's automatic semicolon insertion.

	A newline (or a general comment spanning lines, or the end of input) becomes
	a `_SEMI` token when the token before it is an identifier, a literal, one of
	the keywords `break continue fallthrough return`, or one of `++ -- ) ] }`.
	Comments are dropped. Inserted tokens carry the value "\\n" so parse errors
	can say "unexpected newline" like the Go compiler does.

	The `{` opening a statement body is retyped `_LBODY` (see `_HeaderBraces`)
	so the grammar can tell it from a composite literal's brace.

	State is local to each `process` call; one instance is shared by every parse
	that goes through the same `Lark` object.
	"""

	always_accept = ("NL", "LINE_COMMENT", "BLOCK_COMMENT")

	TERMINABLE_TYPES = {"NAME", "NUMBER", "RUNE", "STRING", "RAW_STRING"}

	TERMINABLE_VALUES = {
		"break",
		"continue",
		"fallthrough",
		"return",
		"++",
		"--",
		")",
		"]",
		"}",
	}

	def process(self, stream: Iterator[Token]) -> Iterator[Token]:
		can_terminate = False
		last: Token | None = None
		braces = _HeaderBraces()
		for token in stream:
			ttype = token.type
			if ttype == "NL" or (ttype == "BLOCK_COMMENT" and "\n" in token.value):
				if can_terminate:
					yield braces.feed(Token.new_borrow_pos("_SEMI", "\n", token))
					can_terminate = False
				continue
			if ttype in ("LINE_COMMENT", "BLOCK_COMMENT"):
				continue
			yield braces.feed(token)
			last = token
			can_terminate = self._is_terminable(token)
		if can_terminate and last is not None:
			yield Token.new_borrow_pos("_SEMI", "\n", last)

	def _is_terminable(self, token: Token) -> bool:
		if token.type in self.TERMINABLE_TYPES:
			return True
		# Keywords and punctuation are matched on their text; lark derives their
		# terminal names from the grammar.
		return token.value in self.TERMINABLE_VALUES


# Shared by every thread; LALR parsing keeps no state between calls.
_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="source_file",
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=SemicolonInserter(),
)


@dataclass
class SourceFile:
	"""
	One parsed Go file.

	Owned by the task that parsed it; `tree` is the raw lark parse tree and is
	read through `goshadow.parser.ast`.
	"""

	path: str
	text: str
	tree: Tree
	_line_starts: List[int] = field(default_factory=list, repr=False)

	def line_starts(self) -> List[int]:
		if not self._line_starts:
			starts = [0]
			for idx, ch in enumerate(self.text):
				if ch == "\n":
					starts.append(idx + 1)
			self._line_starts = starts
		return self._line_starts

	def line_col(self, offset: int) -> tuple[int, int]:
		"""
		Map a character offset to a 1-based line and 1-based *byte* column.

		Go positions count bytes, so a line holding non-ASCII text before the
		offset reports a larger column than its character index.
		"""
		starts = self.line_starts()
		line_idx = bisect.bisect_right(starts, offset) - 1
		start = starts[line_idx]
		return line_idx + 1, len(self.text[start:offset].encode("utf-8")) + 1


def parse_source(text: str, path: str = "<input>") -> SourceFile:
	"""Parse Go source text; raises ParseError with a Go-style message."""
	if text.startswith("\ufeff"):
		text = text[1:]
	started = time.perf_counter()
	try:
		tree = _PARSER.parse(text)
	except UnexpectedInput as exc:
		raise _parse_error(path, text, exc) from exc
	logger.debug("parsed %s in %.1fms", path, (time.perf_counter() - started) * 1000)
	return SourceFile(path=path, text=text, tree=tree)


def parse_file(path: str) -> SourceFile:
	try:
		data = Path(path).read_bytes()
	except OSError as exc:
		raise ParseError(path, 0, 0, exc.strerror or str(exc)) from exc
	return parse_source(data.decode("utf-8", errors="replace"), path)


def _parse_error(path: str, text: str, exc: UnexpectedInput) -> ParseError:
	if isinstance(exc, UnexpectedEOF) or (
		isinstance(exc, UnexpectedToken) and exc.token.type == "$END"
	):
		line = text.count("\n") + 1
		column = len(text) - (text.rfind("\n") + 1) + 1
		return ParseError(path, line, column, "unexpected EOF")
	if isinstance(exc, UnexpectedToken):
		token = exc.token
		if token.type == "_SEMI" and token.value == "\n":
			found = "newline"
		else:
			found = repr(str(token.value))
		return ParseError(path, exc.line, exc.column, f"unexpected {found}")
	if isinstance(exc, UnexpectedCharacters):
		return ParseError(path, exc.line, exc.column, f"invalid character {exc.char!r}")
	return ParseError(path, getattr(exc, "line", 0) or 0, getattr(exc, "column", 0) or 0, str(exc))


__all__ = ["SemicolonInserter", "SourceFile", "parse_file", "parse_source"]
