# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Build constraints: `//go:build` expressions and legacy `// +build` lines.

Only the file header counts: the run of blank lines and comments before the
package clause. A `//go:build` line anywhere in that run wins; otherwise every
`// +build` line that precedes the last blank line of the run must be
satisfied.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import LarkError

from goshadow.errors import GoshadowError

_EXPR_GRAMMAR = r"""
?start: or_expr
?or_expr: and_expr ("||" and_expr)*
?and_expr: unary ("&&" unary)*
?unary: "!" unary -> not_expr
	| "(" or_expr ")"
	| tag
tag: TAG

TAG: /[A-Za-z0-9_.]+/

%import common.WS_INLINE
%ignore WS_INLINE
"""

# Shared by every thread; LALR parsing keeps no state between calls.
_EXPR_PARSER = Lark(_EXPR_GRAMMAR, parser="lalr", start="start")

_GO_BUILD_RE = re.compile(r"^//go:build(?:\s|$)")
_PLUS_BUILD_RE = re.compile(r"^//\s*\+build(?:\s|$)")

Matcher = Callable[[str], bool]


class ConstraintError(GoshadowError):
	"""A `//go:build` line that does not parse."""


@dataclass(frozen=True)
class Header:
	go_build: Optional[str]
	plus_build: Tuple[str, ...]


def parse_expr(expr: str) -> Tree:
	try:
		return _EXPR_PARSER.parse(expr)
	except LarkError as exc:
		raise ConstraintError(f"parsing //go:build line: {expr!r}: {exc}") from exc


def eval_expr(tree: Tree | Token, match: Matcher) -> bool:
	kind = tree.data if isinstance(tree, Tree) else "tag"
	if kind == "tag":
		token = tree.children[0] if isinstance(tree, Tree) else tree
		return match(str(token))
	if kind == "not_expr":
		return not eval_expr(tree.children[0], match)
	if kind == "and_expr":
		return all(eval_expr(child, match) for child in tree.children)
	if kind == "or_expr":
		return any(eval_expr(child, match) for child in tree.children)
	raise ConstraintError(f"unexpected build expression node {kind!r}")


def eval_plus_build(line: str, match: Matcher) -> bool:
	"""
	Evaluate one `// +build` line: space-separated options are OR'ed, and
	the comma-separated terms of an option are AND'ed.
	"""
	fields = _PLUS_BUILD_RE.sub("", line, count=1).split()
	for option in fields:
		if all(_eval_plus_term(term, match) for term in option.split(",")):
			return True
	return False


def _eval_plus_term(term: str, match: Matcher) -> bool:
	negated = term.startswith("!")
	if negated:
		term = term[1:]
	# `!!x` and malformed names never match.
	if not term or term.startswith("!") or not re.fullmatch(r"[A-Za-z0-9_.]+", term):
		return False
	return not match(term) if negated else match(term)


def read_header(content: str) -> Header:
	"""
	Collect the constraint lines of a file header.

	Returns the `//go:build` expression (if any) and the `// +build` lines that
	come before the last blank line of the leading comment block.
	"""
	go_build: Optional[str] = None
	plus: List[Tuple[int, str]] = []
	last_blank = -1
	in_block = False
	for idx, raw in enumerate(content.splitlines()):
		line = raw.strip()
		if in_block:
			end = line.find("*/")
			if end < 0:
				continue
			in_block = False
			line = line[end + 2:].strip()
			if not line:
				continue
		if not line:
			last_blank = idx
			continue
		if line.startswith("//"):
			if _GO_BUILD_RE.match(line):
				if go_build is not None:
					raise ConstraintError("multiple //go:build comments")
				go_build = line[len("//go:build"):].strip()
			elif _PLUS_BUILD_RE.match(line):
				plus.append((idx, line))
			continue
		if line.startswith("/*"):
			end = line.find("*/", 2)
			if end < 0:
				in_block = True
				continue
			if not line[end + 2:].strip():
				continue
		break
	return Header(
		go_build=go_build,
		plus_build=tuple(text for idx, text in plus if idx < last_blank),
	)


def should_build(content: str, match: Matcher) -> bool:
	"""Report whether the header constraints of `content` are satisfied."""
	header = read_header(content)
	if header.go_build is not None:
		return eval_expr(parse_expr(header.go_build), match)
	return all(eval_plus_build(line, match) for line in header.plus_build)


__all__ = [
	"ConstraintError",
	"Header",
	"eval_expr",
	"eval_plus_build",
	"parse_expr",
	"read_header",
	"should_build",
]
