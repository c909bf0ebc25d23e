# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Render declaration nodes back to text.

Nodes are printed from their source slice rather than re-formatted from
the tree. For gofmt-formatted input this reproduces what `go/format` prints for
a bare node: comments are gone, a line that held only a comment disappears,
and continuation lines lose the indentation of the node's first line.
"""

from __future__ import annotations

import re
from typing import Union

from .ast import AssignStmt, GenDecl
from .parser import SourceFile

# Literals are matched so comment markers inside them are left alone.
_COMMENT_RE = re.compile(
	r"""(?P<literal>"(?:[^"\\\n]|\\.)*"|`[^`]*`|'(?:[^'\\\n]|\\.)*')"""
	r"""|(?P<comment>//[^\n]*|/\*[\s\S]*?\*/)"""
)

# Go source may not contain NUL, so it can stand in for a removed comment.
_CUT = "\x00"


def render(source: SourceFile, node: Union[AssignStmt, GenDecl]) -> str:
	text = source.text[node.pos.offset:node.end].replace("\r\n", "\n")
	lines = _strip_comments(text).split("\n")
	if len(lines) == 1:
		return lines[0]
	indent = _leading_indent(source, node.pos.offset)
	out = [lines[0]]
	for line in lines[1:]:
		if indent and line.startswith(indent):
			line = line[len(indent):]
		out.append(line.rstrip("\r"))
	return "\n".join(out)


def _strip_comments(text: str) -> str:
	cut = _COMMENT_RE.sub(lambda m: _CUT if m.group("comment") else m.group(0), text)
	if _CUT not in cut:
		return text
	lines = []
	for line in cut.split("\n"):
		if _CUT in line:
			line = line.replace(_CUT, "").rstrip()
			if not line:
				continue
		lines.append(line)
	return "\n".join(lines)


def _leading_indent(source: SourceFile, offset: int) -> str:
	line_start = source.text.rfind("\n", 0, offset) + 1
	prefix = source.text[line_start:offset]
	return prefix[: len(prefix) - len(prefix.lstrip(" \t"))]


__all__ = ["render"]
