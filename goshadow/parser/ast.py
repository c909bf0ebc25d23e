# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Typed declaration nodes read off a lark parse tree.

Only the two statement shapes the shadow check cares about are modelled, in
the same terms as Go's `go/ast`:

- `AssignStmt`: an assignment-like statement with its operator (`:=` for a
  short variable declaration, `=`/`op=` for reassignment) and its left-hand
  operands;
- `GenDecl`: a `var`/`const`/`type`/`import` declaration, grouped or not, with
  the names of its value specs.

Everything else in the tree is walked through but not materialized.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional, Tuple, Union

from lark import Token, Tree

from .parser import SourceFile

DEFINE = ":="

VAR = "var"
CONST = "const"
TYPE = "type"
IMPORT = "import"


@dataclass(frozen=True)
class Pos:
	"""Source position: character offset, 1-based line, 1-based byte column."""

	offset: int
	line: int
	column: int


@dataclass(frozen=True)
class Ident:
	name: str
	pos: Pos


@dataclass(frozen=True)
class Expr:
	"""Any operand that is not a bare identifier; only its kind and position are kept."""

	kind: str
	pos: Pos


Operand = Union[Ident, Expr]


@dataclass(frozen=True)
class AssignStmt:
	tok: str
	lhs: Tuple[Operand, ...]
	pos: Pos
	end: int


@dataclass(frozen=True)
class ValueSpec:
	names: Tuple[Ident, ...]


@dataclass(frozen=True)
class GenDecl:
	tok: str
	specs: Tuple[ValueSpec, ...]
	pos: Pos
	end: int


Node = Union[AssignStmt, GenDecl]


def walk(tree: Tree) -> Iterator[Tree]:
	"""Pre-order traversal over every subtree, children in source order."""
	stack = [tree]
	while stack:
		node = stack.pop()
		if not isinstance(node, Tree):
			continue
		yield node
		stack.extend(reversed(node.children))


def iter_nodes(source: SourceFile) -> Iterator[Node]:
	"""Yield the assignment and declaration nodes of `source` in pre-order."""
	for tree in walk(source.tree):
		build = _BUILDERS.get(_name(tree))
		if build is None:
			continue
		node = build(source, tree)
		if node is not None:
			yield node


def _build_short_var_decl(source: SourceFile, tree: Tree) -> AssignStmt:
	lhs = tree.children[0]
	return AssignStmt(
		tok=DEFINE,
		lhs=tuple(_operand(source, child) for child in lhs.children),
		pos=_pos(source, tree),
		end=tree.meta.end_pos,
	)


def _build_assignment(source: SourceFile, tree: Tree) -> AssignStmt:
	lhs, op, _rhs = tree.children
	op_token = next(child for child in op.children if isinstance(child, Token))
	return AssignStmt(
		tok=op_token.value,
		lhs=tuple(_operand(source, child) for child in lhs.children),
		pos=_pos(source, tree),
		end=tree.meta.end_pos,
	)


def _build_type_switch_guard(source: SourceFile, tree: Tree) -> Optional[AssignStmt]:
	# `switch x := v.(type)` binds x through an AssignStmt in go/ast; the bare
	# `switch v.(type)` form binds nothing.
	first = tree.children[0]
	if not (isinstance(first, Tree) and _name(first) == "expression_list"):
		return None
	return AssignStmt(
		tok=DEFINE,
		lhs=tuple(_operand(source, child) for child in first.children),
		pos=_pos(source, tree),
		end=tree.meta.end_pos,
	)


def _gen_decl_builder(tok: str, spec_rule: Optional[str]) -> Callable[[SourceFile, Tree], GenDecl]:
	def build(source: SourceFile, tree: Tree) -> GenDecl:
		specs = []
		if spec_rule is not None:
			for spec in tree.children:
				if isinstance(spec, Tree) and _name(spec) == spec_rule:
					specs.append(_value_spec(source, spec))
		return GenDecl(tok=tok, specs=tuple(specs), pos=_pos(source, tree), end=tree.meta.end_pos)

	return build


def _value_spec(source: SourceFile, spec: Tree) -> ValueSpec:
	names = spec.children[0]
	return ValueSpec(
		names=tuple(
			_ident(source, tok)
			for tok in names.children
			if isinstance(tok, Token) and tok.type == "NAME"
		)
	)


def _operand(source: SourceFile, node: Tree | Token) -> Operand:
	if isinstance(node, Tree) and _name(node) == "name":
		return _ident(source, node.children[0])
	if isinstance(node, Token):
		return Expr(kind=node.type, pos=_token_pos(source, node))
	return Expr(kind=_name(node), pos=_pos(source, node))


def _ident(source: SourceFile, token: Token) -> Ident:
	return Ident(name=token.value, pos=_token_pos(source, token))


def _pos(source: SourceFile, tree: Tree) -> Pos:
	offset = tree.meta.start_pos
	line, column = source.line_col(offset)
	return Pos(offset=offset, line=line, column=column)


def _token_pos(source: SourceFile, token: Token) -> Pos:
	line, column = source.line_col(token.start_pos)
	return Pos(offset=token.start_pos, line=line, column=column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


_BUILDERS: Dict[str, Callable[[SourceFile, Tree], Optional[Node]]] = {
	"short_var_decl": _build_short_var_decl,
	"assignment": _build_assignment,
	"type_switch_guard": _build_type_switch_guard,
	"var_decl": _gen_decl_builder(VAR, "var_spec"),
	"const_decl": _gen_decl_builder(CONST, "const_spec"),
	"type_decl": _gen_decl_builder(TYPE, None),
	"import_decl": _gen_decl_builder(IMPORT, None),
}


__all__ = [
	"AssignStmt",
	"CONST",
	"DEFINE",
	"Expr",
	"GenDecl",
	"IMPORT",
	"Ident",
	"Node",
	"Operand",
	"Pos",
	"TYPE",
	"VAR",
	"ValueSpec",
	"iter_nodes",
	"walk",
]
