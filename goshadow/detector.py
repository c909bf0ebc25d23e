# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Find declarations that reuse the name of a predeclared identifier.

The check is lexical. Two node shapes are inspected:

- an `AssignStmt` whose operator is `:=`; every left-hand operand that is a
  plain identifier in the name set yields one violation for the whole
  statement;
- a `var` `GenDecl`; every declared name in the set yields one violation for
  the whole declaration, grouped or not.

Nothing else is looked at: parameters, results, receivers, struct fields,
range variables, constants and types are never reported.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, AbstractSet, Iterator, List

from goshadow.errors import ParseError
from goshadow.parser import AssignStmt, GenDecl, Ident, SourceFile, iter_nodes, parse_file, render
from goshadow.parser.ast import DEFINE, VAR, Node
from goshadow.universe import UNIVERSE

if TYPE_CHECKING:
	from goshadow.report import Reporter


@dataclass(frozen=True)
class Violation:
	path: str
	line: int
	column: int
	text: str
	name: str


def find_violations(source: SourceFile, names: AbstractSet[str] = UNIVERSE) -> List[Violation]:
	"""All violations in `source`, in pre-order of their declaration nodes."""
	return list(_iter_violations(source, names))


def _iter_violations(source: SourceFile, names: AbstractSet[str]) -> Iterator[Violation]:
	for node in iter_nodes(source):
		shadowed = _shadowed_names(node, names)
		if not shadowed:
			continue
		text = render(source, node)
		for name in shadowed:
			yield Violation(
				path=source.path,
				line=node.pos.line,
				column=node.pos.column,
				text=text,
				name=name,
			)


def _shadowed_names(node: Node, names: AbstractSet[str]) -> List[str]:
	if isinstance(node, AssignStmt):
		if node.tok != DEFINE:
			return []
		return [expr.name for expr in node.lhs if isinstance(expr, Ident) and expr.name in names]
	if isinstance(node, GenDecl):
		if node.tok != VAR:
			return []
		return [ident.name for spec in node.specs for ident in spec.names if ident.name in names]
	return []


def check_file(path: str, reporter: "Reporter", names: AbstractSet[str] = UNIVERSE) -> int:
	"""
	Parse one file and report what it shadows.

	A parse failure is handed to the reporter and the file is skipped. Returns
	the number of violations reported.
	"""
	try:
		source = parse_file(path)
	except ParseError as exc:
		reporter.error(exc)
		return 0
	count = 0
	for violation in _iter_violations(source, names):
		reporter.report(violation)
		count += 1
	return count


__all__ = ["Violation", "check_file", "find_violations"]
