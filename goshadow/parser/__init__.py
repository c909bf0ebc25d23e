# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from .ast import (
	CONST,
	DEFINE,
	IMPORT,
	TYPE,
	VAR,
	AssignStmt,
	Expr,
	GenDecl,
	Ident,
	Node,
	Pos,
	ValueSpec,
	iter_nodes,
)
from .parser import SemicolonInserter, SourceFile, parse_file, parse_source
from .printer import render

__all__ = [
	"AssignStmt",
	"CONST",
	"DEFINE",
	"Expr",
	"GenDecl",
	"IMPORT",
	"Ident",
	"Node",
	"Pos",
	"SemicolonInserter",
	"SourceFile",
	"TYPE",
	"VAR",
	"ValueSpec",
	"iter_nodes",
	"parse_file",
	"parse_source",
	"render",
]
