# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Which files of a directory make up a Go package, for a given target."""

from .constraint import ConstraintError, read_header, should_build
from .context import BuildContext, default_context
from .importer import FileHeader, Package, import_dir, read_file_header

__all__ = [
	"BuildContext",
	"ConstraintError",
	"FileHeader",
	"Package",
	"default_context",
	"import_dir",
	"read_file_header",
	"read_header",
	"should_build",
]
