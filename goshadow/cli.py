# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command line entrypoint: `goshadow ROOT`.

Output on stdout is the report and nothing else; diagnostics about skipped
directories go through logging to stderr.
"""

from __future__ import annotations

import argparse
import logging
import sys

from goshadow.options import CheckOptions
from goshadow.report import Reporter
from goshadow.walker import PackageWalker


def main(argv: list[str] | None = None) -> int:
	"""Run the checker; returns 1 only when no root was given."""
	parser = argparse.ArgumentParser(
		prog="goshadow",
		description="Report Go declarations that shadow predeclared identifiers",
	)
	parser.add_argument("root", nargs="?", help="Directory to scan recursively")
	args = parser.parse_args(argv)

	if args.root is None:
		print("Supply a directory argument")
		return 1

	logging.basicConfig(level=logging.WARNING, stream=sys.stderr, format="%(name)s: %(levelname)s: %(message)s")
	walker = PackageWalker(Reporter(), CheckOptions())
	walker.walk(args.root)
	return 0


if __name__ == "__main__":
	sys.exit(main())
