# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
goshadow: report Go declarations that shadow predeclared identifiers.

The CLI entrypoint is `goshadow.cli:main`; `python -m goshadow ROOT` runs it.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
