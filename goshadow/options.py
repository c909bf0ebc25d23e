# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from goshadow.build.context import BuildContext, default_context
from goshadow.universe import UNIVERSE


@dataclass(frozen=True)
class CheckOptions:
	"""
	Knobs for one run of the checker.

	`context` selects the files each directory compiles to, `names` is the set
	of identifiers whose redeclaration is reported. Symlinked directories are
	only descended into when `follow_symlinks` is set. `max_workers` bounds the
	thread pool, not the number of queued directories.
	"""

	context: BuildContext = field(default_factory=default_context)
	names: FrozenSet[str] = UNIVERSE
	follow_symlinks: bool = False
	max_workers: Optional[int] = None


__all__ = ["CheckOptions"]
