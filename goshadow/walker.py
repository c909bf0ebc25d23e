# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Concurrent directory walk.

Every directory is one task on a thread pool. A task resolves its directory
to a package, checks that package's files one after another, then spawns a
task per child directory and returns without waiting for them. `walk` blocks
until the whole fan-out has drained.
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Set, Tuple

from goshadow.build import import_dir
from goshadow.detector import check_file
from goshadow.errors import BuildError
from goshadow.options import CheckOptions
from goshadow.report import Reporter

logger = logging.getLogger(__name__)


class VisitedPaths:
	"""Set of directories already claimed by a task."""

	def __init__(self) -> None:
		self._paths: Set[str] = set()
		self._lock = threading.Lock()

	def add(self, path: str) -> bool:
		"""Insert `path`; False if it was already present."""
		with self._lock:
			if path in self._paths:
				return False
			self._paths.add(path)
			return True

	def __contains__(self, path: object) -> bool:
		with self._lock:
			return path in self._paths

	def __len__(self) -> int:
		with self._lock:
			return len(self._paths)


class TaskGroup:
	"""
	Fire-and-forget tasks on an executor, joined as a whole.

	Tasks may spawn further tasks. `wait` returns once no task is pending. A
	task must not raise: its future is never looked at.
	"""

	def __init__(self, executor: ThreadPoolExecutor) -> None:
		self._executor = executor
		self._cond = threading.Condition()
		self._pending = 0

	def spawn(self, fn: Callable[..., Any], *args: Any) -> None:
		with self._cond:
			self._pending += 1
		try:
			self._executor.submit(self._run, fn, args)
		except BaseException:
			self._done()
			raise

	def wait(self) -> None:
		with self._cond:
			while self._pending:
				self._cond.wait()

	def _run(self, fn: Callable[..., Any], args: Tuple[Any, ...]) -> None:
		try:
			fn(*args)
		finally:
			self._done()

	def _done(self) -> None:
		with self._cond:
			self._pending -= 1
			if not self._pending:
				self._cond.notify_all()


@dataclass
class WalkResult:
	visited_dirs: List[str] = field(default_factory=list)
	checked_files: List[str] = field(default_factory=list)
	failures: List[Tuple[str, BaseException]] = field(default_factory=list)


class PackageWalker:
	def __init__(self, reporter: Optional[Reporter] = None, options: Optional[CheckOptions] = None) -> None:
		self.reporter = reporter if reporter is not None else Reporter()
		self.options = options if options is not None else CheckOptions()
		self.visited = VisitedPaths()
		self._lock = threading.Lock()

	def walk(self, root: str) -> WalkResult:
		"""
		Check every package under `root` and return once all of them are done.

		Directories already visited by this walker, in this call or an earlier
		one, are skipped.
		"""
		result = WalkResult()
		with ThreadPoolExecutor(max_workers=self.options.max_workers, thread_name_prefix="goshadow") as executor:
			group = TaskGroup(executor)
			group.spawn(self._visit, group, result, os.path.normpath(root))
			group.wait()
		return result

	def _visit(self, group: TaskGroup, result: WalkResult, path: str) -> None:
		try:
			self._visit_dir(group, result, path)
		except Exception as exc:
			logger.exception("checking %s failed", path)
			with self._lock:
				result.failures.append((path, exc))

	def _visit_dir(self, group: TaskGroup, result: WalkResult, path: str) -> None:
		if not self.visited.add(os.path.realpath(path)):
			return
		with self._lock:
			result.visited_dirs.append(path)

		try:
			pkg = import_dir(path, self.options.context)
		except BuildError as exc:
			logger.debug("skipping files in %s: %s", path, exc)
		else:
			for file_path in pkg.go_file_paths():
				check_file(file_path, self.reporter, self.options.names)
				with self._lock:
					result.checked_files.append(file_path)

		for child in self._child_dirs(path):
			group.spawn(self._visit, group, result, child)

	def _child_dirs(self, path: str) -> List[str]:
		try:
			with os.scandir(path) as entries:
				names = sorted(
					entry.name
					for entry in entries
					if entry.is_dir(follow_symlinks=self.options.follow_symlinks)
				)
		except OSError as exc:
			logger.debug("cannot list %s: %s", path, exc)
			return []
		return [os.path.normpath(os.path.join(path, name)) for name in names]


def walk(root: str, reporter: Optional[Reporter] = None, options: Optional[CheckOptions] = None) -> WalkResult:
	return PackageWalker(reporter, options).walk(root)


__all__ = ["PackageWalker", "TaskGroup", "VisitedPaths", "WalkResult", "walk"]
