# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Streaming text output shared by every walker thread."""

from __future__ import annotations

import sys
import threading
from typing import Optional, TextIO

from goshadow.detector import Violation
from goshadow.errors import ParseError


def format_violation(violation: Violation) -> str:
	return f"{violation.path}:{violation.line}:{violation.column}:\n{violation.text}\n\n"


class Reporter:
	"""
	Writes violations as they are found.

	Each violation is written with one `write` call under a lock, so blocks
	from different threads never interleave. `stream` defaults to whatever
	`sys.stdout` is at write time.
	"""

	def __init__(self, stream: Optional[TextIO] = None) -> None:
		self._stream = stream
		self._lock = threading.Lock()

	@property
	def stream(self) -> TextIO:
		return self._stream if self._stream is not None else sys.stdout

	def report(self, violation: Violation) -> None:
		self._write(format_violation(violation))

	def error(self, err: ParseError) -> None:
		self._write(f"{err}\n")

	def _write(self, text: str) -> None:
		with self._lock:
			stream = self.stream
			stream.write(text)
			stream.flush()


__all__ = ["Reporter", "format_violation"]
