# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

from goshadow.build import BuildContext


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
	"""
	Create files under `tmp_path` from a {relative path: content} mapping.

	Content is dedented, so Go sources can be written inline in the test.
	"""

	def write(files: Dict[str, str]) -> Path:
		for rel, content in files.items():
			target = tmp_path / rel
			target.parent.mkdir(parents=True, exist_ok=True)
			target.write_text(textwrap.dedent(content).lstrip("\n"))
		return tmp_path

	return write


@pytest.fixture
def linux_amd64() -> BuildContext:
	return BuildContext(goos="linux", goarch="amd64")
