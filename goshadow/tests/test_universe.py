# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from goshadow.universe import UNIVERSE


def test_universe_has_every_category() -> None:
	assert len(UNIVERSE) == 39
	for name in ("bool", "uintptr", "error", "true", "false", "iota", "nil", "append", "recover"):
		assert name in UNIVERSE


@pytest.mark.parametrize("name", ["any", "comparable", "min", "max", "clear", "main", "Len", "_"])
def test_names_outside_the_table_are_not_predeclared(name: str) -> None:
	assert name not in UNIVERSE


def test_universe_is_immutable() -> None:
	assert isinstance(UNIVERSE, frozenset)
	with pytest.raises(AttributeError):
		UNIVERSE.add("any")  # type: ignore[attr-defined]
