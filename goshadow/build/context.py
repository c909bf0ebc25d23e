# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Target description used when deciding which files of a directory are built.

Mirrors the parts of Go's `build.Context` that file selection reads: target
OS and architecture, cgo, compiler, extra tags and the release tags.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from typing import Optional, Tuple

KNOWN_OS = frozenset(
	{
		"aix",
		"android",
		"darwin",
		"dragonfly",
		"freebsd",
		"hurd",
		"illumos",
		"ios",
		"js",
		"linux",
		"nacl",
		"netbsd",
		"openbsd",
		"plan9",
		"solaris",
		"wasip1",
		"windows",
		"zos",
	}
)

KNOWN_ARCH = frozenset(
	{
		"386",
		"amd64",
		"amd64p32",
		"arm",
		"armbe",
		"arm64",
		"arm64be",
		"loong64",
		"mips",
		"mipsle",
		"mips64",
		"mips64le",
		"mips64p32",
		"mips64p32le",
		"ppc",
		"ppc64",
		"ppc64le",
		"riscv",
		"riscv64",
		"s390",
		"s390x",
		"sparc",
		"sparc64",
		"wasm",
	}
)

# GOOS values satisfying the `unix` build tag.
UNIX_OS = frozenset(
	{
		"aix",
		"android",
		"darwin",
		"dragonfly",
		"freebsd",
		"hurd",
		"illumos",
		"ios",
		"linux",
		"netbsd",
		"openbsd",
		"solaris",
	}
)

DEFAULT_RELEASE: Tuple[int, int] = (1, 24)

_PLATFORM_OS = {
	"linux": "linux",
	"darwin": "darwin",
	"win32": "windows",
	"cygwin": "windows",
	"freebsd": "freebsd",
	"openbsd": "openbsd",
	"netbsd": "netbsd",
	"dragonfly": "dragonfly",
	"sunos": "solaris",
	"aix": "aix",
	"emscripten": "js",
	"wasi": "wasip1",
}

_MACHINE_ARCH = {
	"x86_64": "amd64",
	"amd64": "amd64",
	"i386": "386",
	"i686": "386",
	"x86": "386",
	"aarch64": "arm64",
	"arm64": "arm64",
	"armv7l": "arm",
	"armv6l": "arm",
	"ppc64le": "ppc64le",
	"ppc64": "ppc64",
	"s390x": "s390x",
	"riscv64": "riscv64",
	"mips64": "mips64",
	"loongarch64": "loong64",
	"wasm32": "wasm",
}


@dataclass(frozen=True)
class BuildContext:
	goos: str
	goarch: str
	cgo_enabled: bool = True
	compiler: str = "gc"
	build_tags: Tuple[str, ...] = ()
	release: Tuple[int, int] = DEFAULT_RELEASE

	def release_tags(self) -> Tuple[str, ...]:
		major, minor = self.release
		return tuple(f"go{major}.{n}" for n in range(1, minor + 1))

	def match_tag(self, tag: str) -> bool:
		"""Report whether a single build tag is satisfied by this context."""
		if tag == "cgo":
			return self.cgo_enabled
		if tag == self.goos or tag == self.goarch or tag == self.compiler:
			return True
		if tag == "unix" and self.goos in UNIX_OS:
			return True
		if tag == "linux" and self.goos == "android":
			return True
		if tag == "solaris" and self.goos == "illumos":
			return True
		if tag == "darwin" and self.goos == "ios":
			return True
		if tag in self.build_tags:
			return True
		return tag in self.release_tags()

	def good_os_arch_file(self, name: str) -> bool:
		"""
		Check the `_GOOS`, `_GOARCH` and `_GOOS_GOARCH` suffixes of a file name.

		The first element is never treated as a suffix, so `linux.go` or
		`386.go` are always built. A trailing `_test` is stripped first.
		"""
		stem = name.split(".", 1)[0]
		parts = stem.split("_")
		if len(parts) >= 2 and parts[-1] == "test":
			parts = parts[:-1]
		parts = parts[1:]
		if not parts:
			return True
		last = parts[-1]
		if len(parts) >= 2 and parts[-2] in KNOWN_OS and last in KNOWN_ARCH:
			return self.match_tag(parts[-2]) and self.match_tag(last)
		if last in KNOWN_OS:
			return self.match_tag(last)
		if last in KNOWN_ARCH:
			return self.match_tag(last)
		return True


def default_context(goos: Optional[str] = None, goarch: Optional[str] = None) -> BuildContext:
	"""Context for the host platform, overridable per field."""
	if goos is None:
		goos = _host_os()
	if goarch is None:
		goarch = _MACHINE_ARCH.get(platform.machine().lower(), "amd64")
	return BuildContext(goos=goos, goarch=goarch)


def _host_os() -> str:
	for prefix, goos in _PLATFORM_OS.items():
		if sys.platform.startswith(prefix):
			return goos
	return "linux"


__all__ = [
	"BuildContext",
	"DEFAULT_RELEASE",
	"KNOWN_ARCH",
	"KNOWN_OS",
	"UNIX_OS",
	"default_context",
]
