# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import time
from pathlib import Path

import pytest

from goshadow.errors import ParseError
from goshadow.parser import parse_file, parse_source

RICH_SOURCE = """\
// Package sample exercises most of the grammar.
package sample

import (
	"errors"
	f "fmt"
	. "strings"
	_ "os"
)

import "sync"

const (
	A = iota
	B
	C int = 5
)

type (
	Point struct {
		X, Y int
		name string `json:"name"`
		*sync.Mutex
	}
	Alias = Point
)

type Stack[T any] struct {
	items []T
}

type Shape interface {
	Area() float64
	~int | ~float64
}

var (
	origin = Point{X: 0, Y: 0}
	table  = map[string][]int{"a": {1, 2}, "b": nil}
)

var ch = make(chan<- int, 3)

func (s *Stack[T]) Push(v T) {
	s.items = append(s.items, v)
}

func Map[T, U any](xs []T, fn func(T) U) []U {
	out := make([]U, 0, len(xs))
	for _, x := range xs {
		out = append(out, fn(x))
	}
	return out
}

func run(args ...string) (n int, err error) {
	defer func() {
		if r := recover(); r != nil {
			err = errors.New("panic")
		}
	}()
	go f.Println(len(args), 0x1F, 1e3, 'x', `raw`)
	var wg sync.WaitGroup
	done := make(chan struct{})
	select {
	case v, ok := <-done:
		_, _ = v, ok
	case ch <- 1:
	default:
	}
outer:
	for i := 0; i < 10; i++ {
		switch {
		case i%2 == 0:
			continue outer
		case i > 7:
			break outer
		default:
			fallthrough
		case false:
		}
	}
	switch x := interface{}(n).(type) {
	case int, string:
		n += 1
	case nil:
	}
	s := args[1:]
	p := &origin
	p.X <<= 2
	n = len(s) &^ 3
	wg.Wait()
	if ok := HasPrefix("ab", "a"); !ok {
		return
	} else if n > 3 {
		return n, nil
	}
	return
}

func forward()
"""


def test_parse_rich_source() -> None:
	src = parse_source(RICH_SOURCE, "sample.go")
	assert src.path == "sample.go"
	assert src.tree.data == "source_file"


def test_parse_file_without_trailing_newline() -> None:
	src = parse_source("package p\n\nfunc f() {\n\tx := 1\n\t_ = x\n}")
	assert src.tree is not None


def test_parse_explicit_semicolons() -> None:
	parse_source("package p; func f() { a := 1; b := 2; _, _ = a, b }\n")


def test_parse_error_reports_position_and_token() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_source("package p\n\nfunc f() {\n\tx :=\n}\n", "bad.go")
	err = excinfo.value
	assert (err.path, err.line, err.column) == ("bad.go", 5, 1)
	assert err.message == "unexpected '}'"
	assert str(err) == "bad.go:5:1: unexpected '}'"


def test_parse_error_unexpected_newline() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_source("package p\n\nvar x = (1\n)\n")
	assert excinfo.value.message == "unexpected newline"
	assert excinfo.value.line == 3


def test_parse_error_requires_package_clause() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_source("func f() {}\n")
	assert excinfo.value.line == 1
	assert excinfo.value.message == "unexpected 'func'"


def test_parse_error_unexpected_eof() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_source("package p\n\nfunc f() {\n")
	assert excinfo.value.message == "unexpected EOF"


def test_parse_error_invalid_character() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_source("package p\n\nvar x = 1 @ 2\n")
	assert excinfo.value.message == "invalid character '@'"
	assert (excinfo.value.line, excinfo.value.column) == (3, 11)


def test_parse_file_missing(tmp_path: Path) -> None:
	missing = tmp_path / "nope.go"
	with pytest.raises(ParseError) as excinfo:
		parse_file(str(missing))
	assert excinfo.value.line == 0
	assert str(excinfo.value).startswith(f"{missing}: ")


def test_parse_file_strips_bom(tmp_path: Path) -> None:
	path = tmp_path / "bom.go"
	path.write_bytes(b"\xef\xbb\xbfpackage p\n")
	src = parse_file(str(path))
	assert src.text == "package p\n"


def test_line_col_counts_bytes() -> None:
	src = parse_source('package p\n\nfunc f() {\n\ts := "é"; len := 2\n\t_, _ = s, len\n}\n')
	line, column = src.line_col(src.text.index("len :="))
	assert line == 4
	# tab, `s := `, a two-byte rune inside quotes, `; `
	assert column == 13


HEADER_SOURCE = """\
package p

func f(xs []int, m map[string]int, v interface{}) {
	for _, x := range []int{1, 2} {
		_ = x
	}
	for k := range map[string]bool{"a": true} {
		_ = k
	}
	for _, t := range []struct{ a, b int }{{1, 2}} {
		_ = t
	}
	if f := func() bool { return true }; f() {
	}
	if func() bool { for { return true } }() {
	}
	if n := len([]byte("x")); n > 0 {
	}
	if p := (Point{X: 1}); p.X > 0 {
	}
	if _, ok := v.(interface{ Len() int }); ok {
	}
	switch y := []int(nil); {
	case len(y) == 0:
	}
	for i := range xs[1:] {
		_ = m[string(rune(i))]
	}
	select {
	}
}
"""


def test_statement_headers_with_composite_literals() -> None:
	parse_source(HEADER_SOURCE, "header.go")


def test_bare_type_name_literal_in_header_is_an_error() -> None:
	# go/parser needs `(T{})` here too; `{` opens the if body.
	with pytest.raises(ParseError):
		parse_source("package p\n\nfunc f() {\n\tif x == T{} {\n\t}\n}\n")


def _large_source(functions: int) -> str:
	parts = ["package big\n\nimport \"fmt\"\n"]
	for i in range(functions):
		parts.append(
			f"""
type T{i} struct {{
	a, b int
	name string
}}

func (t *T{i}) Sum(xs []int) (total int, err error) {{
	m := map[string][]int{{"a": {{1, 2}}, "b": nil}}
	for _, x := range xs {{
		if x%2 == 0 && len(m) > 0 {{
			total += x * t.a
		}} else {{
			total -= t.b
		}}
	}}
	switch v := interface{{}}(total).(type) {{
	case int:
		fmt.Println(v, T{i}{{a: 1}}, []int{{1, 2, 3}}[0])
	}}
	return total, nil
}}
"""
		)
	return "".join(parts)


def test_parse_time_grows_linearly() -> None:
	text = _large_source(25)
	assert text.count("\n") > 500
	started = time.perf_counter()
	src = parse_source(text, "big.go")
	elapsed = time.perf_counter() - started
	assert src.tree.data == "source_file"
	assert elapsed < 2.0, f"parsing {text.count(chr(10))} lines took {elapsed:.2f}s"
