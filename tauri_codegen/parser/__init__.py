# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rust declaration parser (lark) and its dataclass syntax tree.

`parse_rust_file` is the entry point used by the pipeline; it converts lark's
`UnexpectedInput` into a file-scoped `RustParseError` so callers never see raw
lark exceptions.
"""

from __future__ import annotations

from pathlib import Path

from lark.exceptions import UnexpectedInput

from . import ast
from .parser import RustParseError, decode_literal, parse_source


def parse_rust_source(source: str, *, file: str | None = None) -> ast.SourceFile:
	"""Parse `source`; syntax errors raise `RustParseError` pinned to `file`."""
	try:
		return parse_source(source)
	except UnexpectedInput as err:
		raise RustParseError(
			_describe(err),
			file=file,
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
		) from err


def parse_rust_file(path: Path) -> ast.SourceFile:
	return parse_rust_source(path.read_text(encoding="utf-8"), file=str(path))


def _describe(err: UnexpectedInput) -> str:
	token = getattr(err, "token", None)
	if token is not None and getattr(token, "type", None) not in ("$END", "<EOF>"):
		return f"unexpected token {str(token)!r}"
	char = getattr(err, "char", None)
	if char is not None:
		return f"unexpected character {char!r}"
	return "unexpected end of input"


__all__ = [
	"ast",
	"RustParseError",
	"decode_literal",
	"parse_source",
	"parse_rust_source",
	"parse_rust_file",
]
