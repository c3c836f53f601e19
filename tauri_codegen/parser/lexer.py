# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Post-lexer that hides everything below declaration level from the grammar.

The grammar only models item signatures. Three kinds of token runs are
collapsed into single opaque tokens before they reach the LALR parser:

- function bodies:            `fn f() { ... }`      -> FN NAME ... BODY
- const/static initializers:  `const X: u8 = 1 + 2;` -> CONST NAME ... CONST_VALUE SEMI
- macro invocation groups:    `foo! { ... }`        -> NAME BANG MACRO_GROUP

Block initializers (`const _: () = { ... };`) are *not* collapsed: serde's
expanded output hides its `impl Serialize for X` blocks inside them and
extraction needs to see those impls as items.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from lark import Token

_OPEN = {"LBRACE": "RBRACE", "LPAR": "RPAR", "LSQB": "RSQB"}

# Tokens after which a new item may begin.
_ITEM_START = {
	None,
	"SEMI",
	"LBRACE",
	"RBRACE",
	"RSQB",
	"PUB",
	"RPAR",
	"BODY",
	"MACRO_GROUP",
}


class _Peekable:
	def __init__(self, stream: Iterable[Token]) -> None:
		self._it = iter(stream)
		self._buf: List[Token] = []

	def __iter__(self) -> "_Peekable":
		return self

	def __next__(self) -> Token:
		if self._buf:
			return self._buf.pop(0)
		return next(self._it)

	def peek(self, n: int = 0) -> Optional[Token]:
		while len(self._buf) <= n:
			try:
				self._buf.append(next(self._it))
			except StopIteration:
				return None
		return self._buf[n]


def _collapse_group(open_tok: Token, it: _Peekable, ttype: str) -> Token:
	"""Consume a balanced group starting at `open_tok` and return one token for it."""
	close = _OPEN[open_tok.type]
	depth = 1
	parts = [open_tok.value]
	for tok in it:
		parts.append(tok.value)
		if tok.type == open_tok.type:
			depth += 1
		elif tok.type == close:
			depth -= 1
			if depth == 0:
				break
	return Token.new_borrow_pos(ttype, " ".join(parts), open_tok)


def _collapse_until_semi(first: Token, it: _Peekable) -> Token:
	"""Consume an initializer expression up to (not including) its `;`."""
	depth = 0
	parts = [first.value]
	if first.type in _OPEN:
		depth += 1
	elif first.type in _OPEN.values():
		depth -= 1
	while True:
		nxt = it.peek()
		if nxt is None:
			break
		if depth == 0 and nxt.type == "SEMI":
			break
		tok = next(it)
		parts.append(tok.value)
		if tok.type in _OPEN:
			depth += 1
		elif tok.type in _OPEN.values():
			depth -= 1
	return Token.new_borrow_pos("CONST_VALUE", " ".join(parts), first)


class RustPostLex:
	"""Collapse bodies, initializers and macro groups (see module docstring)."""

	# Lark drops terminals that the grammar never references unless the
	# post-lexer asks to keep them; these only ever occur inside collapsed runs.
	always_accept = ("BODY_OP", "MINUS", "NUMBER", "CHAR", "LIFETIME", "STRING", "RAW_STRING")

	def process(self, stream: Iterable[Token]) -> Iterator[Token]:
		it = _Peekable(stream)
		prev: Optional[str] = None
		# Set while between `fn NAME` and the body (or `;`).
		in_fn_header = False
		# Set while between `const NAME` / `static NAME` and `=` (or `;`).
		in_const_header = False
		depth = 0

		for tok in it:
			ttype = tok.type

			if in_fn_header or in_const_header:
				if ttype in ("LPAR", "LSQB"):
					depth += 1
				elif ttype in ("RPAR", "RSQB") and depth:
					depth -= 1
				elif depth == 0 and ttype == "SEMI":
					in_fn_header = in_const_header = False
				elif depth == 0 and in_fn_header and ttype == "LBRACE":
					in_fn_header = False
					body = _collapse_group(tok, it, "BODY")
					yield body
					prev = body.type
					continue
				elif depth == 0 and in_const_header and ttype == "EQUAL":
					in_const_header = False
					yield tok
					prev = ttype
					nxt = it.peek()
					if nxt is not None and nxt.type != "LBRACE":
						value = _collapse_until_semi(next(it), it)
						yield value
						prev = value.type
					continue
				yield tok
				prev = ttype
				continue

			if ttype == "FN":
				nxt = it.peek()
				if nxt is not None and nxt.type == "NAME":
					in_fn_header = True
					depth = 0
			elif ttype in ("CONST", "STATIC") and prev in _ITEM_START:
				nxt = it.peek()
				if nxt is not None and (nxt.type == "NAME" or (ttype == "STATIC" and nxt.type == "MUT")):
					in_const_header = True
					depth = 0
			elif ttype == "BANG" and prev == "NAME":
				nxt = it.peek()
				if nxt is not None and nxt.type in _OPEN:
					yield tok
					group = _collapse_group(next(it), it, "MACRO_GROUP")
					yield group
					prev = group.type
					continue
				after = it.peek(1)
				if nxt is not None and nxt.type == "NAME" and after is not None and after.type in _OPEN:
					# macro_rules! name { ... }
					yield tok
					yield next(it)
					group = _collapse_group(next(it), it, "MACRO_GROUP")
					yield group
					prev = group.type
					continue

			yield tok
			prev = ttype


__all__ = ["RustPostLex"]
