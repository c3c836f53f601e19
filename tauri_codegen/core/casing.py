# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Identifier case conversions.

Two users:
- serde `rename_all` rules for enum variant names (`apply_rename_all`);
- TypeScript wrapper/argument names (`to_camel_case`).

The word split is the simple one serde users expect from Rust identifiers: a
boundary before every uppercase letter that is not the first character, and
at every underscore.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional


def to_camel_case(s: str) -> str:
	"""
	`get_user` -> `getUser`, `FieldA` -> `fieldA`.

	Underscores are dropped and the following character uppercased; otherwise the
	first character is lowercased. A trailing underscore is dropped.
	"""
	out: list[str] = []
	capitalize_next = False
	first = True
	for ch in s:
		if ch == "_":
			capitalize_next = True
		elif capitalize_next:
			out.append(ch.upper())
			capitalize_next = False
			first = False
		elif first:
			out.append(ch.lower())
			first = False
		else:
			out.append(ch)
	return "".join(out)


def to_snake_case(s: str) -> str:
	"""`FieldA` -> `field_a`; existing underscores are kept."""
	out: list[str] = []
	for i, ch in enumerate(s):
		if ch.isupper() and i > 0:
			out.append("_")
		out.append(ch.lower())
	return "".join(out)


def to_screaming_snake_case(s: str) -> str:
	return to_snake_case(s).upper()


def to_kebab_case(s: str) -> str:
	return to_snake_case(s).replace("_", "-")


def to_screaming_kebab_case(s: str) -> str:
	return to_kebab_case(s).upper()


RENAME_RULES: Dict[str, Callable[[str], str]] = {
	"lowercase": str.lower,
	"UPPERCASE": str.upper,
	"camelCase": to_camel_case,
	"snake_case": to_snake_case,
	"SCREAMING_SNAKE_CASE": to_screaming_snake_case,
	"kebab-case": to_kebab_case,
	"SCREAMING-KEBAB-CASE": to_screaming_kebab_case,
}


def apply_rename_all(name: str, rule: Optional[str]) -> str:
	"""
	Apply a serde `rename_all` rule to `name`.

	`PascalCase` (Rust variants already are) and unknown rules leave the name
	unchanged.
	"""
	if rule is None:
		return name
	convert = RENAME_RULES.get(rule)
	return convert(name) if convert is not None else name


__all__ = [
	"to_camel_case",
	"to_snake_case",
	"to_screaming_snake_case",
	"to_kebab_case",
	"to_screaming_kebab_case",
	"RENAME_RULES",
	"apply_rename_all",
]
