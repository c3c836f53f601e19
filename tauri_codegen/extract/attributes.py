# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Typed attribute scan.

Each declaration's attributes are scanned once into small records (`Derive`,
`SerdeRename`, `CommandMarker`, ...). Extraction then asks an `AttrSet` typed
questions instead of re-matching attribute paths and strings.

`#[cfg_attr(predicate, a, b)]` is treated as if `a` and `b` were written
directly: generated code is usually compiled with the predicate enabled, so
`#[cfg_attr(feature = "serde", derive(Serialize))]` exports the type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from tauri_codegen.parser import ast


@dataclass(frozen=True)
class Derive:
	# Last path segment of each derived trait (`serde::Serialize` -> `Serialize`).
	traits: Tuple[str, ...]


@dataclass(frozen=True)
class CommandMarker:
	"""`#[tauri::command]` / `#[command]`, with or without arguments."""


@dataclass(frozen=True)
class SerdeRename:
	value: str


@dataclass(frozen=True)
class SerdeRenameAll:
	rule: str


@dataclass(frozen=True)
class SerdeTag:
	tag: str


@dataclass(frozen=True)
class SerdeContent:
	content: str


@dataclass(frozen=True)
class SerdeUntagged:
	pass


@dataclass(frozen=True)
class SerdeSkip:
	pass


@dataclass(frozen=True)
class SerdeOther:
	"""Any other `#[serde(...)]` key (`default`, `flatten`, `with`, ...)."""

	key: str


@dataclass(frozen=True)
class TsOptional:
	pass


AttrRecord = Union[
	Derive,
	CommandMarker,
	SerdeRename,
	SerdeRenameAll,
	SerdeTag,
	SerdeContent,
	SerdeUntagged,
	SerdeSkip,
	SerdeOther,
	TsOptional,
]

_SERDE_RECORDS = (SerdeRename, SerdeRenameAll, SerdeTag, SerdeContent, SerdeUntagged, SerdeSkip, SerdeOther)


def _metas(attrs: Iterable[ast.Attribute]) -> Iterator[ast.Meta]:
	"""Outer attribute metas with `cfg_attr` unwrapped (recursively)."""
	for attr in attrs:
		if attr.inner:
			continue
		yield from _unwrap_cfg_attr(attr.meta)


def _unwrap_cfg_attr(meta: ast.Meta) -> Iterator[ast.Meta]:
	if isinstance(meta, ast.MetaList) and meta.path == ["cfg_attr"]:
		# First item is the predicate.
		for inner in meta.items[1:]:
			yield from _unwrap_cfg_attr(inner)
	else:
		yield meta


def _serialize_side(meta: ast.MetaList) -> Optional[str]:
	"""`rename(serialize = "a", deserialize = "b")` -> "a"."""
	fallback: Optional[str] = None
	for item in meta.items:
		if isinstance(item, ast.MetaNameValue) and item.value is not None:
			if item.path == ["serialize"]:
				return item.value
			if fallback is None:
				fallback = item.value
	return fallback


def _scan_serde(items: List[ast.Meta]) -> Iterator[AttrRecord]:
	if not items:
		yield SerdeOther("")
		return
	for item in items:
		if isinstance(item, ast.MetaLiteral):
			continue
		key = "::".join(item.path)
		if isinstance(item, ast.MetaWord):
			if key == "untagged":
				yield SerdeUntagged()
			elif key == "skip":
				yield SerdeSkip()
			else:
				yield SerdeOther(key)
		elif isinstance(item, ast.MetaNameValue):
			value = item.value
			if key == "rename" and value is not None:
				yield SerdeRename(value)
			elif key == "rename_all" and value is not None:
				yield SerdeRenameAll(value)
			elif key == "tag" and value is not None:
				yield SerdeTag(value)
			elif key == "content" and value is not None:
				yield SerdeContent(value)
			else:
				yield SerdeOther(key)
		else:
			side = _serialize_side(item) if key in ("rename", "rename_all") else None
			if side is not None and key == "rename":
				yield SerdeRename(side)
			elif side is not None:
				yield SerdeRenameAll(side)
			else:
				yield SerdeOther(key)


def _scan_ts(items: List[ast.Meta]) -> Iterator[AttrRecord]:
	for item in items:
		if isinstance(item, ast.MetaWord) and item.path == ["optional"]:
			yield TsOptional()
		elif isinstance(item, ast.MetaNameValue) and item.path == ["optional"] and item.value == "true":
			yield TsOptional()


def scan_attributes(attrs: Iterable[ast.Attribute]) -> List[AttrRecord]:
	"""Scan outer attributes into typed records, in source order."""
	out: List[AttrRecord] = []
	for meta in _metas(attrs):
		if isinstance(meta, ast.MetaLiteral):
			continue
		path = meta.path
		if path in (["tauri", "command"], ["command"]):
			out.append(CommandMarker())
		elif path == ["derive"] and isinstance(meta, ast.MetaList):
			traits = tuple(item.path[-1] for item in meta.items if isinstance(item, ast.MetaWord) and item.path)
			out.append(Derive(traits))
		elif path == ["serde"] and isinstance(meta, ast.MetaList):
			out.extend(_scan_serde(meta.items))
		elif path == ["ts"] and isinstance(meta, ast.MetaList):
			out.extend(_scan_ts(meta.items))
	return out


class AttrSet:
	"""Query view over the records of one declaration."""

	def __init__(self, records: Iterable[AttrRecord]) -> None:
		self.records: Tuple[AttrRecord, ...] = tuple(records)

	@classmethod
	def of(cls, attrs: Iterable[ast.Attribute]) -> "AttrSet":
		return cls(scan_attributes(attrs))

	def _first(self, kind: type) -> Optional[AttrRecord]:
		for rec in self.records:
			if isinstance(rec, kind):
				return rec
		return None

	@property
	def derives(self) -> Tuple[str, ...]:
		out: List[str] = []
		for rec in self.records:
			if isinstance(rec, Derive):
				out.extend(rec.traits)
		return tuple(out)

	def derives_any(self, *traits: str) -> bool:
		return any(t in traits for t in self.derives)

	@property
	def is_command(self) -> bool:
		return self._first(CommandMarker) is not None

	@property
	def has_serde(self) -> bool:
		return any(isinstance(rec, _SERDE_RECORDS) for rec in self.records)

	@property
	def rename(self) -> Optional[str]:
		rec = self._first(SerdeRename)
		return rec.value if isinstance(rec, SerdeRename) else None

	@property
	def rename_all(self) -> Optional[str]:
		rec = self._first(SerdeRenameAll)
		return rec.rule if isinstance(rec, SerdeRenameAll) else None

	@property
	def tag(self) -> Optional[str]:
		rec = self._first(SerdeTag)
		return rec.tag if isinstance(rec, SerdeTag) else None

	@property
	def content(self) -> Optional[str]:
		rec = self._first(SerdeContent)
		return rec.content if isinstance(rec, SerdeContent) else None

	@property
	def untagged(self) -> bool:
		return self._first(SerdeUntagged) is not None

	@property
	def skip(self) -> bool:
		return self._first(SerdeSkip) is not None

	@property
	def ts_optional(self) -> bool:
		return self._first(TsOptional) is not None


__all__ = [
	"Derive",
	"CommandMarker",
	"SerdeRename",
	"SerdeRenameAll",
	"SerdeTag",
	"SerdeContent",
	"SerdeUntagged",
	"SerdeSkip",
	"SerdeOther",
	"TsOptional",
	"AttrRecord",
	"scan_attributes",
	"AttrSet",
]
