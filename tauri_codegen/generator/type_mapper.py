# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
TypeExpr -> TypeScript type text.

The mapper is the only place (besides the renderers' declaration headers)
where configured type-name decoration is applied.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Optional

from tauri_codegen.config import NamingConfig
from tauri_codegen.core import known_types as kt
from tauri_codegen.core.casing import to_camel_case
from tauri_codegen.core.diagnostics import Diagnostic, Span, warning
from tauri_codegen.core.type_expr import (
	TFallible,
	TGeneric,
	TList,
	TMap,
	TNamed,
	TOptional,
	TPrimitive,
	TTuple,
	TUnit,
	TUnrecognized,
	TypeExpr,
)

# Record<K, V> keys TypeScript accepts as written.
_KEY_TYPES = ("string", "number")


class TypeMapper:
	def __init__(
		self,
		naming: Optional[NamingConfig] = None,
		known_types: Iterable[str] = (),
		diagnostics: Optional[List[Diagnostic]] = None,
	) -> None:
		self.naming = naming or NamingConfig()
		# Undecorated names of the types emitted to types.ts.
		self.known_types = frozenset(known_types)
		self.diagnostics = diagnostics if diagnostics is not None else []

	def type_name(self, name: str) -> str:
		return f"{self.naming.type_prefix}{name}{self.naming.type_suffix}"

	def function_name(self, rust_name: str) -> str:
		return f"{self.naming.function_prefix}{to_camel_case(rust_name)}{self.naming.function_suffix}"

	def map(self, ty: TypeExpr, generics: AbstractSet[str] = frozenset(), *, span: Optional[Span] = None) -> str:
		"""Render `ty`; `generics` are the type variables in scope at the use site."""
		if isinstance(ty, TGeneric):
			return ty.name
		if isinstance(ty, TNamed) and not ty.args and len(ty.path) == 1 and ty.name in generics:
			return ty.name
		if isinstance(ty, TPrimitive):
			ts = kt.primitive_ts(ty.name)
			if ts is None:
				self._warn(f"no TypeScript mapping for primitive '{ty.name}'; using unknown", span)
				return "unknown"
			return ts
		if isinstance(ty, TList):
			inner = self.map(ty.elem, generics, span=span)
			return f"({inner})[]" if " | " in inner else f"{inner}[]"
		if isinstance(ty, TOptional):
			inner_ty = ty.inner
			while isinstance(inner_ty, TOptional):
				inner_ty = inner_ty.inner
			return f"{self.map(inner_ty, generics, span=span)} | null"
		if isinstance(ty, TFallible):
			return self.map(ty.ok, generics, span=span)
		if isinstance(ty, TMap):
			key = self._map_key(ty.key, generics, span)
			return f"Record<{key}, {self.map(ty.value, generics, span=span)}>"
		if isinstance(ty, TTuple):
			if not ty.elems:
				return "void"
			return "[" + ", ".join(self.map(e, generics, span=span) for e in ty.elems) + "]"
		if isinstance(ty, TUnit):
			return "void"
		if isinstance(ty, TNamed):
			name = self.type_name(ty.name) if ty.name in self.known_types else ty.name
			if ty.args:
				name += "<" + ", ".join(self.map(a, generics, span=span) for a in ty.args) + ">"
			return name
		if isinstance(ty, TUnrecognized):
			self._warn(f"unsupported type '{ty.description}'; using unknown", span)
			return "unknown"
		self._warn(f"unsupported type {ty!r}; using unknown", span)
		return "unknown"

	def _map_key(self, key: TypeExpr, generics: AbstractSet[str], span: Optional[Span]) -> str:
		# JSON object keys are strings; only string/number-like and named keys survive.
		if isinstance(key, TPrimitive):
			ts = kt.primitive_ts(key.name)
			return ts if ts in _KEY_TYPES else "string"
		if isinstance(key, (TNamed, TGeneric)):
			return self.map(key, generics, span=span)
		return "string"

	def _warn(self, message: str, span: Optional[Span]) -> None:
		self.diagnostics.append(warning(message, phase="mapper", span=span))


__all__ = ["TypeMapper"]
