# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Extraction output records.

Records are built once per run from parsed source and never mutated; the
reachability pass derives new lists from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Tuple, Union

from tauri_codegen.core.type_expr import TypeExpr

TypeRewrite = Callable[[TypeExpr], TypeExpr]

ModulePath = Tuple[str, ...]


@dataclass(frozen=True)
class EntryPoint:
	"""A `#[tauri::command]` function with injected handle parameters removed."""

	name: str
	args: Tuple[Tuple[str, TypeExpr], ...]
	ret: Optional[TypeExpr]
	file: str
	module: ModulePath = ("crate",)
	is_async: bool = False
	# Type parameter names (`fn f<T>`); rendered on the wrapper.
	generics: Tuple[str, ...] = ()

	def map_types(self, fn: TypeRewrite) -> "EntryPoint":
		return replace(
			self,
			args=tuple((name, fn(ty)) for name, ty in self.args),
			ret=fn(self.ret) if self.ret is not None else None,
		)


@dataclass(frozen=True)
class Field:
	name: str
	ty: TypeExpr
	# `#[ts(optional)]`: rendered as `name?: T`.
	optional: bool = False


@dataclass(frozen=True)
class UnitPayload:
	pass


@dataclass(frozen=True)
class TuplePayload:
	elems: Tuple[TypeExpr, ...]


@dataclass(frozen=True)
class StructPayload:
	fields: Tuple[Field, ...]


Payload = Union[UnitPayload, TuplePayload, StructPayload]


@dataclass(frozen=True)
class Variant:
	name: str
	payload: Payload = field(default_factory=UnitPayload)


@dataclass(frozen=True)
class External:
	"""serde default: `{"Variant": payload}` / `"Variant"`."""


@dataclass(frozen=True)
class Internal:
	"""`#[serde(tag = "...")]`."""

	tag: str


@dataclass(frozen=True)
class Adjacent:
	"""`#[serde(tag = "...", content = "...")]`."""

	tag: str
	content: str


@dataclass(frozen=True)
class Untagged:
	"""`#[serde(untagged)]`."""


WireShape = Union[External, Internal, Adjacent, Untagged]


@dataclass(frozen=True)
class ExportedStruct:
	name: str
	generics: Tuple[str, ...]
	fields: Tuple[Field, ...]
	file: str
	module: ModulePath = ("crate",)

	def field_types(self) -> Tuple[TypeExpr, ...]:
		return tuple(f.ty for f in self.fields)

	def map_types(self, fn: TypeRewrite) -> "ExportedStruct":
		return replace(self, fields=_map_fields(self.fields, fn))


@dataclass(frozen=True)
class ExportedEnum:
	name: str
	generics: Tuple[str, ...]
	shape: WireShape
	variants: Tuple[Variant, ...]
	file: str
	module: ModulePath = ("crate",)

	@property
	def is_unit_only(self) -> bool:
		return all(isinstance(v.payload, UnitPayload) for v in self.variants)

	def field_types(self) -> Tuple[TypeExpr, ...]:
		out: list[TypeExpr] = []
		for v in self.variants:
			out.extend(payload_types(v.payload))
		return tuple(out)

	def map_types(self, fn: TypeRewrite) -> "ExportedEnum":
		return replace(self, variants=tuple(replace(v, payload=_map_payload(v.payload, fn)) for v in self.variants))


ExportedType = Union[ExportedStruct, ExportedEnum]


def payload_types(payload: Payload) -> Tuple[TypeExpr, ...]:
	if isinstance(payload, TuplePayload):
		return payload.elems
	if isinstance(payload, StructPayload):
		return tuple(f.ty for f in payload.fields)
	return ()


def _map_fields(fields: Tuple[Field, ...], fn: TypeRewrite) -> Tuple[Field, ...]:
	return tuple(replace(f, ty=fn(f.ty)) for f in fields)


def _map_payload(payload: Payload, fn: TypeRewrite) -> Payload:
	if isinstance(payload, TuplePayload):
		return TuplePayload(tuple(fn(t) for t in payload.elems))
	if isinstance(payload, StructPayload):
		return StructPayload(_map_fields(payload.fields, fn))
	return payload


def signature_types(ep: EntryPoint) -> Tuple[TypeExpr, ...]:
	"""Argument types followed by the return type (when present)."""
	tys = [ty for _, ty in ep.args]
	if ep.ret is not None:
		tys.append(ep.ret)
	return tuple(tys)


__all__ = [
	"ModulePath",
	"EntryPoint",
	"Field",
	"UnitPayload",
	"TuplePayload",
	"StructPayload",
	"Payload",
	"Variant",
	"External",
	"Internal",
	"Adjacent",
	"Untagged",
	"WireShape",
	"ExportedStruct",
	"ExportedEnum",
	"ExportedType",
	"payload_types",
	"signature_types",
]
