# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
types.ts renderer.

Structs become interfaces. Enums become type aliases whose members follow
serde's wire shape for the enum (external, internal, adjacent or untagged).
"""

from __future__ import annotations

import json
import re
from typing import AbstractSet, List, Sequence

from tauri_codegen.core.diagnostics import Span, warning
from tauri_codegen.core.records import (
	Adjacent,
	ExportedEnum,
	ExportedStruct,
	ExportedType,
	External,
	Field,
	Internal,
	StructPayload,
	TuplePayload,
	UnitPayload,
	Variant,
)
from tauri_codegen.generator.type_mapper import TypeMapper

HEADER = "// This file was generated by tauri-codegen. Do not edit.\n"

_IDENT_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def ts_string(value: str) -> str:
	return json.dumps(value)


def property_key(name: str) -> str:
	return name if _IDENT_RE.match(name) else ts_string(name)


def _type_params(generics: Sequence[str]) -> str:
	return "<" + ", ".join(generics) + ">" if generics else ""


def _field(mapper: TypeMapper, f: Field, generics: AbstractSet[str], span: Span) -> str:
	mark = "?" if f.optional else ""
	return f"{property_key(f.name)}{mark}: {mapper.map(f.ty, generics, span=span)}"


def _inline_object(members: List[str]) -> str:
	return "{ " + "; ".join(members) + " }" if members else "{}"


def render_struct(rec: ExportedStruct, mapper: TypeMapper) -> str:
	generics = frozenset(rec.generics)
	span = Span(file=rec.file)
	head = f"export interface {mapper.type_name(rec.name)}{_type_params(rec.generics)}"
	if not rec.fields:
		return head + " {}\n"
	lines = [head + " {"]
	for f in rec.fields:
		lines.append(f"  {_field(mapper, f, generics, span)};")
	lines.append("}")
	return "\n".join(lines) + "\n"


def _payload_parts(v: Variant, mapper: TypeMapper, generics: AbstractSet[str], span: Span) -> List[str]:
	payload = v.payload
	if isinstance(payload, TuplePayload):
		return [mapper.map(t, generics, span=span) for t in payload.elems]
	if isinstance(payload, StructPayload):
		return [_field(mapper, f, generics, span) for f in payload.fields]
	return []


def _tuple_text(parts: List[str]) -> str:
	return "[" + ", ".join(parts) + "]"


def render_variant(rec: ExportedEnum, v: Variant, mapper: TypeMapper) -> str:
	"""One union member for `v` under the enum's wire shape."""
	generics = frozenset(rec.generics)
	span = Span(file=rec.file)
	payload = v.payload
	parts = _payload_parts(v, mapper, generics, span)
	name = ts_string(v.name)
	shape = rec.shape

	if isinstance(payload, UnitPayload):
		body = None
	elif isinstance(payload, TuplePayload) and len(payload.elems) == 1:
		body = parts[0]
	elif isinstance(payload, TuplePayload):
		body = _tuple_text(parts)
	else:
		body = _inline_object(parts)

	if isinstance(shape, External):
		if body is None:
			return name
		return _inline_object([f"{property_key(v.name)}: {body}"])
	if isinstance(shape, Internal):
		tag = f"{property_key(shape.tag)}: {name}"
		if body is None:
			return _inline_object([tag])
		if isinstance(payload, StructPayload):
			return _inline_object([tag] + parts)
		if isinstance(payload, TuplePayload) and len(payload.elems) == 1:
			return f"{_inline_object([tag])} & {body}"
		mapper.diagnostics.append(
			warning(
				f"internally tagged enum '{rec.name}' cannot represent tuple variant '{v.name}'; emitting the tag only",
				phase="mapper",
				span=span,
			)
		)
		return _inline_object([tag])
	if isinstance(shape, Adjacent):
		members = [f"{property_key(shape.tag)}: {name}"]
		if body is not None:
			members.append(f"{property_key(shape.content)}: {body}")
		return _inline_object(members)
	# Untagged
	return "null" if body is None else body


def render_enum(rec: ExportedEnum, mapper: TypeMapper) -> str:
	head = f"export type {mapper.type_name(rec.name)}{_type_params(rec.generics)} ="
	if not rec.variants:
		return head + " never;\n"
	if rec.is_unit_only and isinstance(rec.shape, External):
		return head + " " + " | ".join(ts_string(v.name) for v in rec.variants) + ";\n"
	members = [render_variant(rec, v, mapper) for v in rec.variants]
	return head + "\n" + "\n".join(f"  | {m}" for m in members) + ";\n"


def render_type(rec: ExportedType, mapper: TypeMapper) -> str:
	if isinstance(rec, ExportedStruct):
		return render_struct(rec, mapper)
	return render_enum(rec, mapper)


def render_types(types: Sequence[ExportedType], mapper: TypeMapper) -> str:
	"""Full types.ts text for `types` (already filtered to reachable ones)."""
	blocks = [HEADER] + [render_type(rec, mapper) for rec in types]
	return "\n".join(blocks)


__all__ = [
	"HEADER",
	"ts_string",
	"property_key",
	"render_struct",
	"render_variant",
	"render_enum",
	"render_type",
	"render_types",
]
