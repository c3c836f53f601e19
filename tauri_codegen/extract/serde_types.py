# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Serialization extraction: which structs/enums cross the command boundary and
what their wire form looks like.

Two detection modes:
- DIRECT: the declaration derives `Serialize` or `Deserialize`.
- EXPANDED: for `cargo expand` output, where derives are gone. A type is
  exported when the file contains an `impl Serialize/Deserialize for Name`
  block (also inside inline mods and `const _: () = { ... };` blocks), or
  when any of its fields/variants still carries a `#[serde(...)]` attribute.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import AbstractSet, Iterable, List, Optional, Set

from tauri_codegen.core.casing import apply_rename_all
from tauri_codegen.core.records import (
	Adjacent,
	ExportedEnum,
	ExportedStruct,
	ExportedType,
	External,
	Field,
	Internal,
	ModulePath,
	Payload,
	StructPayload,
	TuplePayload,
	UnitPayload,
	Untagged,
	Variant,
	WireShape,
)
from tauri_codegen.core.type_expr import TOptional
from tauri_codegen.extract.attributes import AttrSet
from tauri_codegen.extract.type_lowering import lower_type
from tauri_codegen.parser import ast

_SERDE_TRAITS = ("Serialize", "Deserialize")


class DetectionMode(Enum):
	DIRECT = auto()
	EXPANDED = auto()


def collect_serde_impls(source: ast.SourceFile) -> Set[str]:
	"""Names of types with a `impl ... Serialize/Deserialize for Name` block in the file."""
	names: Set[str] = set()
	_collect_impls(source.items, names)
	return names


def _collect_impls(items: Iterable[ast.Item], names: Set[str]) -> None:
	for item in items:
		if isinstance(item, ast.ImplItem):
			trait = item.trait
			self_ty = item.self_ty
			if (
				isinstance(trait, ast.TypePath)
				and trait.segments
				and trait.last.name in _SERDE_TRAITS
				and isinstance(self_ty, ast.TypePath)
				and self_ty.segments
			):
				names.add(self_ty.last.name)
		elif isinstance(item, ast.ModItem) and item.items is not None:
			_collect_impls(item.items, names)
		elif isinstance(item, ast.ConstItem) and item.block_items is not None:
			_collect_impls(item.block_items, names)


def _fields_have_serde(fields: Iterable[ast.FieldDef]) -> bool:
	return any(AttrSet.of(f.attrs).has_serde for f in fields)


def _is_exported(
	decl: ast.StructItem | ast.EnumItem,
	attrs: AttrSet,
	mode: DetectionMode,
	serde_impls: AbstractSet[str],
) -> bool:
	if mode is DetectionMode.DIRECT:
		return attrs.derives_any(*_SERDE_TRAITS)
	if decl.name in serde_impls:
		return True
	if isinstance(decl, ast.StructItem):
		return _fields_have_serde(decl.fields)
	return any(AttrSet.of(v.attrs).has_serde or _fields_have_serde(v.fields) for v in decl.variants)


def _build_fields(fields: Iterable[ast.FieldDef], generics: AbstractSet[str]) -> tuple[Field, ...]:
	out: List[Field] = []
	for index, fdef in enumerate(fields):
		fattrs = AttrSet.of(fdef.attrs)
		if fattrs.skip:
			continue
		ty = lower_type(fdef.ty, generics)
		optional = fattrs.ts_optional
		if optional and isinstance(ty, TOptional):
			ty = ty.inner
		name = fattrs.rename or (fdef.name if fdef.name is not None else f"field{index}")
		out.append(Field(name=name, ty=ty, optional=optional))
	return tuple(out)


def _wire_shape(attrs: AttrSet) -> WireShape:
	if attrs.untagged:
		return Untagged()
	tag = attrs.tag
	if tag is not None:
		content = attrs.content
		if content is not None:
			return Adjacent(tag=tag, content=content)
		return Internal(tag=tag)
	return External()


def _build_payload(vdef: ast.VariantDef, generics: AbstractSet[str]) -> Payload:
	if vdef.kind == "tuple":
		elems = tuple(
			lower_type(f.ty, generics) for f in vdef.fields if not AttrSet.of(f.attrs).skip
		)
		return TuplePayload(elems)
	if vdef.kind == "named":
		return StructPayload(_build_fields(vdef.fields, generics))
	return UnitPayload()


def build_struct(decl: ast.StructItem, file: str, module: ModulePath) -> ExportedStruct:
	generics = decl.generics.type_names()
	return ExportedStruct(
		name=decl.name,
		generics=tuple(generics),
		fields=_build_fields(decl.fields, frozenset(generics)),
		file=file,
		module=module,
	)


def build_enum(decl: ast.EnumItem, attrs: AttrSet, file: str, module: ModulePath) -> ExportedEnum:
	generics = decl.generics.type_names()
	in_scope = frozenset(generics)
	rule = attrs.rename_all
	variants: List[Variant] = []
	for vdef in decl.variants:
		vattrs = AttrSet.of(vdef.attrs)
		if vattrs.skip:
			continue
		name = vattrs.rename or apply_rename_all(vdef.name, rule)
		variants.append(Variant(name=name, payload=_build_payload(vdef, in_scope)))
	return ExportedEnum(
		name=decl.name,
		generics=tuple(generics),
		shape=_wire_shape(attrs),
		variants=tuple(variants),
		file=file,
		module=module,
	)


def extract_exported_types(
	source: ast.SourceFile,
	file: str,
	module: ModulePath = ("crate",),
	mode: DetectionMode = DetectionMode.DIRECT,
	serde_impls: Optional[AbstractSet[str]] = None,
) -> List[ExportedType]:
	"""Exported structs/enums of one file (inline mods included), in declaration order."""
	if serde_impls is None:
		serde_impls = collect_serde_impls(source) if mode is DetectionMode.EXPANDED else frozenset()
	out: List[ExportedType] = []
	_extract_items(source.items, file, module, mode, serde_impls, out)
	return out


def _extract_items(
	items: Iterable[ast.Item],
	file: str,
	module: ModulePath,
	mode: DetectionMode,
	serde_impls: AbstractSet[str],
	out: List[ExportedType],
) -> None:
	for item in items:
		if isinstance(item, ast.StructItem):
			attrs = AttrSet.of(item.attrs)
			if _is_exported(item, attrs, mode, serde_impls):
				out.append(build_struct(item, file, module))
		elif isinstance(item, ast.EnumItem):
			attrs = AttrSet.of(item.attrs)
			if _is_exported(item, attrs, mode, serde_impls):
				out.append(build_enum(item, attrs, file, module))
		elif isinstance(item, ast.ModItem) and item.items is not None:
			_extract_items(item.items, file, module + (item.name,), mode, serde_impls, out)


__all__ = [
	"DetectionMode",
	"collect_serde_impls",
	"build_struct",
	"build_enum",
	"extract_exported_types",
]
