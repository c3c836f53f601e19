# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from tauri_codegen.core.records import (
	Adjacent,
	ExportedEnum,
	ExportedStruct,
	External,
	Field,
	Internal,
	StructPayload,
	TuplePayload,
	UnitPayload,
	Untagged,
	Variant,
)
from tauri_codegen.core.type_expr import TGeneric, TList, TNamed, TPrimitive
from tauri_codegen.extract.serde_types import DetectionMode, collect_serde_impls, extract_exported_types
from tauri_codegen.parser import parser as p


def _extract(src: str, mode: DetectionMode = DetectionMode.DIRECT):
	return extract_exported_types(p.parse_source(src), "src/models.rs", ("crate", "models"), mode)


def test_direct_mode_requires_serde_derive() -> None:
	recs = _extract(
		"""
#[derive(Serialize)]
pub struct A { x: u8 }
#[derive(serde::Deserialize)]
pub struct B { y: u8 }
#[derive(Debug, Clone)]
pub struct C { z: u8 }
"""
	)
	assert [r.name for r in recs] == ["A", "B"]
	assert recs[0] == ExportedStruct(
		name="A",
		generics=(),
		fields=(Field("x", TPrimitive("u8")),),
		file="src/models.rs",
		module=("crate", "models"),
	)


def test_field_rename_skip_and_ts_optional() -> None:
	recs = _extract(
		"""
#[derive(Serialize)]
#[serde(rename_all = "camelCase")]
struct User {
	#[serde(rename = "userId")]
	id: u64,
	display_name: String,
	#[serde(skip)]
	secret: String,
	#[ts(optional)]
	nickname: Option<String>,
}
"""
	)
	(user,) = recs
	assert isinstance(user, ExportedStruct)
	assert user.fields == (
		Field("userId", TPrimitive("u64")),
		Field("display_name", TPrimitive("String")),
		Field("nickname", TPrimitive("String"), optional=True),
	)


def test_tuple_struct_fields_and_generics() -> None:
	(pair,) = _extract("#[derive(Serialize)] struct Pair<T>(T, Vec<T>);")
	assert isinstance(pair, ExportedStruct)
	assert pair.generics == ("T",)
	assert [f.name for f in pair.fields] == ["field0", "field1"]
	assert pair.fields[1].ty == TList(TGeneric("T"))


def test_enum_wire_shapes() -> None:
	recs = _extract(
		"""
#[derive(Serialize)]
enum Ext { A }
#[derive(Serialize)]
#[serde(tag = "type")]
enum Int { A }
#[derive(Serialize)]
#[serde(tag = "t", content = "c")]
enum Adj { A }
#[derive(Serialize)]
#[serde(untagged)]
enum Unt { A }
"""
	)
	assert [r.shape for r in recs] == [External(), Internal("type"), Adjacent("t", "c"), Untagged()]


def test_enum_variant_renames_and_payloads() -> None:
	(event,) = _extract(
		"""
#[derive(Serialize, Deserialize)]
#[serde(rename_all = "SCREAMING-KEBAB-CASE")]
enum Event {
	FieldA,
	#[serde(rename = "custom")]
	Renamed(String),
	Moved { x: i32, y: i32 },
	#[serde(skip)]
	Internal,
}
"""
	)
	assert isinstance(event, ExportedEnum)
	assert event.variants == (
		Variant("FIELD-A", UnitPayload()),
		Variant("custom", TuplePayload((TPrimitive("String"),))),
		Variant("MOVED", StructPayload((Field("x", TPrimitive("i32")), Field("y", TPrimitive("i32"))))),
	)
	assert not event.is_unit_only


def test_inline_mods_extend_module_path() -> None:
	recs = _extract(
		"""
mod inner {
	#[derive(Serialize)]
	pub struct Deep { v: Other }
}
"""
	)
	assert [(r.name, r.module) for r in recs] == [("Deep", ("crate", "models", "inner"))]
	assert recs[0].fields[0].ty == TNamed("Other")


def test_expanded_mode_detects_impls_in_const_blocks() -> None:
	src = """
pub struct User { id: u64 }
pub struct Plain { id: u64 }
#[doc(hidden)]
const _: () = {
	extern crate serde as _serde;
	impl _serde::Serialize for User {
		fn serialize<__S>(&self, __serializer: __S) -> _serde::__private::Result<__S::Ok, __S::Error> {
			todo!()
		}
	}
};
"""
	assert collect_serde_impls(p.parse_source(src)) == {"User"}
	recs = _extract(src, DetectionMode.EXPANDED)
	assert [r.name for r in recs] == ["User"]


def test_expanded_mode_detects_serde_field_attributes() -> None:
	recs = _extract(
		"""
pub struct Config {
	#[serde(default)]
	retries: u8,
}
pub enum Mode {
	Fast,
	Slow { #[serde(rename = "ms")] delay: u64 },
}
pub struct Bare { a: u8 }
""",
		DetectionMode.EXPANDED,
	)
	assert [r.name for r in recs] == ["Config", "Mode"]
