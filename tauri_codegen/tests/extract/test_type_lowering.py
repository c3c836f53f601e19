# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

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
from tauri_codegen.extract.type_lowering import lower_type
from tauri_codegen.parser import parser as p


def _lower(ty_src: str, generics: frozenset[str] = frozenset()) -> TypeExpr:
	src = p.parse_source(f"struct S {{ f: {ty_src} }}")
	return lower_type(src.items[0].fields[0].ty, generics)


def test_containers() -> None:
	assert _lower("Vec<String>") == TList(TPrimitive("String"))
	assert _lower("HashSet<u8>") == TList(TPrimitive("u8"))
	assert _lower("[u8; 4]") == TList(TPrimitive("u8"))
	assert _lower("&[i64]") == TList(TPrimitive("i64"))
	assert _lower("Option<bool>") == TOptional(TPrimitive("bool"))
	assert _lower("Result<User, String>") == TFallible(TNamed("User"))
	assert _lower("BTreeMap<String, f64>") == TMap(TPrimitive("String"), TPrimitive("f64"))


def test_transparent_wrappers_and_references() -> None:
	assert _lower("Box<User>") == TNamed("User")
	assert _lower("Arc<Vec<u8>>") == TList(TPrimitive("u8"))
	assert _lower("Cow<'a, str>") == TPrimitive("str")
	assert _lower("&'a str") == TPrimitive("str")


def test_unit_and_tuples() -> None:
	assert _lower("()") == TUnit()
	assert _lower("(u8, String)") == TTuple((TPrimitive("u8"), TPrimitive("String")))


def test_generics_and_named_paths() -> None:
	assert _lower("T", frozenset({"T"})) == TGeneric("T")
	assert _lower("Page<T>", frozenset({"T"})) == TNamed("Page", args=(TGeneric("T"),))
	assert _lower("crate::models::User") == TNamed("User", path=("crate", "models", "User"))
	assert _lower("chrono::DateTime<Utc>") == TPrimitive("DateTime")


def test_unclassifiable_shapes() -> None:
	assert _lower("Vec") == TUnrecognized("Vec<?>")
	assert _lower("Option") == TUnrecognized("Option<?>")
	assert _lower("std::collections::HashMap") == TUnrecognized("HashMap<?>")
	assert _lower("Box") == TUnrecognized("Box<?>")
	assert _lower("HashMap<String>") == TMap(TPrimitive("String"), TUnrecognized("HashMap<?>"))
	assert _lower("*const u8") == TUnrecognized("raw pointer")
	assert _lower("fn(u8) -> u8") == TUnrecognized("fn pointer")
	assert isinstance(_lower("<T as Iterator>::Item", frozenset({"T"})), TUnrecognized)
	assert isinstance(_lower("T::Output", frozenset({"T"})), TUnrecognized)
