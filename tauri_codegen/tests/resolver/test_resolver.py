# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

from tauri_codegen.parser import parser as p
from tauri_codegen.resolver import Ambiguous, Found, ModuleResolver, NotFound, path_to_module


def _resolver(files: dict[str, tuple[tuple[str, ...], str]]) -> ModuleResolver:
	r = ModuleResolver()
	for file in sorted(files):
		module, src = files[file]
		r.add_file(file, p.parse_source(src), module)
	return r


def test_path_to_module() -> None:
	base = Path("/proj/src")
	assert path_to_module(base / "main.rs", base) == ("crate",)
	assert path_to_module(base / "lib.rs", base) == ("crate",)
	assert path_to_module(base / "models.rs", base) == ("crate", "models")
	assert path_to_module(base / "models" / "mod.rs", base) == ("crate", "models")
	assert path_to_module(base / "models" / "user.rs", base) == ("crate", "models", "user")


def test_add_file_derives_module_from_base() -> None:
	r = ModuleResolver(Path("/proj/src"))
	module = r.add_file("/proj/src/api/mod.rs", p.parse_source("struct X;"))
	assert module == ("crate", "api")
	assert r.resolve("X", "/proj/src/api/mod.rs") == Found("/proj/src/api/mod.rs", ("crate", "api"), "X")


def test_local_declaration_wins() -> None:
	r = _resolver(
		{
			"src/main.rs": (("crate",), "struct User;"),
			"src/models.rs": (("crate", "models"), "struct User;"),
		}
	)
	assert r.resolve("User", "src/main.rs") == Found("src/main.rs", ("crate",), "User")


def test_import_alias_and_super_paths() -> None:
	r = _resolver(
		{
			"src/models.rs": (("crate", "models"), "pub struct User; pub struct Team;"),
			"src/api/commands.rs": (
				("crate", "api", "commands"),
				"use super::super::models::User as Member;\nuse crate::models::Team;",
			),
		}
	)
	assert r.resolve("Member", "src/api/commands.rs") == Found("src/models.rs", ("crate", "models"), "User")
	assert r.resolve("Team", "src/api/commands.rs") == Found("src/models.rs", ("crate", "models"), "Team")


def test_unanchored_import_is_tried_relative_then_from_crate() -> None:
	r = _resolver(
		{
			"src/main.rs": (("crate",), "mod models;\nuse models::User;"),
			"src/models.rs": (("crate", "models"), "pub struct User;"),
		}
	)
	assert r.resolve("User", "src/main.rs") == Found("src/models.rs", ("crate", "models"), "User")


def test_glob_imports_in_declaration_order() -> None:
	r = _resolver(
		{
			"src/a.rs": (("crate", "a"), "pub struct Item;"),
			"src/b.rs": (("crate", "b"), "pub struct Item;"),
			"src/main.rs": (("crate",), "use crate::b::*;\nuse crate::a::*;"),
		}
	)
	assert r.resolve("Item", "src/main.rs") == Found("src/b.rs", ("crate", "b"), "Item")


def test_qualified_paths() -> None:
	r = _resolver(
		{
			"src/main.rs": (("crate",), "mod models;"),
			"src/models.rs": (("crate", "models"), "pub struct User;"),
			"src/api.rs": (("crate", "api"), "use crate::models as m;"),
		}
	)
	found = Found("src/models.rs", ("crate", "models"), "User")
	assert r.resolve("models::User", "src/main.rs") == found
	assert r.resolve("crate::models::User", "src/api.rs") == found
	assert r.resolve("super::models::User", "src/api.rs") == found
	assert r.resolve("m::User", "src/api.rs") == found
	assert r.resolve("self::User", "src/models.rs") == found
	assert r.resolve("crate::api::User", "src/main.rs") == NotFound()


def test_super_past_root_is_not_found() -> None:
	r = _resolver({"src/main.rs": (("crate",), "struct User;")})
	assert r.resolve("super::User", "src/main.rs") == NotFound()


def test_external_types_not_found() -> None:
	r = _resolver({"src/main.rs": (("crate",), "use chrono::DateTime;")})
	assert r.resolve("DateTime", "src/main.rs") == NotFound()
	assert r.resolve("serde_json::Value", "src/main.rs") == NotFound()


def test_failed_explicit_import_does_not_fall_back() -> None:
	r = _resolver(
		{
			"src/commands.rs": (("crate", "commands"), "use other_crate::User;\nuse crate::types::*;"),
			"src/types.rs": (("crate", "types"), "pub struct User;"),
		}
	)
	assert r.resolve("User", "src/commands.rs") == NotFound()


def test_reexports_are_followed() -> None:
	r = _resolver(
		{
			"src/models/mod.rs": (("crate", "models"), "mod user;\npub use user::User;"),
			"src/models/user.rs": (("crate", "models", "user"), "pub struct User;"),
			"src/api.rs": (("crate", "api"), "use crate::models::User;"),
		}
	)
	assert r.resolve("User", "src/api.rs") == Found("src/models/user.rs", ("crate", "models", "user"), "User")


def test_inline_mod_scopes() -> None:
	r = _resolver(
		{
			"src/main.rs": (
				("crate",),
				"mod inner {\n\tpub struct X;\n\tmod deeper { use super::X; }\n}",
			),
		}
	)
	assert r.resolve("inner::X", "src/main.rs") == Found("src/main.rs", ("crate", "inner"), "X")
	assert r.resolve("X", "src/main.rs", ("crate", "inner", "deeper")) == Found("src/main.rs", ("crate", "inner"), "X")


def test_ambiguity_and_sibling_preference() -> None:
	r = _resolver(
		{
			"src/a/user.rs": (("crate", "a", "user"), "pub struct User;"),
			"src/b/user.rs": (("crate", "b", "user"), "pub struct User;"),
			"src/main.rs": (("crate",), "fn main() {}"),
			"src/a/commands.rs": (("crate", "a", "commands"), "fn f() {}"),
		}
	)
	amb = r.resolve("User", "src/main.rs")
	assert amb == Ambiguous(
		files=("src/a/user.rs", "src/b/user.rs"),
		modules=(("crate", "a", "user"), ("crate", "b", "user")),
	)
	assert r.resolve("User", "src/a/commands.rs") == Found("src/a/user.rs", ("crate", "a", "user"), "User")


def test_single_global_candidate_found_without_import() -> None:
	r = _resolver(
		{
			"src/models.rs": (("crate", "models"), "pub struct User;"),
			"src/main.rs": (("crate",), ""),
		}
	)
	assert r.resolve("User", "src/main.rs") == Found("src/models.rs", ("crate", "models"), "User")
	assert r.resolve("Missing", "src/main.rs") == NotFound()


def test_resolution_is_idempotent() -> None:
	r = _resolver(
		{
			"src/a/user.rs": (("crate", "a", "user"), "pub struct User;"),
			"src/b/user.rs": (("crate", "b", "user"), "pub struct User;"),
			"src/main.rs": (("crate",), "use crate::a::user::*;"),
		}
	)
	first = [r.resolve(ref, "src/main.rs") for ref in ("User", "b::user::User", "Nope")]
	second = [r.resolve(ref, "src/main.rs") for ref in ("User", "b::user::User", "Nope")]
	assert first == second
	assert first[0] == Found("src/a/user.rs", ("crate", "a", "user"), "User")


def test_duplicate_module_registration_warns() -> None:
	r = ModuleResolver()
	r.add_file("src/models.rs", p.parse_source("struct A;"), ("crate", "models"))
	r.add_file("src/models/mod.rs", p.parse_source("struct B;"), ("crate", "models"))
	assert len(r.diagnostics) == 1
	assert r.diagnostics[0].severity == "warning"
	assert r.resolve("A", "src/models.rs") == Found("src/models.rs", ("crate", "models"), "A")
