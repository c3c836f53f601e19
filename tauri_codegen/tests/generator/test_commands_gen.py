# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from tauri_codegen.config import NamingConfig
from tauri_codegen.core.records import EntryPoint
from tauri_codegen.core.type_expr import TFallible, TGeneric, TList, TMap, TNamed, TOptional, TPrimitive
from tauri_codegen.generator.commands_gen import INVOKE_IMPORT, referenced_type_names, render_command, render_commands
from tauri_codegen.generator.type_mapper import TypeMapper


def _ep(name: str, args=(), ret=None) -> EntryPoint:
	return EntryPoint(name=name, args=tuple(args), ret=ret, file="src/main.rs")


def test_wrapper_with_args_and_return() -> None:
	ep = _ep("get_user", [("user_id", TPrimitive("i32"))], TFallible(TNamed("User")))
	assert render_command(ep, TypeMapper(known_types=["User"])) == (
		"export async function getUser(userId: number): Promise<User> {\n"
		'  return invoke<User>("get_user", { userId });\n'
		"}\n"
	)


def test_wrapper_without_args_or_return() -> None:
	assert render_command(_ep("ping"), TypeMapper()) == (
		"export async function ping(): Promise<void> {\n"
		'  return invoke<void>("ping");\n'
		"}\n"
	)


def test_wrapper_name_decoration() -> None:
	mapper = TypeMapper(NamingConfig(function_suffix="Cmd"))
	assert render_command(_ep("get_user"), mapper).startswith("export async function getUserCmd(): Promise<void> {")


def test_referenced_type_names_only_known_and_sorted() -> None:
	eps = [
		_ep("a", [("q", TNamed("Query"))], TList(TNamed("User"))),
		_ep("b", [], TMap(TPrimitive("String"), TOptional(TNamed("Team")))),
		_ep("c", [("x", TNamed("Foreign"))]),
	]
	mapper = TypeMapper(NamingConfig(type_prefix="I"), known_types=["Query", "User", "Team"])
	assert referenced_type_names(eps, mapper) == ["IQuery", "ITeam", "IUser"]


def test_commands_file_imports() -> None:
	eps = [_ep("list_users", [], TList(TNamed("User")))]
	text = render_commands(eps, TypeMapper(known_types=["User"]), "../types/index")
	assert INVOKE_IMPORT in text
	assert 'import type { User } from "../types/index";' in text
	assert "Promise<User[]>" in text


def test_commands_file_without_types_skips_type_import() -> None:
	text = render_commands([_ep("ping")], TypeMapper())
	assert "import type" not in text
	assert text.count("export async function") == 1


def test_generic_command_declares_type_parameters() -> None:
	ep = EntryPoint(
		name="echo",
		args=(("value", TGeneric("T")),),
		ret=TList(TGeneric("T")),
		file="src/main.rs",
		generics=("T",),
	)
	assert render_command(ep, TypeMapper()) == (
		"export async function echo<T>(value: T): Promise<T[]> {\n"
		'  return invoke<T[]>("echo", { value });\n'
		"}\n"
	)
