# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

import pytest

from tauri_codegen.config import Config, InputConfig, NamingConfig, OutputConfig
from tauri_codegen.extract import DetectionMode
from tauri_codegen.parser import parser as p
from tauri_codegen.pipeline import GenerationFailed, generate, run_generation, types_import_path

_MAIN = """
use serde::{Deserialize, Serialize};

#[derive(Debug, Serialize, Deserialize)]
pub struct User {
	pub id: i32,
	pub name: String,
}

#[derive(Serialize)]
pub enum Status {
	Active,
	Inactive,
}

#[derive(Serialize)]
pub struct NeverUsed {
	pub x: u8,
}

#[tauri::command]
pub fn get_user(id: i32) -> Result<User, String> {
	Ok(User { id, name: "a".into() })
}

#[tauri::command]
pub fn list_users() -> Vec<User> {
	vec![]
}

#[tauri::command]
pub fn find_user(name: String) -> Option<User> {
	None
}

#[tauri::command]
pub fn users_by_name() -> std::collections::HashMap<String, User> {
	Default::default()
}

#[tauri::command]
pub fn status() -> Status {
	Status::Active
}
"""


def _write(root: Path, rel: str, src: str) -> Path:
	path = root / rel
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(src)
	return path


def _run(src: str, naming: NamingConfig | None = None):
	return run_generation([(Path("src/main.rs"), p.parse_source(src))], DetectionMode.DIRECT, naming)


def test_end_to_end_types_and_commands() -> None:
	result = _run(_MAIN)
	assert "export interface User {" in result.types_text
	assert "id: number;" in result.types_text
	assert "name: string;" in result.types_text
	assert 'export type Status = "Active" | "Inactive";' in result.types_text
	assert "NeverUsed" not in result.types_text

	commands = result.commands_text
	assert 'import { invoke } from "@tauri-apps/api/core";' in commands
	assert 'import type { Status, User } from "./types";' in commands
	assert "export async function getUser(id: number): Promise<User> {" in commands
	assert 'return invoke<User>("get_user", { id });' in commands
	assert "Promise<User[]>" in commands
	assert "Promise<User | null>" in commands
	assert "Promise<Record<string, User>>" in commands
	assert [ep.name for ep in result.entry_points] == ["get_user", "list_users", "find_user", "users_by_name", "status"]
	assert result.diagnostics == []


def test_naming_prefixes_and_suffixes() -> None:
	result = _run(_MAIN, NamingConfig(type_prefix="I", function_suffix="Cmd"))
	assert "export interface IUser {" in result.types_text
	assert "export async function getUserCmd(id: number): Promise<IUser> {" in result.commands_text
	assert "import type { IStatus, IUser }" in result.commands_text


def test_multi_file_crate_uses_module_paths(tmp_path: Path) -> None:
	src = tmp_path / "src"
	main = _write(src, "main.rs", "mod models;\nuse models::Item;\n#[tauri::command]\nfn items() -> Vec<Item> { vec![] }\n")
	models = _write(src, "models.rs", "#[derive(Serialize)]\npub struct Item { pub label: String }\n")
	files = [(path, p.parse_source(path.read_text())) for path in sorted([main, models])]
	result = run_generation(files, base=src)
	assert [(r.name, r.module) for r in result.reachable] == [("Item", ("crate", "models"))]
	assert "label: string;" in result.types_text


def _two_files(commands_src: str):
	types_src = "#[derive(Serialize)]\npub struct User { pub id: u64 }\n"
	files = [
		(Path("src/commands.rs"), p.parse_source(commands_src)),
		(Path("src/types.rs"), p.parse_source(types_src)),
	]
	return run_generation(files, base=Path("src"))


def test_aliased_import_renders_declared_name() -> None:
	result = _two_files("use crate::types::User as MyUser;\n#[tauri::command]\npub fn get() -> Vec<MyUser> { vec![] }\n")
	assert [r.name for r in result.reachable] == ["User"]
	assert "export interface User {" in result.types_text
	assert 'import type { User } from "./types";' in result.commands_text
	assert "export async function get(): Promise<User[]> {" in result.commands_text
	assert "MyUser" not in result.commands_text


def test_external_import_is_not_bound_to_local_type() -> None:
	result = _two_files("use other_crate::User;\n#[tauri::command]\npub fn get() -> User { todo!() }\n")
	assert result.reachable == []
	assert "import type" not in result.commands_text
	assert "Promise<User>" in result.commands_text


def test_types_import_path() -> None:
	assert types_import_path(Path("/p/src/generated/types.ts"), Path("/p/src/generated/commands.ts")) == "./types"
	assert types_import_path(Path("/p/src/types/index.ts"), Path("/p/src/api/commands.ts")) == "../types/index"


def _config(tmp_path: Path) -> Config:
	return Config(
		input=InputConfig(source_dir=tmp_path / "src-tauri" / "src", exclude=["tests"]),
		output=OutputConfig(
			types_file=tmp_path / "src" / "generated" / "types.ts",
			commands_file=tmp_path / "src" / "generated" / "commands.ts",
		),
	)


def test_generate_writes_outputs(tmp_path: Path) -> None:
	config = _config(tmp_path)
	_write(config.input.source_dir, "main.rs", _MAIN)
	_write(config.input.source_dir, "tests/broken.rs", "this is not rust {")
	lines: list[str] = []
	result = generate(config, log=lines.append)
	assert config.output.types_file.read_text() == result.types_text
	assert config.output.commands_file.read_text() == result.commands_text
	assert "export interface User {" in result.types_text
	assert any("1 Rust file" in line for line in lines)


def test_generate_parse_error_writes_nothing(tmp_path: Path) -> None:
	config = _config(tmp_path)
	_write(config.input.source_dir, "main.rs", "struct Broken {\n\ta: u8\n\tb: u8\n}\n")
	with pytest.raises(GenerationFailed) as info:
		generate(config)
	(diag,) = info.value.diagnostics
	assert diag.phase == "parser"
	assert diag.span.line == 3
	assert diag.span.file is not None and diag.span.file.endswith("main.rs")
	assert not config.output.types_file.exists()
	assert not config.output.commands_file.exists()


def test_generate_expanded_mode(tmp_path: Path) -> None:
	config = _config(tmp_path)
	_write(
		config.input.source_dir,
		"main.rs",
		"""
pub struct User { id: u64 }
const _: () = {
	impl _serde::Serialize for User {
		fn serialize<S>(&self, s: S) -> Result<S::Ok, S::Error> { todo!() }
	}
};
#[tauri::command]
fn me() -> User { todo!() }
""",
	)
	direct = generate(config)
	assert direct.reachable == []
	expanded = generate(config, expanded=True)
	assert [r.name for r in expanded.reachable] == ["User"]
