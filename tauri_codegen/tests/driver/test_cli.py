# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from tauri_codegen.cli import main


def _project(tmp_path: Path, main_rs: str) -> Path:
	src = tmp_path / "src-tauri" / "src"
	src.mkdir(parents=True)
	(src / "main.rs").write_text(main_rs)
	config = tmp_path / "tauri-codegen.json"
	assert main(["init", "--output", str(config)]) == 0
	return config


def test_init_refuses_to_overwrite(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	config = tmp_path / "tauri-codegen.json"
	assert main(["init", "--output", str(config)]) == 0
	assert main(["init", "--output", str(config)]) == 1
	assert "already exists" in capsys.readouterr().err
	assert main(["init", "--output", str(config), "--force"]) == 0


def test_generate_success(tmp_path: Path) -> None:
	config = _project(
		tmp_path,
		"#[derive(Serialize)]\nstruct User { id: u8 }\n#[tauri::command]\nfn me() -> User { todo!() }\n",
	)
	assert main(["generate", "--config", str(config)]) == 0
	commands = (tmp_path / "src" / "generated" / "commands.ts").read_text()
	assert "export async function me(): Promise<User> {" in commands
	assert 'import type { User } from "./types";' in commands


def test_generate_parse_error_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	config = _project(tmp_path, "struct Broken {")
	capsys.readouterr()
	assert main(["generate", "--config", str(config), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	assert payload["diagnostics"][0]["phase"] == "parser"
	assert payload["diagnostics"][0]["severity"] == "error"


def test_generate_missing_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	missing = tmp_path / "nope.json"
	assert main(["generate", "--config", str(missing)]) == 1
	err = capsys.readouterr().err
	assert err.startswith(f"{missing}:?:?: error: cannot read config")


def test_generate_warnings_keep_exit_zero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	config = _project(
		tmp_path,
		"#[derive(Serialize)]\nstruct Raw { p: *const u8 }\n#[tauri::command]\nfn raw() -> Raw { todo!() }\n",
	)
	assert main(["generate", "--config", str(config), "--verbose"]) == 0
	err = capsys.readouterr().err
	assert "warning: unsupported type 'raw pointer'" in err
	assert "wrote" in err
