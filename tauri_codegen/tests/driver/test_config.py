# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from tauri_codegen.config import Config, ConfigError, load_config, save_config


def test_defaults_round_trip_through_init(tmp_path: Path) -> None:
	path = tmp_path / "tauri-codegen.json"
	save_config(Config.default(), path)
	obj = json.loads(path.read_text())
	assert obj["input"] == {"source_dir": "src-tauri/src", "exclude": ["tests", "target"], "expanded": False}
	assert obj["output"]["types_file"] == "src/generated/types.ts"
	assert obj["naming"]["type_prefix"] == ""


def test_load_resolves_relative_paths_against_config_dir(tmp_path: Path) -> None:
	(tmp_path / "backend").mkdir()
	path = tmp_path / "tauri-codegen.json"
	path.write_text(
		json.dumps(
			{
				"input": {"source_dir": "backend"},
				"output": {"types_file": "out/t.ts"},
				"naming": {"type_prefix": "I"},
			}
		)
	)
	config = load_config(path)
	assert config.input.source_dir == tmp_path / "backend"
	assert config.input.exclude == ["tests", "target"]
	assert config.output.types_file == tmp_path / "out" / "t.ts"
	assert config.output.commands_file == tmp_path / "src" / "generated" / "commands.ts"
	assert config.naming.type_prefix == "I"
	assert not config.input.expanded


def test_missing_source_dir_rejected(tmp_path: Path) -> None:
	path = tmp_path / "c.json"
	path.write_text(json.dumps({"input": {"source_dir": "nope"}}))
	with pytest.raises(ConfigError, match="source directory does not exist"):
		load_config(path)


def test_malformed_json_rejected(tmp_path: Path) -> None:
	path = tmp_path / "c.json"
	path.write_text("{ not json")
	with pytest.raises(ConfigError, match="invalid JSON"):
		load_config(path)


@pytest.mark.parametrize(
	"obj, message",
	[
		([], "must be a JSON object"),
		({"input": []}, "section 'input'"),
		({"input": {"exclude": "tests"}}, "input.exclude"),
		({"input": {"expanded": "yes"}}, "input.expanded"),
		({"naming": {"type_prefix": 1}}, "naming.type_prefix"),
	],
)
def test_shape_errors(tmp_path: Path, obj: object, message: str) -> None:
	path = tmp_path / "c.json"
	path.write_text(json.dumps(obj))
	with pytest.raises(ConfigError, match=message):
		load_config(path)


def test_config_error_is_value_error() -> None:
	assert issubclass(ConfigError, ValueError)
