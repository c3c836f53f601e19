# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generator configuration (`tauri-codegen.json`).

Format (JSON; every section and key is optional and falls back to the
defaults below):
{
  "input": {
    "source_dir": "src-tauri/src",
    "exclude": ["tests", "target"],
    "expanded": false          // cargo-expand output: DetectionMode.EXPANDED
  },
  "output": {
    "types_file": "src/generated/types.ts",
    "commands_file": "src/generated/commands.ts"
  },
  "naming": {
    "type_prefix": "", "type_suffix": "",
    "function_prefix": "", "function_suffix": ""
  }
}

Relative paths are resolved against the directory holding the config file.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

DEFAULT_CONFIG_NAME = "tauri-codegen.json"


class ConfigError(ValueError):
	"""Malformed or unusable configuration."""


@dataclass(frozen=True)
class NamingConfig:
	type_prefix: str = ""
	type_suffix: str = ""
	function_prefix: str = ""
	function_suffix: str = ""


@dataclass
class InputConfig:
	source_dir: Path = Path("src-tauri/src")
	exclude: List[str] = field(default_factory=lambda: ["tests", "target"])
	expanded: bool = False


@dataclass
class OutputConfig:
	types_file: Path = Path("src/generated/types.ts")
	commands_file: Path = Path("src/generated/commands.ts")


@dataclass
class Config:
	input: InputConfig = field(default_factory=InputConfig)
	output: OutputConfig = field(default_factory=OutputConfig)
	naming: NamingConfig = field(default_factory=NamingConfig)

	@classmethod
	def default(cls) -> "Config":
		return cls()

	def to_json(self) -> Dict[str, Any]:
		return {
			"input": {
				"source_dir": self.input.source_dir.as_posix(),
				"exclude": list(self.input.exclude),
				"expanded": self.input.expanded,
			},
			"output": {
				"types_file": self.output.types_file.as_posix(),
				"commands_file": self.output.commands_file.as_posix(),
			},
			"naming": {
				"type_prefix": self.naming.type_prefix,
				"type_suffix": self.naming.type_suffix,
				"function_prefix": self.naming.function_prefix,
				"function_suffix": self.naming.function_suffix,
			},
		}


def _section(obj: Dict[str, Any], name: str) -> Dict[str, Any]:
	sec = obj.get(name)
	if sec is None:
		return {}
	if not isinstance(sec, dict):
		raise ConfigError(f"config section '{name}' must be a JSON object")
	return sec


def _string(sec: Dict[str, Any], section: str, key: str, default: str) -> str:
	value = sec.get(key, default)
	if not isinstance(value, str):
		raise ConfigError(f"config key '{section}.{key}' must be a string")
	return value


def _resolve(root: Path, value: str) -> Path:
	path = Path(value)
	return path if path.is_absolute() else root / path


def parse_config(obj: Any, root: Path) -> Config:
	"""Validate a decoded config object; relative paths are resolved against `root`."""
	if not isinstance(obj, dict):
		raise ConfigError("config must be a JSON object")
	defaults = Config.default()

	inp = _section(obj, "input")
	exclude = inp.get("exclude", defaults.input.exclude)
	if not isinstance(exclude, list) or not all(isinstance(e, str) for e in exclude):
		raise ConfigError("config key 'input.exclude' must be a list of strings")
	expanded = inp.get("expanded", False)
	if not isinstance(expanded, bool):
		raise ConfigError("config key 'input.expanded' must be a boolean")
	source_dir = _resolve(root, _string(inp, "input", "source_dir", defaults.input.source_dir.as_posix()))

	out = _section(obj, "output")
	types_file = _resolve(root, _string(out, "output", "types_file", defaults.output.types_file.as_posix()))
	commands_file = _resolve(root, _string(out, "output", "commands_file", defaults.output.commands_file.as_posix()))

	nam = _section(obj, "naming")
	naming = NamingConfig(
		type_prefix=_string(nam, "naming", "type_prefix", ""),
		type_suffix=_string(nam, "naming", "type_suffix", ""),
		function_prefix=_string(nam, "naming", "function_prefix", ""),
		function_suffix=_string(nam, "naming", "function_suffix", ""),
	)
	return Config(
		input=InputConfig(source_dir=source_dir, exclude=list(exclude), expanded=expanded),
		output=OutputConfig(types_file=types_file, commands_file=commands_file),
		naming=naming,
	)


def load_config(path: Path) -> Config:
	"""Load and validate a config file; `input.source_dir` must exist."""
	try:
		text = path.read_text(encoding="utf-8")
	except OSError as err:
		raise ConfigError(f"cannot read config: {err.strerror or err}") from err
	try:
		obj = json.loads(text)
	except json.JSONDecodeError as err:
		raise ConfigError(f"invalid JSON at line {err.lineno} column {err.colno}: {err.msg}") from err
	config = parse_config(obj, path.parent)
	if not config.input.source_dir.is_dir():
		raise ConfigError(f"source directory does not exist: {config.input.source_dir}")
	return config


def save_config(config: Config, path: Path) -> None:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(json.dumps(config.to_json(), indent=2) + "\n", encoding="utf-8")


__all__ = [
	"DEFAULT_CONFIG_NAME",
	"ConfigError",
	"NamingConfig",
	"InputConfig",
	"OutputConfig",
	"Config",
	"parse_config",
	"load_config",
	"save_config",
]
