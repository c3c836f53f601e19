# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command line interface.

  tauri-codegen generate [--config PATH] [--verbose] [--json] [--expanded]
  tauri-codegen init [--output PATH] [--force]

With --json, `generate` prints one JSON document (exit_code + diagnostics);
otherwise diagnostics go to stderr as `file:line:col: severity: message`.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from tauri_codegen.config import DEFAULT_CONFIG_NAME, Config, ConfigError, load_config, save_config
from tauri_codegen.core.diagnostics import Diagnostic, diagnostic_to_json, format_diagnostic, has_errors
from tauri_codegen.pipeline import GenerationFailed, generate


def _report(diagnostics: List[Diagnostic], *, as_json: bool) -> int:
	exit_code = 1 if has_errors(diagnostics) else 0
	if as_json:
		print(json.dumps({"exit_code": exit_code, "diagnostics": [diagnostic_to_json(d) for d in diagnostics]}))
	else:
		for d in diagnostics:
			print(format_diagnostic(d), file=sys.stderr)
	return exit_code


def _config_error(path: Path, msg: str, *, as_json: bool) -> int:
	if as_json:
		print(
			json.dumps(
				{
					"exit_code": 1,
					"diagnostics": [
						{"phase": "config", "message": msg, "severity": "error", "file": str(path), "line": None, "column": None}
					],
				}
			)
		)
	else:
		print(f"{path}:?:?: error: {msg}", file=sys.stderr)
	return 1


def _cmd_generate(args: argparse.Namespace) -> int:
	config_path: Path = args.config
	try:
		config = load_config(config_path)
	except ConfigError as err:
		return _config_error(config_path, str(err), as_json=args.json)

	log = (lambda msg: print(msg, file=sys.stderr)) if args.verbose else None
	try:
		result = generate(config, expanded=True if args.expanded else None, log=log)
	except GenerationFailed as err:
		return _report(err.diagnostics, as_json=args.json)
	except FileNotFoundError as err:
		return _config_error(config_path, str(err), as_json=args.json)
	return _report(result.diagnostics, as_json=args.json)


def _cmd_init(args: argparse.Namespace) -> int:
	out: Path = args.output
	if out.exists() and not args.force:
		print(f"{out}:?:?: error: config file already exists (use --force to overwrite)", file=sys.stderr)
		return 1
	save_config(Config.default(), out)
	print(f"wrote {out}")
	return 0


def build_arg_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="tauri-codegen",
		description="Generate TypeScript types and invoke wrappers from Tauri commands",
	)
	sub = parser.add_subparsers(dest="command", required=True)

	gen = sub.add_parser("generate", help="Generate types.ts and commands.ts")
	gen.add_argument("-c", "--config", type=Path, default=Path(DEFAULT_CONFIG_NAME), help=f"Config file (default: ./{DEFAULT_CONFIG_NAME})")
	gen.add_argument("-v", "--verbose", action="store_true", help="Print progress to stderr")
	gen.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	gen.add_argument(
		"--expanded",
		action="store_true",
		help="Treat sources as cargo-expand output (detect serde impls instead of derives)",
	)
	gen.set_defaults(func=_cmd_generate)

	init = sub.add_parser("init", help="Write a default config file")
	init.add_argument("-o", "--output", type=Path, default=Path(DEFAULT_CONFIG_NAME), help="Where to write the config")
	init.add_argument("-f", "--force", action="store_true", help="Overwrite an existing config")
	init.set_defaults(func=_cmd_init)
	return parser


def main(argv: list[str] | None = None) -> int:
	args = build_arg_parser().parse_args(argv)
	return args.func(args)


__all__ = ["build_arg_parser", "main"]
