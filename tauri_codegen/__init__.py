# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tauri_codegen: TypeScript bindings for Tauri commands.

Packages:
  parser: declaration-level Rust parser (lark) producing a dataclass syntax tree
  extract: command and serde type extraction, type lowering
  generator: TypeScript type mapping and rendering
  core: TypeExpr, records, diagnostics

Modules:
  resolver: cross-file module/name resolution
  reachability: type-graph closure from command signatures
  pipeline: per-run orchestration
  config, scanner, cli: project surface
"""

__version__ = "0.3.0"

__all__ = [
	"core",
	"parser",
	"extract",
	"generator",
	"resolver",
	"reachability",
	"pipeline",
	"config",
	"scanner",
	"cli",
]
