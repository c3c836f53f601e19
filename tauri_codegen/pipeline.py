# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generation pipeline.

parse (per file) -> extract commands and serializable types (per file) ->
register module scopes -> reachability -> canonical (declared) names ->
render types.ts and commands.ts.

All per-run state lives in a `GenerationContext`; nothing is global, so two
runs never observe each other.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from tauri_codegen.config import Config, NamingConfig
from tauri_codegen.core.diagnostics import Diagnostic, Span, has_errors
from tauri_codegen.core.records import EntryPoint, ExportedType, ModulePath
from tauri_codegen.extract import DetectionMode, extract_entry_points, extract_exported_types
from tauri_codegen.generator import TypeMapper, render_commands, render_types
from tauri_codegen.parser import RustParseError, ast, parse_rust_file
from tauri_codegen.reachability import canonical_names, compute_reachable
from tauri_codegen.resolver import ModuleResolver
from tauri_codegen.scanner import scan_rust_files


@dataclass
class GenerationContext:
	naming: NamingConfig
	mode: DetectionMode
	resolver: ModuleResolver
	entry_points: List[EntryPoint] = field(default_factory=list)
	# In (file, declaration) order.
	exported: List[ExportedType] = field(default_factory=list)
	diagnostics: List[Diagnostic] = field(default_factory=list)

	def add_source(self, file: str, source: ast.SourceFile, module: Optional[ModulePath] = None) -> None:
		module = self.resolver.add_file(file, source, module)
		self.entry_points.extend(extract_entry_points(source, file, module))
		self.exported.extend(extract_exported_types(source, file, module, self.mode))


@dataclass
class GenerationResult:
	types_text: str
	commands_text: str
	reachable: List[ExportedType]
	entry_points: List[EntryPoint]
	diagnostics: List[Diagnostic]


class GenerationFailed(Exception):
	"""Raised when a run produced error diagnostics; nothing has been written."""

	def __init__(self, diagnostics: List[Diagnostic]) -> None:
		super().__init__(f"{sum(1 for d in diagnostics if d.is_error)} error(s)")
		self.diagnostics = diagnostics


def parse_diagnostic(err: RustParseError) -> Diagnostic:
	return Diagnostic(
		message=str(err),
		phase="parser",
		span=Span(file=err.file, line=err.line, column=err.column),
	)


def parse_files(paths: Sequence[Path]) -> Tuple[List[Tuple[Path, ast.SourceFile]], List[Diagnostic]]:
	"""Parse every file; syntax errors become diagnostics so all of them are reported."""
	parsed: List[Tuple[Path, ast.SourceFile]] = []
	diagnostics: List[Diagnostic] = []
	for path in paths:
		try:
			parsed.append((path, parse_rust_file(path)))
		except RustParseError as err:
			diagnostics.append(parse_diagnostic(err))
		except (OSError, UnicodeDecodeError) as err:
			diagnostics.append(Diagnostic(message=f"cannot read source: {err}", phase="parser", span=Span(file=str(path))))
	return parsed, diagnostics


def types_import_path(types_file: Path, commands_file: Path) -> str:
	"""Module specifier of `types_file` as seen from `commands_file` (`./types`)."""
	rel = Path(os.path.relpath(types_file, commands_file.parent)).with_suffix("")
	specifier = rel.as_posix()
	return specifier if specifier.startswith("../") else "./" + specifier


def run_generation(
	files: Sequence[Tuple[Path, ast.SourceFile]],
	mode: DetectionMode = DetectionMode.DIRECT,
	naming: Optional[NamingConfig] = None,
	*,
	base: Optional[Path] = None,
	types_import: str = "./types",
) -> GenerationResult:
	"""
	Generate both outputs from parsed files.

	`files` are processed in the given order (callers pass sorted paths); `base`
	is the crate source root used for module paths.
	"""
	ctx = GenerationContext(naming=naming or NamingConfig(), mode=mode, resolver=ModuleResolver(base))
	for path, source in files:
		ctx.add_source(str(path), source)
	ctx.diagnostics.extend(ctx.resolver.diagnostics)

	reachable = compute_reachable(ctx.entry_points, ctx.exported, ctx.resolver, ctx.diagnostics)
	entry_points, reachable = canonical_names(ctx.entry_points, reachable, ctx.resolver)
	mapper = TypeMapper(ctx.naming, (rec.name for rec in reachable), ctx.diagnostics)
	types_text = render_types(reachable, mapper)
	commands_text = render_commands(entry_points, mapper, types_import)
	return GenerationResult(
		types_text=types_text,
		commands_text=commands_text,
		reachable=reachable,
		entry_points=entry_points,
		diagnostics=ctx.diagnostics,
	)


def generate(
	config: Config,
	*,
	expanded: Optional[bool] = None,
	log: Optional[Callable[[str], None]] = None,
) -> GenerationResult:
	"""
	Scan, parse, generate and write both output files.

	Raises GenerationFailed (before writing anything) when any file fails to
	parse. `log` receives progress lines.
	"""
	say = log or (lambda _msg: None)
	source_dir = config.input.source_dir
	paths = scan_rust_files(source_dir, config.input.exclude)
	say(f"scanning {source_dir}: {len(paths)} Rust file(s)")

	parsed, diagnostics = parse_files(paths)
	if has_errors(diagnostics):
		raise GenerationFailed(diagnostics)

	use_expanded = config.input.expanded if expanded is None else expanded
	mode = DetectionMode.EXPANDED if use_expanded else DetectionMode.DIRECT
	result = run_generation(
		parsed,
		mode,
		config.naming,
		base=source_dir,
		types_import=types_import_path(config.output.types_file, config.output.commands_file),
	)
	result.diagnostics[:0] = diagnostics
	say(f"found {len(result.entry_points)} command(s) and {len(result.reachable)} reachable type(s)")

	for out_path, text in (
		(config.output.types_file, result.types_text),
		(config.output.commands_file, result.commands_text),
	):
		out_path.parent.mkdir(parents=True, exist_ok=True)
		out_path.write_text(text, encoding="utf-8")
		say(f"wrote {out_path}")
	return result


__all__ = [
	"GenerationContext",
	"GenerationResult",
	"GenerationFailed",
	"parse_diagnostic",
	"parse_files",
	"types_import_path",
	"run_generation",
	"generate",
]
