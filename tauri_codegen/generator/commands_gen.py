# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
commands.ts renderer: one typed `invoke` wrapper per command.

Tauri converts command argument names to camelCase on the JS side, so
wrapper parameters and payload keys are camelCased; the command string keeps
the Rust name.
"""

from __future__ import annotations

from typing import List, Sequence

from tauri_codegen.core.casing import to_camel_case
from tauri_codegen.core.diagnostics import Span
from tauri_codegen.core.records import EntryPoint, signature_types
from tauri_codegen.core.type_expr import iter_named
from tauri_codegen.generator.type_mapper import TypeMapper
from tauri_codegen.generator.types_gen import HEADER, ts_string

INVOKE_IMPORT = 'import { invoke } from "@tauri-apps/api/core";'


def referenced_type_names(entry_points: Sequence[EntryPoint], mapper: TypeMapper) -> List[str]:
	"""Decorated names of emitted types used by any wrapper signature, sorted."""
	names = set()
	for ep in entry_points:
		for ty in signature_types(ep):
			for named in iter_named(ty):
				if named.name in mapper.known_types:
					names.add(mapper.type_name(named.name))
	return sorted(names)


def render_command(ep: EntryPoint, mapper: TypeMapper) -> str:
	span = Span(file=ep.file)
	generics = frozenset(ep.generics)
	params = [f"{to_camel_case(name)}: {mapper.map(ty, generics, span=span)}" for name, ty in ep.args]
	ret = mapper.map(ep.ret, generics, span=span) if ep.ret is not None else "void"
	type_params = "<" + ", ".join(ep.generics) + ">" if ep.generics else ""
	call_args = [ts_string(ep.name)]
	if ep.args:
		call_args.append("{ " + ", ".join(to_camel_case(name) for name, _ in ep.args) + " }")
	return "\n".join(
		[
			f"export async function {mapper.function_name(ep.name)}{type_params}({', '.join(params)}): Promise<{ret}> {{",
			f"  return invoke<{ret}>({', '.join(call_args)});",
			"}",
		]
	) + "\n"


def render_commands(entry_points: Sequence[EntryPoint], mapper: TypeMapper, types_import: str = "./types") -> str:
	"""Full commands.ts text; `types_import` is the module specifier of types.ts."""
	imports = [INVOKE_IMPORT]
	names = referenced_type_names(entry_points, mapper)
	if names:
		imports.append(f"import type {{ {', '.join(names)} }} from {ts_string(types_import)};")
	blocks = [HEADER, "\n".join(imports) + "\n"] + [render_command(ep, mapper) for ep in entry_points]
	return "\n".join(blocks)


__all__ = ["INVOKE_IMPORT", "referenced_type_names", "render_command", "render_commands"]
