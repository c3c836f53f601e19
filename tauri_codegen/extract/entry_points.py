# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command (entry point) extraction.

Commands are functions marked `#[tauri::command]` or `#[command]` found:
- at file level,
- inside `impl` blocks,
- one level inside an inline `mod` block.

Parameters Tauri injects (state, window and app handles) and `self`
receivers are not part of the frontend signature and are dropped.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from tauri_codegen.core import known_types
from tauri_codegen.core.records import EntryPoint, ModulePath
from tauri_codegen.core.type_expr import TGeneric, TTuple, TUnit, TypeExpr, children
from tauri_codegen.extract.attributes import AttrSet
from tauri_codegen.extract.type_lowering import lower_type
from tauri_codegen.parser import ast


def _is_injected(ty: ast.TypeAst) -> bool:
	while isinstance(ty, (ast.TypeRef, ast.TypeParen)):
		ty = ty.inner
	return (
		isinstance(ty, ast.TypePath)
		and ty.qself is None
		and bool(ty.segments)
		and ty.last.name in known_types.INJECTED_HANDLE_TYPES
	)


def _lower_return(fn: ast.FnItem, generics: frozenset[str]) -> Optional[TypeExpr]:
	if fn.ret is None:
		return None
	ret = lower_type(fn.ret, generics)
	if isinstance(ret, TUnit) or ret == TTuple(()):
		return None
	return ret


def _used_generics(tys: Sequence[TypeExpr], declared: Sequence[str]) -> Tuple[str, ...]:
	"""Declared type parameters that occur in `tys`, in declaration order."""
	used = set()
	stack = list(tys)
	while stack:
		node = stack.pop()
		if isinstance(node, TGeneric):
			used.add(node.name)
		stack.extend(children(node))
	return tuple(name for name in declared if name in used)


def entry_point_from_fn(fn: ast.FnItem, file: str, module: ModulePath) -> EntryPoint:
	generics = frozenset(fn.generics.type_names())
	args = []
	for param in fn.params:
		if isinstance(param, ast.SelfParam):
			continue
		if param.name is None or _is_injected(param.ty):
			continue
		args.append((param.name, lower_type(param.ty, generics)))
	ret = _lower_return(fn, generics)
	type_params = [p.name for p in fn.generics.params if p.kind == "type"]
	signature = [ty for _, ty in args] + ([ret] if ret is not None else [])
	return EntryPoint(
		name=fn.name,
		args=tuple(args),
		ret=ret,
		file=file,
		module=module,
		is_async=fn.is_async,
		generics=_used_generics(signature, type_params),
	)


def _command_fns(items: Iterable[ast.Item]) -> Iterable[ast.FnItem]:
	for item in items:
		if isinstance(item, ast.FnItem) and AttrSet.of(item.attrs).is_command:
			yield item


def extract_entry_points(source: ast.SourceFile, file: str, module: ModulePath = ("crate",)) -> List[EntryPoint]:
	"""All commands of one file, in declaration order."""
	out: List[EntryPoint] = []
	for item in source.items:
		if isinstance(item, ast.FnItem):
			out.extend(entry_point_from_fn(fn, file, module) for fn in _command_fns([item]))
		elif isinstance(item, ast.ImplItem):
			out.extend(entry_point_from_fn(fn, file, module) for fn in _command_fns(item.items))
		elif isinstance(item, ast.ModItem) and item.items is not None:
			inner = module + (item.name,)
			out.extend(entry_point_from_fn(fn, file, inner) for fn in _command_fns(item.items))
	return out


__all__ = ["entry_point_from_fn", "extract_entry_points"]
