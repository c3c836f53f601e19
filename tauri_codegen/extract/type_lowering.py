# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lower parser type syntax (`ast.TypeAst`) to `TypeExpr`.

Lowering is purely syntactic: a path is classified by its last segment, and
anything that is not a known container, primitive or in-scope generic
parameter becomes a `TNamed` carrying its full written path for the module
resolver.
"""

from __future__ import annotations

from typing import AbstractSet, List

from tauri_codegen.core import known_types
from tauri_codegen.core.type_expr import (
	TFallible,
	TGeneric,
	TList,
	TMap,
	TNamed,
	TOptional,
	TPrimitive,
	TTuple,
	TUnit,
	TUnrecognized,
	TypeExpr,
)
from tauri_codegen.parser import ast


_CONTAINERS = (
	known_types.LIST_TYPES
	| known_types.OPTION_TYPES
	| known_types.RESULT_TYPES
	| known_types.MAP_TYPES
	| known_types.TRANSPARENT_TYPES
)


def _type_args(seg: ast.PathSegment) -> List[ast.TypeAst]:
	"""Type arguments of a segment; lifetimes, const args and bindings are dropped."""
	return [a for a in seg.args if not isinstance(a, (ast.LifetimeArg, ast.ConstArg, ast.AssocBinding))]


def lower_type(ty: ast.TypeAst, generics: AbstractSet[str] = frozenset()) -> TypeExpr:
	"""Classify one syntax-level type. Never raises; unknown shapes become TUnrecognized."""
	if isinstance(ty, (ast.TypeRef, ast.TypeParen)):
		return lower_type(ty.inner, generics)
	if isinstance(ty, ast.TypeTuple):
		if not ty.elems:
			return TUnit()
		return TTuple(tuple(lower_type(e, generics) for e in ty.elems))
	if isinstance(ty, (ast.TypeSlice, ast.TypeArray)):
		return TList(lower_type(ty.elem, generics))
	if isinstance(ty, ast.TypePath):
		return _lower_path(ty, generics)
	if isinstance(ty, ast.TypePtr):
		return TUnrecognized("raw pointer")
	if isinstance(ty, ast.TypeFnPtr):
		return TUnrecognized("fn pointer")
	if isinstance(ty, ast.TypeImplTrait):
		return TUnrecognized("impl Trait")
	if isinstance(ty, ast.TypeDynTrait):
		return TUnrecognized("dyn Trait")
	if isinstance(ty, ast.TypeNever):
		return TUnrecognized("!")
	return TUnrecognized()


def _lower_path(ty: ast.TypePath, generics: AbstractSet[str]) -> TypeExpr:
	names = ty.names
	if ty.qself is not None:
		return TUnrecognized("<_ as _>::" + "::".join(names))
	if not names:
		return TUnrecognized()
	seg = ty.last
	name = seg.name
	if name == "_":
		return TUnrecognized("_")
	if seg.fn_inputs is not None:
		return TUnrecognized(f"{name}(..)")
	if len(names) == 1 and name in generics:
		return TGeneric(name)
	if len(names) > 1 and names[0] in generics:
		# `T::Output`
		return TUnrecognized("::".join(names))

	args = _type_args(seg)
	if not args and name in _CONTAINERS:
		return TUnrecognized(f"{name}<?>")

	def arg(i: int) -> TypeExpr:
		if i < len(args):
			return lower_type(args[i], generics)
		return TUnrecognized(f"{name}<?>")

	if name in known_types.LIST_TYPES:
		return TList(arg(0))
	if name in known_types.OPTION_TYPES:
		return TOptional(arg(0))
	if name in known_types.RESULT_TYPES:
		return TFallible(arg(0))
	if name in known_types.MAP_TYPES:
		return TMap(arg(0), arg(1))
	if name in known_types.TRANSPARENT_TYPES:
		return arg(0)
	if known_types.is_primitive(name):
		return TPrimitive(name)
	return TNamed(
		name=name,
		path=tuple(n for n in names),
		args=tuple(lower_type(a, generics) for a in args),
	)


__all__ = ["lower_type"]
