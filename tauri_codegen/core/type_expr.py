# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source-side type expressions (the Rust type algebra as the generator sees it).

Why this exists
---------------
The parser produces syntax-level types (`parser.ast.TypePath`, `TypeRef`, ...)
which keep every detail of what was written: lifetimes, references, smart
pointers, qualified-self paths. Extraction lowers those into this much smaller
algebra, which is all the mapper, resolver and reachability passes need:

- `Vec<Option<User>>`         -> TList(TOptional(TNamed("User")))
- `Result<T, String>`         -> TFallible(TGeneric("T"))        (inside `fn f<T>`)
- `HashMap<String, models::Item>` -> TMap(TPrimitive("String"), TNamed("Item", ("models", "Item")))
- `()`                        -> TUnit()
- `fn(i32) -> i32`            -> TUnrecognized("fn(...)")

All nodes are frozen and hashable; records own their trees and never mutate
them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Tuple, Union


@dataclass(frozen=True)
class TPrimitive:
	"""A well-known leaf type name (`i32`, `String`, `Uuid`, `Value`, ...)."""

	name: str


@dataclass(frozen=True)
class TList:
	elem: "TypeExpr"


@dataclass(frozen=True)
class TOptional:
	inner: "TypeExpr"


@dataclass(frozen=True)
class TFallible:
	"""`Result<T, E>`: only the success payload is modeled."""

	ok: "TypeExpr"


@dataclass(frozen=True)
class TMap:
	key: "TypeExpr"
	value: "TypeExpr"


@dataclass(frozen=True)
class TTuple:
	elems: Tuple["TypeExpr", ...] = ()


@dataclass(frozen=True)
class TNamed:
	"""
	Unresolved reference to a declared type.

	`name` is the last path segment; `path` keeps every segment as written
	(`("crate", "models", "User")`) so the resolver can honor qualified
	references. `args` are the generic arguments (`Page<User>`).
	"""

	name: str
	path: Tuple[str, ...] = ()
	args: Tuple["TypeExpr", ...] = ()

	def __post_init__(self) -> None:
		if not self.path:
			object.__setattr__(self, "path", (self.name,))

	@property
	def reference(self) -> str:
		"""The reference string handed to the module resolver."""
		return "::".join(self.path)


@dataclass(frozen=True)
class TGeneric:
	"""A declared generic parameter of the enclosing declaration."""

	name: str


@dataclass(frozen=True)
class TUnit:
	pass


@dataclass(frozen=True)
class TUnrecognized:
	description: str = field(default="?")


TypeExpr = Union[
	TPrimitive,
	TList,
	TOptional,
	TFallible,
	TMap,
	TTuple,
	TNamed,
	TGeneric,
	TUnit,
	TUnrecognized,
]


def children(ty: TypeExpr) -> Tuple[TypeExpr, ...]:
	"""Direct sub-expressions of `ty` (empty for leaves)."""
	if isinstance(ty, TList):
		return (ty.elem,)
	if isinstance(ty, TOptional):
		return (ty.inner,)
	if isinstance(ty, TFallible):
		return (ty.ok,)
	if isinstance(ty, TMap):
		return (ty.key, ty.value)
	if isinstance(ty, TTuple):
		return ty.elems
	if isinstance(ty, TNamed):
		return ty.args
	return ()


def iter_named(ty: TypeExpr) -> Iterator[TNamed]:
	"""Yield every `TNamed` in `ty`, outermost first, left to right."""
	stack = [ty]
	while stack:
		node = stack.pop()
		if isinstance(node, TNamed):
			yield node
		stack.extend(reversed(children(node)))


def map_named(ty: TypeExpr, fn: Callable[[TNamed], TypeExpr]) -> TypeExpr:
	"""Rebuild `ty` with every `TNamed` replaced by `fn(named)`; arguments are rewritten first."""
	if isinstance(ty, TNamed):
		return fn(TNamed(ty.name, ty.path, tuple(map_named(a, fn) for a in ty.args)))
	if isinstance(ty, TList):
		return TList(map_named(ty.elem, fn))
	if isinstance(ty, TOptional):
		return TOptional(map_named(ty.inner, fn))
	if isinstance(ty, TFallible):
		return TFallible(map_named(ty.ok, fn))
	if isinstance(ty, TMap):
		return TMap(map_named(ty.key, fn), map_named(ty.value, fn))
	if isinstance(ty, TTuple):
		return TTuple(tuple(map_named(e, fn) for e in ty.elems))
	return ty


__all__ = [
	"TypeExpr",
	"TPrimitive",
	"TList",
	"TOptional",
	"TFallible",
	"TMap",
	"TTuple",
	"TNamed",
	"TGeneric",
	"TUnit",
	"TUnrecognized",
	"children",
	"iter_named",
	"map_named",
]
