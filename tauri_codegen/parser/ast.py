# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration-level Rust syntax tree.

This mirrors only what the grammar parses: item signatures, attributes, `use`
trees and type expressions. Function bodies and initializer expressions are
opaque (`has_body`, `ConstItem.value_text`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


# ---------- attributes ----------


@dataclass
class MetaWord:
	path: List[str]


@dataclass
class MetaNameValue:
	path: List[str]
	# Decoded literal (strings unquoted); None for non-literal values.
	value: Optional[str]


@dataclass
class MetaList:
	path: List[str]
	items: List["Meta"] = field(default_factory=list)


@dataclass
class MetaLiteral:
	value: str


Meta = Union[MetaWord, MetaNameValue, MetaList, MetaLiteral]


@dataclass
class Attribute:
	meta: Meta
	inner: bool = False

	@property
	def path(self) -> List[str]:
		return [] if isinstance(self.meta, MetaLiteral) else self.meta.path


# ---------- types ----------


@dataclass
class PathSegment:
	name: str
	args: List["GenericArg"] = field(default_factory=list)
	# `Fn(A, B) -> C` sugar.
	fn_inputs: Optional[List["TypeAst"]] = None
	fn_output: Optional["TypeAst"] = None


@dataclass
class TypePath:
	segments: List[PathSegment]
	leading_colon: bool = False
	# `<T as Trait>::Assoc`: the qualified self type and trait.
	qself: Optional["TypeAst"] = None
	qself_trait: Optional["TypePath"] = None

	@property
	def names(self) -> List[str]:
		return [s.name for s in self.segments]

	@property
	def last(self) -> PathSegment:
		return self.segments[-1]


@dataclass
class TypeRef:
	inner: "TypeAst"
	mutable: bool = False
	lifetime: Optional[str] = None


@dataclass
class TypePtr:
	inner: "TypeAst"
	mutable: bool = False


@dataclass
class TypeTuple:
	elems: List["TypeAst"] = field(default_factory=list)


@dataclass
class TypeParen:
	inner: "TypeAst"


@dataclass
class TypeSlice:
	elem: "TypeAst"


@dataclass
class TypeArray:
	elem: "TypeAst"
	length: str


@dataclass
class TypeFnPtr:
	inputs: List["TypeAst"] = field(default_factory=list)
	output: Optional["TypeAst"] = None


@dataclass
class TypeImplTrait:
	bounds: List["Bound"] = field(default_factory=list)


@dataclass
class TypeDynTrait:
	bounds: List["Bound"] = field(default_factory=list)


@dataclass
class TypeNever:
	pass


TypeAst = Union[
	TypePath,
	TypeRef,
	TypePtr,
	TypeTuple,
	TypeParen,
	TypeSlice,
	TypeArray,
	TypeFnPtr,
	TypeImplTrait,
	TypeDynTrait,
	TypeNever,
]


@dataclass
class LifetimeArg:
	name: str


@dataclass
class AssocBinding:
	name: str
	ty: TypeAst


@dataclass
class ConstArg:
	value: str


GenericArg = Union[TypeAst, LifetimeArg, AssocBinding, ConstArg]


@dataclass
class Bound:
	"""A trait bound (`Clone`, `?Sized`, `for<'a> Fn(&'a T)`) or a lifetime bound."""

	path: Optional[TypePath] = None
	lifetime: Optional[str] = None
	maybe: bool = False


@dataclass
class GenericParam:
	name: str
	kind: str  # "type" | "lifetime" | "const"
	bounds: List[Bound] = field(default_factory=list)


@dataclass
class Generics:
	params: List[GenericParam] = field(default_factory=list)

	def type_names(self) -> List[str]:
		"""Names of type (and const) parameters; lifetimes are never type variables."""
		return [p.name for p in self.params if p.kind != "lifetime"]


# ---------- items ----------


@dataclass
class SelfParam:
	is_ref: bool = False
	mutable: bool = False
	ty: Optional[TypeAst] = None


@dataclass
class TypedParam:
	# None when the pattern is not a plain identifier (`(a, b): (u8, u8)`).
	name: Optional[str]
	ty: TypeAst
	attrs: List[Attribute] = field(default_factory=list)


Param = Union[SelfParam, TypedParam]


@dataclass
class FnItem:
	name: str
	params: List[Param]
	ret: Optional[TypeAst]
	loc: Located
	attrs: List[Attribute] = field(default_factory=list)
	generics: Generics = field(default_factory=Generics)
	is_pub: bool = False
	is_async: bool = False
	is_const: bool = False
	is_unsafe: bool = False
	has_body: bool = True


@dataclass
class FieldDef:
	# None for tuple-struct / tuple-variant fields.
	name: Optional[str]
	ty: TypeAst
	attrs: List[Attribute] = field(default_factory=list)
	is_pub: bool = False


@dataclass
class StructItem:
	name: str
	kind: str  # "named" | "tuple" | "unit"
	fields: List[FieldDef]
	loc: Located
	attrs: List[Attribute] = field(default_factory=list)
	generics: Generics = field(default_factory=Generics)
	is_pub: bool = False


@dataclass
class VariantDef:
	name: str
	kind: str  # "unit" | "tuple" | "named"
	fields: List[FieldDef] = field(default_factory=list)
	attrs: List[Attribute] = field(default_factory=list)
	discriminant: Optional[str] = None


@dataclass
class EnumItem:
	name: str
	variants: List[VariantDef]
	loc: Located
	attrs: List[Attribute] = field(default_factory=list)
	generics: Generics = field(default_factory=Generics)
	is_pub: bool = False


@dataclass
class ImplItem:
	self_ty: TypeAst
	items: List["Item"]
	loc: Located
	trait: Optional[TypeAst] = None
	generics: Generics = field(default_factory=Generics)
	negative: bool = False
	attrs: List[Attribute] = field(default_factory=list)


@dataclass
class TraitItem:
	name: str
	items: List["Item"]
	loc: Located
	attrs: List[Attribute] = field(default_factory=list)
	generics: Generics = field(default_factory=Generics)
	is_pub: bool = False


@dataclass
class ModItem:
	name: str
	# None for `mod name;` (the body lives in another file).
	items: Optional[List["Item"]]
	loc: Located
	attrs: List[Attribute] = field(default_factory=list)
	is_pub: bool = False

	@property
	def is_inline(self) -> bool:
		return self.items is not None


@dataclass
class UsePath:
	"""`segment::<tree>`"""

	segment: str
	tree: "UseTree"


@dataclass
class UseName:
	"""`name` or `name as alias` (alias `_` imports nothing nameable)."""

	name: str
	alias: Optional[str] = None


@dataclass
class UseGlob:
	pass


@dataclass
class UseGroup:
	items: List["UseTree"] = field(default_factory=list)


UseTree = Union[UsePath, UseName, UseGlob, UseGroup]


@dataclass
class UseItem:
	tree: UseTree
	loc: Located
	attrs: List[Attribute] = field(default_factory=list)
	is_pub: bool = False


@dataclass
class ConstItem:
	name: str
	ty: Optional[TypeAst]
	loc: Located
	# Items of a `const _: () = { ... };` block initializer.
	block_items: Optional[List["Item"]] = None
	value_text: Optional[str] = None
	attrs: List[Attribute] = field(default_factory=list)
	is_static: bool = False
	is_pub: bool = False


@dataclass
class TypeAliasItem:
	name: str
	ty: Optional[TypeAst]
	loc: Located
	attrs: List[Attribute] = field(default_factory=list)
	generics: Generics = field(default_factory=Generics)
	is_pub: bool = False


@dataclass
class ExternCrateItem:
	name: str
	alias: Optional[str]
	loc: Located
	attrs: List[Attribute] = field(default_factory=list)


@dataclass
class ExternBlockItem:
	items: List["Item"]
	loc: Located
	abi: Optional[str] = None
	attrs: List[Attribute] = field(default_factory=list)


@dataclass
class MacroItem:
	path: List[str]
	loc: Located
	name: Optional[str] = None
	attrs: List[Attribute] = field(default_factory=list)


Item = Union[
	FnItem,
	StructItem,
	EnumItem,
	ImplItem,
	TraitItem,
	ModItem,
	UseItem,
	ConstItem,
	TypeAliasItem,
	ExternCrateItem,
	ExternBlockItem,
	MacroItem,
]


@dataclass
class SourceFile:
	items: List[Item] = field(default_factory=list)
	attrs: List[Attribute] = field(default_factory=list)
