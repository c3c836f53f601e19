# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark front-end: Rust source text -> `ast.SourceFile`.

The grammar (grammar.lark) is LALR with a basic lexer; `RustPostLex`
collapses bodies and initializers so only signatures are parsed. The
`_build_*` functions below turn the lark tree into the dataclass AST.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree

from .ast import (
	AssocBinding,
	Attribute,
	Bound,
	ConstArg,
	ConstItem,
	EnumItem,
	ExternBlockItem,
	ExternCrateItem,
	FieldDef,
	FnItem,
	GenericArg,
	GenericParam,
	Generics,
	ImplItem,
	Item,
	LifetimeArg,
	Located,
	MacroItem,
	Meta,
	MetaList,
	MetaLiteral,
	MetaNameValue,
	MetaWord,
	ModItem,
	Param,
	PathSegment,
	SelfParam,
	SourceFile,
	StructItem,
	TraitItem,
	TypeAliasItem,
	TypeArray,
	TypeAst,
	TypedParam,
	TypeDynTrait,
	TypeFnPtr,
	TypeImplTrait,
	TypeNever,
	TypeParen,
	TypePath,
	TypePtr,
	TypeRef,
	TypeSlice,
	TypeTuple,
	UseGlob,
	UseGroup,
	UseItem,
	UseName,
	UsePath,
	UseTree,
	VariantDef,
)
from .lexer import RustPostLex

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=RustPostLex(),
)

_TYPE_NODES = {
	"path_type",
	"qself_path",
	"ref_type",
	"ptr_type",
	"unit_type",
	"paren_type",
	"tuple_type",
	"slice_type",
	"array_type",
	"fn_ptr_type",
	"impl_type",
	"dyn_type",
	"never_type",
}

_ESCAPE_RE = re.compile(r"\\(u\{([0-9a-fA-F_]+)\}|x([0-9a-fA-F]{2})|\n\s*|.)", re.S)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "0": "\0", "\\": "\\", '"': '"', "'": "'"}


class RustParseError(ValueError):
	"""
	A source file the grammar rejects.

	Parse failures are fatal for the run: the orchestrator reports this as a
	pinned parser diagnostic and writes no output.
	"""

	def __init__(self, message: str, *, file: str | None = None, line: int | None = None, column: int | None = None) -> None:
		super().__init__(message)
		self.file = file
		self.line = line
		self.column = column


def parse_source(source: str) -> SourceFile:
	"""Parse Rust source text; raises lark `UnexpectedInput` on syntax errors."""
	tree = _PARSER.parse(source)
	return _build_source_file(tree)


def _loc(tree: Tree) -> Located:
	meta = tree.meta
	return Located(line=getattr(meta, "line", 0), column=getattr(meta, "column", 0))


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _subtrees(tree: Tree, *names: str) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree) and _name(c) in names]


def _first_subtree(tree: Tree, *names: str) -> Optional[Tree]:
	found = _subtrees(tree, *names)
	return found[0] if found else None


def _tokens(tree: Tree, *types: str) -> List[Token]:
	return [c for c in tree.children if isinstance(c, Token) and c.type in types]


def _first_token(tree: Tree, *types: str) -> Optional[Token]:
	found = _tokens(tree, *types)
	return found[0] if found else None


def _type_children(tree: Tree) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree) and _name(c) in _TYPE_NODES]


def _flat_text(node: Tree | Token) -> str:
	if isinstance(node, Token):
		return node.value
	return " ".join(_flat_text(c) for c in node.children)


def _ident(tok: Token) -> str:
	value = str(tok.value)
	return value[2:] if value.startswith("r#") else value


def decode_literal(tok: Token) -> str:
	"""Decode a string/char/number/bool literal token to its text value."""
	raw = str(tok.value)
	if tok.type == "RAW_STRING":
		body = raw.lstrip("b")[1:]
		hashes = len(body) - len(body.lstrip("#"))
		return body[hashes + 1 : len(body) - hashes - 1]
	if tok.type in ("STRING", "CHAR"):
		body = raw.lstrip("b")[1:-1]
		return _ESCAPE_RE.sub(_unescape, body)
	return raw


def _unescape(m: re.Match) -> str:
	if m.group(2) is not None:
		return chr(int(m.group(2).replace("_", ""), 16))
	if m.group(3) is not None:
		return chr(int(m.group(3), 16))
	esc = m.group(1)
	if esc.startswith("\n"):
		return ""
	return _SIMPLE_ESCAPES.get(esc, esc)


# ---------- file & attributes ----------


def _build_source_file(tree: Tree) -> SourceFile:
	attrs = [_build_attr(a, inner=True) for a in _subtrees(tree, "inner_attr")]
	items = _build_items(tree)
	return SourceFile(items=items, attrs=attrs)


def _build_items(tree: Tree) -> List[Item]:
	out: List[Item] = []
	for node in _subtrees(tree, "item"):
		item = _build_item(node)
		if item is not None:
			out.append(item)
	return out


def _build_attr(tree: Tree, *, inner: bool = False) -> Attribute:
	return Attribute(meta=_build_meta(tree.children[0]), inner=inner)


def _build_meta(tree: Tree) -> Meta:
	kind = _name(tree)
	if kind == "meta_literal":
		return MetaLiteral(value=_build_meta_lit(tree.children[0]))
	path = _build_meta_path(tree.children[0])
	if kind == "meta_word":
		return MetaWord(path=path)
	if kind == "meta_name_value":
		value_node = tree.children[1]
		value: Optional[str] = None
		if _name(value_node) == "meta_value":
			value = _build_meta_lit(value_node.children[0])
		return MetaNameValue(path=path, value=value)
	items_node = _first_subtree(tree, "meta_items")
	items = [_build_meta(m) for m in items_node.children] if items_node is not None else []
	return MetaList(path=path, items=items)


def _build_meta_lit(tree: Tree) -> str:
	toks = [c for c in tree.children if isinstance(c, Token)]
	if len(toks) == 2:
		# MINUS NUMBER
		return "-" + toks[1].value
	return decode_literal(toks[0])


def _build_meta_path(tree: Tree) -> List[str]:
	return [_ident(c.children[0]) for c in _subtrees(tree, "meta_ident")]


def _outer_attrs(tree: Tree) -> List[Attribute]:
	return [_build_attr(a) for a in _subtrees(tree, "outer_attr")]


# ---------- items ----------


def _build_item(tree: Tree) -> Optional[Item]:
	attrs = _outer_attrs(tree)
	is_pub = _first_subtree(tree, "visibility") is not None
	node = next(
		c for c in tree.children if isinstance(c, Tree) and _name(c) not in ("outer_attr", "visibility")
	)
	kind = _name(node)
	if kind == "fn_item":
		return _build_fn(node, attrs, is_pub)
	if kind in ("struct_named", "struct_tuple", "struct_unit"):
		return _build_struct(node, attrs, is_pub)
	if kind == "enum_item":
		return _build_enum(node, attrs, is_pub)
	if kind == "impl_item":
		return _build_impl(node, attrs)
	if kind == "trait_item":
		return TraitItem(
			name=_ident(_tokens(node, "NAME")[0]),
			items=_build_items(node),
			loc=_loc(node),
			attrs=attrs,
			generics=_build_generics(_first_subtree(node, "generics")),
			is_pub=is_pub,
		)
	if kind == "mod_decl":
		return ModItem(name=_ident(node.children[0]), items=None, loc=_loc(node), attrs=attrs, is_pub=is_pub)
	if kind == "mod_inline":
		return ModItem(
			name=_ident(_tokens(node, "NAME")[0]),
			items=_build_items(node),
			loc=_loc(node),
			attrs=attrs,
			is_pub=is_pub,
		)
	if kind == "use_item":
		return UseItem(tree=_build_use_tree(node.children[0]), loc=_loc(node), attrs=attrs, is_pub=is_pub)
	if kind in ("const_item", "const_decl", "static_item"):
		return _build_const(node, attrs, is_pub)
	if kind == "type_alias":
		tys = _type_children(node)
		return TypeAliasItem(
			name=_ident(_tokens(node, "NAME")[0]),
			ty=_build_type(tys[0]) if tys else None,
			loc=_loc(node),
			attrs=attrs,
			generics=_build_generics(_first_subtree(node, "generics")),
			is_pub=is_pub,
		)
	if kind == "extern_crate":
		names = [c for c in node.children if isinstance(c, Token)]
		return ExternCrateItem(
			name=_ident(names[0]),
			alias=_ident(names[1]) if len(names) > 1 else None,
			loc=_loc(node),
			attrs=attrs,
		)
	if kind == "extern_block":
		abi_node = _first_subtree(node, "extern_abi")
		abi_tok = _first_token(abi_node, "STRING") if abi_node is not None else None
		return ExternBlockItem(
			items=_build_items(node),
			loc=_loc(node),
			abi=decode_literal(abi_tok) if abi_tok is not None else None,
			attrs=attrs,
		)
	if kind == "macro_item":
		return _build_macro(node, attrs)
	return None


def _build_fn(tree: Tree, attrs: List[Attribute], is_pub: bool) -> FnItem:
	qualifiers = set()
	for q in _subtrees(tree, "fn_qualifier"):
		child = q.children[0]
		qualifiers.add(child.type if isinstance(child, Token) else "EXTERN")
	params_node = _first_subtree(tree, "fn_params")
	params: List[Param] = []
	if params_node is not None:
		for p in params_node.children:
			params.append(_build_param(p))
	ret_node = _first_subtree(tree, "ret_type")
	return FnItem(
		name=_ident(_tokens(tree, "NAME")[0]),
		params=params,
		ret=_build_type(ret_node.children[0]) if ret_node is not None else None,
		loc=_loc(tree),
		attrs=attrs,
		generics=_build_generics(_first_subtree(tree, "generics")),
		is_pub=is_pub,
		is_async="ASYNC" in qualifiers,
		is_const="CONST" in qualifiers,
		is_unsafe="UNSAFE" in qualifiers,
		has_body=_first_token(tree, "BODY") is not None,
	)


def _build_param(tree: Tree) -> Param:
	if _name(tree) == "fn_param":
		sp = _first_subtree(tree, "self_param")
		assert sp is not None
		tys = _type_children(sp)
		return SelfParam(
			is_ref=_first_token(sp, "AMP") is not None,
			mutable=_first_token(sp, "MUT") is not None,
			ty=_build_type(tys[0]) if tys else None,
		)
	pattern = next(c for c in tree.children if isinstance(c, Tree) and _name(c).startswith("pat_"))
	return TypedParam(
		name=_pattern_name(pattern),
		ty=_build_type(_type_children(tree)[0]),
		attrs=_outer_attrs(tree),
	)


def _pattern_name(tree: Tree) -> Optional[str]:
	kind = _name(tree)
	if kind == "pat_ident":
		return _ident(_tokens(tree, "NAME")[0])
	if kind == "pat_ref":
		return _pattern_name(tree.children[0])
	return None


def _build_fields(tree: Optional[Tree], *, named: bool) -> List[FieldDef]:
	if tree is None:
		return []
	fields: List[FieldDef] = []
	for f in tree.children:
		name_tok = _first_token(f, "NAME") if named else None
		fields.append(
			FieldDef(
				name=_ident(name_tok) if name_tok is not None else None,
				ty=_build_type(_type_children(f)[0]),
				attrs=_outer_attrs(f),
				is_pub=_first_subtree(f, "visibility") is not None,
			)
		)
	return fields


def _build_struct(tree: Tree, attrs: List[Attribute], is_pub: bool) -> StructItem:
	kind = {"struct_named": "named", "struct_tuple": "tuple", "struct_unit": "unit"}[_name(tree)]
	if kind == "named":
		fields = _build_fields(_first_subtree(tree, "named_fields"), named=True)
	elif kind == "tuple":
		fields = _build_fields(_first_subtree(tree, "tuple_fields"), named=False)
	else:
		fields = []
	return StructItem(
		name=_ident(_tokens(tree, "NAME")[0]),
		kind=kind,
		fields=fields,
		loc=_loc(tree),
		attrs=attrs,
		generics=_build_generics(_first_subtree(tree, "generics")),
		is_pub=is_pub,
	)


def _build_enum(tree: Tree, attrs: List[Attribute], is_pub: bool) -> EnumItem:
	variants: List[VariantDef] = []
	variants_node = _first_subtree(tree, "variants")
	if variants_node is not None:
		for v in variants_node.children:
			body = _first_subtree(v, "variant_named", "variant_tuple")
			disc = _first_subtree(v, "discriminant")
			if body is None:
				kind, fields = "unit", []
			elif _name(body) == "variant_named":
				kind, fields = "named", _build_fields(_first_subtree(body, "named_fields"), named=True)
			else:
				kind, fields = "tuple", _build_fields(_first_subtree(body, "tuple_fields"), named=False)
			variants.append(
				VariantDef(
					name=_ident(_tokens(v, "NAME")[0]),
					kind=kind,
					fields=fields,
					attrs=_outer_attrs(v),
					discriminant=_flat_text(disc) if disc is not None else None,
				)
			)
	return EnumItem(
		name=_ident(_tokens(tree, "NAME")[0]),
		variants=variants,
		loc=_loc(tree),
		attrs=attrs,
		generics=_build_generics(_first_subtree(tree, "generics")),
		is_pub=is_pub,
	)


def _build_impl(tree: Tree, attrs: List[Attribute]) -> ImplItem:
	head = _first_subtree(tree, "impl_trait_head", "impl_inherent_head")
	assert head is not None
	tys = _type_children(head)
	if _name(head) == "impl_trait_head":
		trait, self_ty = _build_type(tys[0]), _build_type(tys[1])
	else:
		trait, self_ty = None, _build_type(tys[0])
	return ImplItem(
		self_ty=self_ty,
		items=_build_items(tree),
		loc=_loc(tree),
		trait=trait,
		generics=_build_generics(_first_subtree(tree, "generics")),
		negative=_first_token(tree, "BANG") is not None,
		attrs=attrs,
	)


def _build_const(tree: Tree, attrs: List[Attribute], is_pub: bool) -> ConstItem:
	tys = _type_children(tree)
	block = _first_subtree(tree, "const_block")
	value = _first_subtree(tree, "const_expr")
	value_tok = value.children[0] if value is not None else _first_token(tree, "CONST_VALUE")
	return ConstItem(
		name=_ident(_tokens(tree, "NAME")[0]),
		ty=_build_type(tys[0]) if tys else None,
		loc=_loc(tree),
		block_items=_build_items(block) if block is not None else None,
		value_text=str(value_tok.value) if value_tok is not None else None,
		attrs=attrs,
		is_static=_name(tree) == "static_item",
		is_pub=is_pub,
	)


def _build_macro(tree: Tree, attrs: List[Attribute]) -> MacroItem:
	path: List[str] = []
	name: Optional[str] = None
	after_sep = True
	for c in tree.children:
		if not isinstance(c, Token):
			continue
		if c.type == "PATHSEP":
			after_sep = True
		elif c.type == "NAME":
			if after_sep:
				path.append(_ident(c))
			else:
				name = _ident(c)
			after_sep = False
	return MacroItem(path=path, loc=_loc(tree), name=name, attrs=attrs)


def _build_use_tree(tree: Tree) -> UseTree:
	if _name(tree) == "use_tree":
		rel = _subtrees(tree, "use_prefixed", "use_name", "use_glob", "use_group")[0]
		return _build_use_tree(rel)
	kind = _name(tree)
	if kind == "use_prefixed":
		seg = _first_subtree(tree, "use_seg")
		rest = _subtrees(tree, "use_prefixed", "use_name", "use_glob", "use_group")[0]
		assert seg is not None
		return UsePath(segment=_ident(seg.children[0]), tree=_build_use_tree(rest))
	if kind == "use_name":
		seg = _first_subtree(tree, "use_seg")
		assert seg is not None
		alias = _first_token(tree, "NAME")
		return UseName(name=_ident(seg.children[0]), alias=_ident(alias) if alias is not None else None)
	if kind == "use_glob":
		return UseGlob()
	return UseGroup(items=[_build_use_tree(t) for t in _subtrees(tree, "use_tree")])


# ---------- generics ----------


def _build_generics(tree: Optional[Tree]) -> Generics:
	if tree is None:
		return Generics()
	params: List[GenericParam] = []
	for p in tree.children:
		kind = _name(p)
		if kind == "lifetime_param":
			params.append(GenericParam(name=_first_token(p, "LIFETIME").value, kind="lifetime"))
		elif kind == "const_param":
			params.append(GenericParam(name=_ident(_tokens(p, "NAME")[0]), kind="const"))
		else:
			bounds_node = _first_subtree(p, "bounds")
			params.append(
				GenericParam(
					name=_ident(_tokens(p, "NAME")[0]),
					kind="type",
					bounds=_build_bounds(bounds_node) if bounds_node is not None else [],
				)
			)
	return Generics(params=params)


def _build_bounds(tree: Tree) -> List[Bound]:
	out: List[Bound] = []
	for b in tree.children:
		kind = _name(b)
		if kind == "lifetime_bound":
			out.append(Bound(lifetime=b.children[0].value))
		else:
			path = _first_subtree(b, "path_type")
			out.append(Bound(path=_build_path_type(path) if path is not None else None, maybe=kind == "maybe_bound"))
	return out


# ---------- types ----------


def _build_type(tree: Tree) -> TypeAst:
	kind = _name(tree)
	if kind == "path_type":
		return _build_path_type(tree)
	if kind == "qself_path":
		return _build_qself_path(tree)
	if kind == "ref_type":
		lifetime = _first_token(tree, "LIFETIME")
		return TypeRef(
			inner=_build_type(_type_children(tree)[0]),
			mutable=_first_token(tree, "MUT") is not None,
			lifetime=lifetime.value if lifetime is not None else None,
		)
	if kind == "ptr_type":
		return TypePtr(inner=_build_type(_type_children(tree)[0]), mutable=_first_token(tree, "MUT") is not None)
	if kind == "unit_type":
		return TypeTuple(elems=[])
	if kind == "paren_type":
		return TypeParen(inner=_build_type(_type_children(tree)[0]))
	if kind == "tuple_type":
		return TypeTuple(elems=[_build_type(t) for t in _type_children(tree)])
	if kind == "slice_type":
		return TypeSlice(elem=_build_type(_type_children(tree)[0]))
	if kind == "array_type":
		length = " ".join(_flat_text(a) for a in _subtrees(tree, "disc_atom"))
		return TypeArray(elem=_build_type(_type_children(tree)[0]), length=length)
	if kind == "fn_ptr_type":
		ret = _first_subtree(tree, "ret_type")
		return TypeFnPtr(
			inputs=[_build_type(_type_children(p)[0]) for p in _subtrees(tree, "fn_ptr_param")],
			output=_build_type(ret.children[0]) if ret is not None else None,
		)
	if kind == "impl_type":
		return TypeImplTrait(bounds=_build_bounds(tree.children[0]))
	if kind == "dyn_type":
		return TypeDynTrait(bounds=_build_bounds(tree.children[0]))
	if kind == "never_type":
		return TypeNever()
	raise ValueError(f"unexpected type node {kind!r}")


def _build_path_type(tree: Tree) -> TypePath:
	segments: List[PathSegment] = []
	leading = bool(tree.children) and isinstance(tree.children[0], Token) and tree.children[0].type == "PATHSEP"
	for c in tree.children:
		if isinstance(c, Token):
			continue
		if _name(c) == "path_segment":
			segments.append(_build_path_segment(c))
		elif _name(c) == "generic_args" and segments:
			# Turbofish: `Vec::<u8>` attaches to the preceding segment.
			segments[-1].args.extend(_build_generic_args(c))
	return TypePath(segments=segments, leading_colon=leading)


def _build_qself_path(tree: Tree) -> TypePath:
	subtrees = [c for c in tree.children if isinstance(c, Tree)]
	qself = _build_type(subtrees[0])
	trait: Optional[TypePath] = None
	rest = subtrees[1:]
	if rest and _name(rest[0]) == "path_type":
		trait = _build_path_type(rest[0])
		rest = rest[1:]
	return TypePath(
		segments=[_build_path_segment(s) for s in rest if _name(s) == "path_segment"],
		qself=qself,
		qself_trait=trait,
	)


def _build_path_segment(tree: Tree) -> PathSegment:
	ident = _first_subtree(tree, "path_ident")
	assert ident is not None
	args_node = _first_subtree(tree, "generic_args")
	sugar = _first_subtree(tree, "fn_sugar")
	seg = PathSegment(name=_ident(ident.children[0]))
	if args_node is not None:
		seg.args = _build_generic_args(args_node)
	if sugar is not None:
		seg.fn_inputs = [_build_type(t) for t in _type_children(sugar)]
		ret = _first_subtree(sugar, "ret_type")
		seg.fn_output = _build_type(ret.children[0]) if ret is not None else None
	return seg


def _build_generic_args(tree: Tree) -> List[GenericArg]:
	args: List[GenericArg] = []
	for a in tree.children:
		kind = _name(a)
		if kind == "generic_arg":
			args.append(_build_type(a.children[0]))
		elif kind == "lifetime_arg":
			args.append(LifetimeArg(name=a.children[0].value))
		elif kind == "assoc_binding":
			args.append(AssocBinding(name=_ident(a.children[0]), ty=_build_type(a.children[1])))
		elif kind == "const_arg":
			args.append(ConstArg(value="".join(t.value for t in a.children if isinstance(t, Token))))
	return args


__all__ = ["RustParseError", "parse_source", "decode_literal"]
