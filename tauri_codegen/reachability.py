# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reachability: keep only exported types that some command can actually send or
receive, directly or through nested fields.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List, Sequence, Set, Tuple

from tauri_codegen.core.diagnostics import Diagnostic, Span, warning
from tauri_codegen.core.records import EntryPoint, ExportedType, ModulePath, signature_types
from tauri_codegen.core.type_expr import TNamed, TypeExpr, iter_named, map_named
from tauri_codegen.resolver import Ambiguous, Found, ModuleResolver

_Key = Tuple[ModulePath, str]


def compute_reachable(
	entry_points: Sequence[EntryPoint],
	exported: Sequence[ExportedType],
	resolver: ModuleResolver,
	diagnostics: List[Diagnostic],
) -> List[ExportedType]:
	"""
	Exported types reachable from `entry_points`, in first-discovery order.

	Signature types are resolved from the command's own file and module; field
	types from the declaring record's file and module.
	"""
	by_key: Dict[_Key, ExportedType] = {}
	for rec in exported:
		by_key.setdefault((rec.module, rec.name), rec)

	queue: Deque[Tuple[TypeExpr, str, ModulePath]] = deque()
	for ep in entry_points:
		for ty in signature_types(ep):
			queue.append((ty, ep.file, ep.module))

	seen: Set[_Key] = set()
	emitted_names: Dict[str, ExportedType] = {}
	reported: Set[Tuple[str, str]] = set()
	out: List[ExportedType] = []

	while queue:
		ty, file, module = queue.popleft()
		for named in iter_named(ty):
			res = resolver.resolve(named.reference, file, module)
			if isinstance(res, Ambiguous):
				if (named.reference, file) not in reported:
					reported.add((named.reference, file))
					diagnostics.append(
						warning(
							f"ambiguous type reference '{named.reference}'; using '{res.files[0]}'",
							phase="resolve",
							span=Span(file=file),
							notes=[f"candidate: {f} ({'::'.join(m)})" for f, m in zip(res.files, res.modules)],
						)
					)
				key = (res.modules[0], named.name)
			elif isinstance(res, Found):
				key = (res.module, res.name)
			else:
				continue
			rec = by_key.get(key)
			if rec is None or key in seen:
				continue
			seen.add(key)
			first = emitted_names.get(rec.name)
			if first is not None:
				diagnostics.append(
					warning(
						f"type '{rec.name}' is reachable from both '{first.file}' and '{rec.file}'; keeping the first",
						phase="resolve",
						span=Span(file=rec.file),
					)
				)
				continue
			emitted_names[rec.name] = rec
			out.append(rec)
			for field_ty in rec.field_types():
				queue.append((field_ty, rec.file, rec.module))
	return out


def canonical_names(
	entry_points: Sequence[EntryPoint],
	reachable: Sequence[ExportedType],
	resolver: ModuleResolver,
) -> Tuple[List[EntryPoint], List[ExportedType]]:
	"""
	Rewrite references to reachable records under their declared names.

	`use crate::types::User as MyUser;` makes `MyUser` resolve to `User`; the
	rendered signature must then say `User`, the name emitted to types.ts.
	References that resolve elsewhere (or nowhere) are left as written.
	"""
	emitted = {(rec.module, rec.name) for rec in reachable}

	def rewrite(file: str, module: ModulePath):
		def canonical(named: TNamed) -> TypeExpr:
			res = resolver.resolve(named.reference, file, module)
			if isinstance(res, Found) and res.name != named.name and (res.module, res.name) in emitted:
				return TNamed(res.name, named.path[:-1] + (res.name,), named.args)
			return named

		return lambda ty: map_named(ty, canonical)

	eps = [ep.map_types(rewrite(ep.file, ep.module)) for ep in entry_points]
	recs: List[ExportedType] = [rec.map_types(rewrite(rec.file, rec.module)) for rec in reachable]
	return eps, recs


__all__ = ["compute_reachable", "canonical_names"]
