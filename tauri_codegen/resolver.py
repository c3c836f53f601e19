# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Module resolver: map a type reference written in some module to the module
(and file) that declares it.

Why this exists
---------------
Two files may both declare `User`. The generator must emit the one a command
actually refers to, so references are resolved the way rustc would see them
at declaration level: local declarations, then `use` imports, then glob
imports. Only when all of that fails does it fall back to a whole-program
search by name, preferring a declaration in a sibling module.

Limits
------
- Visibility (`pub`, `pub(crate)`) is not modelled.
- Macro-generated items and `#[path]` module attributes are invisible.
- External crates are never resolved; their types resolve to NotFound.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple, Union

from tauri_codegen.core.diagnostics import Diagnostic, Span, warning
from tauri_codegen.core.records import ModulePath
from tauri_codegen.parser import ast

_ROOT: ModulePath = ("crate",)
_ANCHORS = ("crate", "self", "super")
_MODULE_ROOT_FILES = ("mod.rs", "lib.rs", "main.rs")


def path_to_module(file: Path, base: Path) -> ModulePath:
	"""
	Module path of `file` relative to the crate source root `base`.

	`base/lib.rs` -> crate, `base/models/user.rs` -> crate::models::user,
	`base/models/mod.rs` -> crate::models.
	"""
	try:
		rel = Path(file).relative_to(base)
	except ValueError:
		rel = Path(Path(file).name)
	parts = list(rel.parts)
	if not parts:
		return _ROOT
	last = parts.pop()
	if last not in _MODULE_ROOT_FILES:
		parts.append(last[:-3] if last.endswith(".rs") else last)
	return _ROOT + tuple(parts)


@dataclass(frozen=True)
class Import:
	# Normalized path for crate/self/super heads; as written otherwise.
	path: Tuple[str, ...]
	anchored: bool = True


@dataclass
class FileScope:
	"""Names visible in one module (a file, or an inline `mod` within it)."""

	file: str
	module: ModulePath
	local_types: Set[str] = field(default_factory=set)
	imports: Dict[str, Import] = field(default_factory=dict)
	globs: List[Import] = field(default_factory=list)


@dataclass(frozen=True)
class Found:
	file: str
	module: ModulePath
	# Name at the declaration site; differs from the reference for `use ... as` imports.
	name: str


@dataclass(frozen=True)
class NotFound:
	pass


@dataclass(frozen=True)
class Ambiguous:
	# Candidates in sorted file order; `modules[i]` is the module in `files[i]`.
	files: Tuple[str, ...]
	modules: Tuple[ModulePath, ...]


Resolution = Union[Found, NotFound, Ambiguous]


def _normalize(path: Sequence[str], module: ModulePath) -> Optional[Import]:
	"""Resolve crate/self/super heads against `module`; None when `super` leaves the crate."""
	if not path:
		return None
	head = path[0]
	if head == "crate":
		return Import(tuple(path))
	if head not in ("self", "super"):
		return Import(tuple(path), anchored=False)
	base = list(module)
	i = 0
	while i < len(path) and path[i] in ("self", "super"):
		if path[i] == "super":
			if len(base) <= 1:
				return None
			base.pop()
		i += 1
	return Import(tuple(base) + tuple(path[i:]))


def _flatten_use(tree: ast.UseTree, prefix: Tuple[str, ...]) -> Iterator[Tuple[Optional[str], Tuple[str, ...]]]:
	"""Yield `(local_name, path)` for imports and `(None, module_path)` for globs."""
	if isinstance(tree, ast.UsePath):
		yield from _flatten_use(tree.tree, prefix + (tree.segment,))
	elif isinstance(tree, ast.UseGroup):
		for sub in tree.items:
			yield from _flatten_use(sub, prefix)
	elif isinstance(tree, ast.UseGlob):
		yield None, prefix
	elif isinstance(tree, ast.UseName):
		if tree.name == "self":
			if not prefix:
				return
			path = prefix
		else:
			path = prefix + (tree.name,)
		local = tree.alias or path[-1]
		if local != "_":
			yield local, path


class ModuleResolver:
	"""Module table plus per-module scopes for a whole crate."""

	def __init__(self, base: Optional[Path] = None) -> None:
		# Crate source root used to derive module paths in add_file.
		self.base = base
		self.scopes: Dict[ModulePath, FileScope] = {}
		# Declaring modules per type name, in ingestion order.
		self.type_locations: Dict[str, List[ModulePath]] = {}
		self.diagnostics: List[Diagnostic] = []

	def add_file(self, file: str, source: ast.SourceFile, module: Optional[ModulePath] = None) -> ModulePath:
		"""Register `file` and its inline mods; returns the file's module path."""
		if module is None:
			base = self.base if self.base is not None else Path(file).parent
			module = path_to_module(Path(file), base)
		self._add_scope(file, module, source.items)
		return module

	def _add_scope(self, file: str, module: ModulePath, items: Sequence[ast.Item]) -> None:
		existing = self.scopes.get(module)
		if existing is not None:
			self.diagnostics.append(
				warning(
					f"module '{'::'.join(module)}' is declared by both '{existing.file}' and '{file}'",
					phase="resolve",
					span=Span(file=file),
					notes=[f"keeping '{existing.file}'"],
				)
			)
			return
		scope = FileScope(file=file, module=module)
		self.scopes[module] = scope
		for item in items:
			if isinstance(item, (ast.StructItem, ast.EnumItem)):
				scope.local_types.add(item.name)
				self.type_locations.setdefault(item.name, []).append(module)
			elif isinstance(item, ast.UseItem):
				self._add_use(scope, item.tree)
			elif isinstance(item, ast.ModItem) and item.items is not None:
				self._add_scope(file, module + (item.name,), item.items)

	def _add_use(self, scope: FileScope, tree: ast.UseTree) -> None:
		for local, path in _flatten_use(tree, ()):
			target = _normalize(path, scope.module)
			if target is None:
				continue
			if local is None:
				scope.globs.append(target)
			else:
				scope.imports.setdefault(local, target)

	def scope(self, module: ModulePath) -> Optional[FileScope]:
		return self.scopes.get(module)

	def module_of(self, file: str) -> ModulePath:
		"""File-level module of an ingested file (the shortest one registered for it)."""
		modules = [m for m, s in self.scopes.items() if s.file == file]
		return min(modules, key=len) if modules else _ROOT

	# ---------- resolution ----------

	def resolve(self, reference: str, from_file: str, from_module: Optional[ModulePath] = None) -> Resolution:
		"""
		Resolve `reference` (`User`, `models::User`, `crate::a::User`) as written
		in `from_module` of `from_file`. Pure: repeated calls give equal results.
		"""
		module = from_module if from_module is not None else self.module_of(from_file)
		segments = [s for s in reference.split("::") if s]
		if not segments:
			return NotFound()
		scope = self.scopes.get(module)
		if len(segments) == 1:
			return self._resolve_bare(segments[0], module, scope)
		return self._resolve_qualified(segments, module, scope)

	def _resolve_bare(self, name: str, module: ModulePath, scope: Optional[FileScope]) -> Resolution:
		if scope is not None:
			if name in scope.local_types:
				return Found(scope.file, module, name)
			target = scope.imports.get(name)
			if target is not None:
				# An explicit import shadows globs and the global lookup.
				found = self._lookup_import(target, module)
				return found if found is not None else NotFound()
			for glob in scope.globs:
				for candidate in self._candidates(glob, module):
					found = self._lookup(candidate, name, set())
					if found is not None:
						return found
		return self._global_lookup(name, module)

	def _resolve_qualified(self, segments: List[str], module: ModulePath, scope: Optional[FileScope]) -> Resolution:
		head = segments[0]
		if scope is not None and head not in _ANCHORS and head in scope.imports:
			target = scope.imports[head]
			spliced = Import(target.path + tuple(segments[1:]), target.anchored)
			found = self._lookup_import(spliced, module)
			return found if found is not None else NotFound()
		if head in _ANCHORS:
			target = _normalize(segments, module)
		else:
			target = Import(module + tuple(segments))
		if target is None:
			return NotFound()
		found = self._lookup_import(target, module)
		return found if found is not None else NotFound()

	def _candidates(self, target: Import, module: ModulePath) -> List[ModulePath]:
		if target.anchored:
			return [target.path]
		return [module + target.path, _ROOT + target.path]

	def _lookup_import(self, target: Import, module: ModulePath) -> Optional[Found]:
		for path in self._candidates(target, module):
			if len(path) < 2:
				continue
			found = self._lookup(path[:-1], path[-1], set())
			if found is not None:
				return found
		return None

	def _lookup(self, module: ModulePath, name: str, seen: Set[Tuple[ModulePath, str]]) -> Optional[Found]:
		"""Find `name` declared in `module`, following that module's own re-exports."""
		if (module, name) in seen:
			return None
		seen.add((module, name))
		scope = self.scopes.get(module)
		if scope is None:
			return None
		if name in scope.local_types:
			return Found(scope.file, module, name)
		target = scope.imports.get(name)
		if target is not None:
			for path in self._candidates(target, module):
				if len(path) >= 2:
					found = self._lookup(path[:-1], path[-1], seen)
					if found is not None:
						return found
		for glob in scope.globs:
			for candidate in self._candidates(glob, module):
				found = self._lookup(candidate, name, seen)
				if found is not None:
					return found
		return None

	def _global_lookup(self, name: str, module: ModulePath) -> Resolution:
		modules = self.type_locations.get(name, [])
		candidates = sorted({(self.scopes[m].file, m) for m in modules})
		if not candidates:
			return NotFound()
		if len(candidates) == 1:
			file, found_module = candidates[0]
			return Found(file, found_module, name)
		siblings = [
			(file, m)
			for file, m in candidates
			if len(m) >= 2 and len(module) >= 2 and m[:-1] == module[:-1]
		]
		if len(siblings) == 1:
			file, found_module = siblings[0]
			return Found(file, found_module, name)
		return Ambiguous(
			files=tuple(file for file, _ in candidates),
			modules=tuple(m for _, m in candidates),
		)


__all__ = [
	"path_to_module",
	"Import",
	"FileScope",
	"Found",
	"NotFound",
	"Ambiguous",
	"Resolution",
	"ModuleResolver",
]
