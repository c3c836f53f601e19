# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Source discovery."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence


def is_excluded(rel: Path, exclude: Sequence[str]) -> bool:
	"""A pattern excludes a file when it occurs in the relative path or equals the file name."""
	text = rel.as_posix()
	return any(pat and (pat in text or pat == rel.name) for pat in exclude)


def scan_rust_files(source_dir: Path, exclude: Sequence[str] = ()) -> List[Path]:
	"""All `.rs` files under `source_dir`, sorted by path."""
	if not source_dir.is_dir():
		raise FileNotFoundError(f"source directory does not exist: {source_dir}")
	return sorted(
		p for p in source_dir.rglob("*.rs") if p.is_file() and not is_excluded(p.relative_to(source_dir), exclude)
	)


__all__ = ["is_excluded", "scan_rust_files"]
