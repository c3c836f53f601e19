# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic structure shared by every pass.

Passes never print; they append `Diagnostic` objects to the run's sink and the
CLI decides how to render them (human-readable or `--json`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Best-effort source location (file/line/column); Span() denotes unknown."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None

	@classmethod
	def at(cls, file: object, loc: Any = None) -> "Span":
		"""Build a span for `file` from a parser `Located` (or anything with line/column)."""
		return cls(
			file=str(file) if file is not None else None,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
		)

	def render(self) -> str:
		line = "?" if self.line is None else str(self.line)
		column = "?" if self.column is None else str(self.column)
		return f"{self.file or '<unknown>'}:{line}:{column}"


@dataclass
class Diagnostic:
	"""A generator diagnostic (error/warning/note)."""

	message: str
	code: str | None = None
	# Pass that emitted the diagnostic: parser, extract, mapper, resolve, config.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	@property
	def is_error(self) -> bool:
		return self.severity == "error"


def warning(message: str, *, phase: str, span: Span | None = None, code: str | None = None, notes: list[str] | None = None) -> Diagnostic:
	return Diagnostic(
		message=message,
		code=code,
		phase=phase,
		severity="warning",
		span=span or Span(),
		notes=list(notes or []),
	)


def has_errors(diagnostics: list[Diagnostic]) -> bool:
	return any(d.is_error for d in diagnostics)


def format_diagnostic(diag: Diagnostic) -> str:
	"""Render `file:line:col: severity: message` followed by indented notes."""
	lines = [f"{diag.span.render()}: {diag.severity}: {diag.message}"]
	for note in diag.notes:
		lines.append(f"  note: {note}")
	return "\n".join(lines)


def diagnostic_to_json(diag: Diagnostic) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	return {
		"phase": diag.phase,
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": diag.span.file,
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}


__all__ = [
	"Span",
	"Diagnostic",
	"warning",
	"has_errors",
	"format_diagnostic",
	"diagnostic_to_json",
]
