"""
tauri_codegen.core: shared types used across extraction, resolution and rendering.

Modules:
  - diagnostics: Span/Diagnostic and JSON rendering
  - type_expr: TypeExpr sum type (TPrimitive, TList, ...)
  - records: EntryPoint/ExportedStruct/ExportedEnum and wire shapes
  - casing: camelCase and serde rename_all conversions
  - known_types: primitive/well-known Rust type tables
"""

__all__ = [
	"diagnostics",
	"type_expr",
	"records",
	"casing",
	"known_types",
]
