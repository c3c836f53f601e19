"""
tauri_codegen.extract: parsed source -> command and serializable type records.

Modules:
  - attributes: typed scan of `#[...]` attributes (derive, serde, command, ts)
  - type_lowering: syntax-level types -> TypeExpr
  - entry_points: `#[tauri::command]` functions -> EntryPoint
  - serde_types: Serialize/Deserialize structs and enums -> ExportedType
"""

from tauri_codegen.extract.entry_points import extract_entry_points
from tauri_codegen.extract.serde_types import DetectionMode, collect_serde_impls, extract_exported_types

__all__ = [
	"DetectionMode",
	"collect_serde_impls",
	"extract_entry_points",
	"extract_exported_types",
]
