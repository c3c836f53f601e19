"""
tauri_codegen.generator: TypeScript rendering.

Modules:
  - type_mapper: TypeExpr -> TypeScript type text
  - types_gen: types.ts (interfaces and wire-shaped enum unions)
  - commands_gen: commands.ts (typed `invoke` wrappers)
"""

from tauri_codegen.generator.commands_gen import render_commands
from tauri_codegen.generator.type_mapper import TypeMapper
from tauri_codegen.generator.types_gen import render_types

__all__ = ["TypeMapper", "render_commands", "render_types"]
