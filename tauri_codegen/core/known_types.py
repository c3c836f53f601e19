# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fixed tables of Rust type names the generator understands without looking at
any declaration.

Names are matched on the last path segment, so `chrono::DateTime<Utc>` and
`DateTime` are the same entry.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional

STRING_TYPES: FrozenSet[str] = frozenset({"String", "str", "char"})

NUMBER_TYPES: FrozenSet[str] = frozenset(
	{
		"i8",
		"i16",
		"i32",
		"i64",
		"i128",
		"isize",
		"u8",
		"u16",
		"u32",
		"u64",
		"u128",
		"usize",
		"f32",
		"f64",
	}
)

BOOL_TYPES: FrozenSet[str] = frozenset({"bool"})

# Third-party and std types whose serde representation is a string.
EXTERNAL_STRING_TYPES: FrozenSet[str] = frozenset(
	{
		# chrono
		"DateTime",
		"NaiveDateTime",
		"NaiveDate",
		"NaiveTime",
		# time
		"OffsetDateTime",
		"PrimitiveDateTime",
		"Date",
		"Time",
		# uuid
		"Uuid",
		# rust_decimal / bigdecimal
		"Decimal",
		"BigDecimal",
		# std::path
		"PathBuf",
		"Path",
		# std::net
		"IpAddr",
		"Ipv4Addr",
		"Ipv6Addr",
		# url
		"Url",
	}
)

# Names with a fixed, non-string mapping.
SPECIAL_TYPES: Dict[str, str] = {
	"Duration": "number",
	"Value": "unknown",
	"Bytes": "number[]",
}

# Generic containers lowered structurally (see extract.type_lowering).
LIST_TYPES: FrozenSet[str] = frozenset({"Vec", "VecDeque", "LinkedList", "HashSet", "BTreeSet", "IndexSet"})
MAP_TYPES: FrozenSet[str] = frozenset({"HashMap", "BTreeMap", "IndexMap"})
OPTION_TYPES: FrozenSet[str] = frozenset({"Option"})
RESULT_TYPES: FrozenSet[str] = frozenset({"Result"})
# serde serializes these as their contents.
TRANSPARENT_TYPES: FrozenSet[str] = frozenset({"Box", "Arc", "Rc", "Cow"})

# Parameters Tauri injects into commands; callers never pass them.
INJECTED_HANDLE_TYPES: FrozenSet[str] = frozenset({"State", "Window", "AppHandle", "Webview", "WebviewWindow"})


def primitive_ts(name: str) -> Optional[str]:
	"""TypeScript spelling of a primitive/well-known name, or None."""
	if name in STRING_TYPES or name in EXTERNAL_STRING_TYPES:
		return "string"
	if name in NUMBER_TYPES:
		return "number"
	if name in BOOL_TYPES:
		return "boolean"
	return SPECIAL_TYPES.get(name)


def is_primitive(name: str) -> bool:
	return primitive_ts(name) is not None


__all__ = [
	"STRING_TYPES",
	"NUMBER_TYPES",
	"BOOL_TYPES",
	"EXTERNAL_STRING_TYPES",
	"SPECIAL_TYPES",
	"LIST_TYPES",
	"MAP_TYPES",
	"OPTION_TYPES",
	"RESULT_TYPES",
	"TRANSPARENT_TYPES",
	"INJECTED_HANDLE_TYPES",
	"primitive_ts",
	"is_primitive",
]
