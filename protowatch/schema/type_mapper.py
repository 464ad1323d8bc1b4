"""Mapping from Go type expressions to proto3 field types."""

from __future__ import annotations

from typing import AbstractSet, Dict

from ..models import Ident, Opaque, Qualified, Slice, TypeExpr

FALLBACK_TYPE = "string"
TIMESTAMP_TYPE = "google.protobuf.Timestamp"

SCALAR_TYPES: Dict[str, str] = {
    "int": "int32",
    "int32": "int32",
    "int64": "int64",
    "uint": "uint32",
    "uint32": "uint32",
    "uint64": "uint64",
    "float32": "float",
    "float64": "double",
    "string": "string",
    "bool": "bool",
}


def map_type(expr: TypeExpr, known_names: AbstractSet[str] = frozenset()) -> str:
    """Return the proto type for ``expr``; unknown shapes widen to ``string``."""
    match expr:
        case Ident(name) if name in known_names:
            return name
        case Ident(name):
            return SCALAR_TYPES.get(name, FALLBACK_TYPE)
        case Qualified("time", "Time"):
            return TIMESTAMP_TYPE
        case Slice(element):
            return f"repeated {map_type(element, known_names)}"
        case Qualified() | Opaque():
            return FALLBACK_TYPE
    return FALLBACK_TYPE


__all__ = ["FALLBACK_TYPE", "SCALAR_TYPES", "TIMESTAMP_TYPE", "map_type"]
