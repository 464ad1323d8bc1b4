"""Tests for the Go -> proto type mapper."""

from __future__ import annotations

import pytest

from protowatch.models import Ident, Opaque, Qualified, Slice
from protowatch.schema.type_mapper import SCALAR_TYPES, TIMESTAMP_TYPE, map_type


@pytest.mark.parametrize(
    ("go_type", "proto_type"),
    [
        ("int", "int32"),
        ("int32", "int32"),
        ("int64", "int64"),
        ("uint", "uint32"),
        ("uint32", "uint32"),
        ("uint64", "uint64"),
        ("float32", "float"),
        ("float64", "double"),
        ("string", "string"),
        ("bool", "bool"),
    ],
)
def test_scalars_use_fixed_table(go_type: str, proto_type: str) -> None:
    assert map_type(Ident(go_type)) == proto_type


@pytest.mark.parametrize("go_type", ["int8", "uint16", "byte", "rune", "complex64", "any", "Unknown"])
def test_unrecognized_identifiers_fall_back_to_string(go_type: str) -> None:
    assert go_type not in SCALAR_TYPES
    assert map_type(Ident(go_type)) == "string"


def test_known_struct_names_are_referenced_verbatim() -> None:
    known = frozenset({"Addresses", "ChildrenList"})
    assert map_type(Ident("Addresses"), known) == "Addresses"
    assert map_type(Ident("Other"), known) == "string"


def test_known_names_take_precedence_over_scalars() -> None:
    assert map_type(Ident("string"), frozenset({"string"})) == "string"
    assert map_type(Ident("int"), frozenset({"int"})) == "int"


def test_time_time_maps_to_timestamp_and_other_qualified_fall_back() -> None:
    assert map_type(Qualified("time", "Time")) == TIMESTAMP_TYPE
    assert map_type(Qualified("time", "Duration")) == "string"
    assert map_type(Qualified("sql", "Time")) == "string"


def test_sequences_map_recursively() -> None:
    known = frozenset({"Addresses"})
    assert map_type(Slice(Ident("float32"))) == "repeated float"
    assert map_type(Slice(Ident("Addresses")), known) == "repeated Addresses"
    assert map_type(Slice(Qualified("time", "Time"))) == f"repeated {TIMESTAMP_TYPE}"
    assert map_type(Slice(Slice(Ident("int64")))) == "repeated repeated int64"
    assert map_type(Slice(Opaque("*User"))) == "repeated string"


def test_sequence_mapping_holds_at_any_depth() -> None:
    expr = Ident("bool")
    for depth in range(1, 6):
        expr = Slice(expr)
        assert map_type(expr) == "repeated " * depth + "bool"
        assert map_type(expr) == "repeated " + map_type(expr.element)


def test_opaque_shapes_fall_back_to_string() -> None:
    assert map_type(Opaque("map[string]int")) == "string"
    assert map_type(Opaque("*User"), frozenset({"User"})) == "string"
