"""Tests for Go struct tag handling."""

from __future__ import annotations

import pytest

from protowatch.parsing.tags import lookup_tag, serialized_name, unquote_tag_literal


def test_unquote_raw_and_interpreted_literals() -> None:
    assert unquote_tag_literal('`json:"id"`') == 'json:"id"'
    assert unquote_tag_literal('"json:\\"id\\""') == 'json:"id"'


def test_lookup_tag_finds_key_among_several() -> None:
    tag = 'db:"user_id" json:"id,omitempty" yaml:"ident"'
    assert lookup_tag(tag, "json") == "id,omitempty"
    assert lookup_tag(tag, "db") == "user_id"
    assert lookup_tag(tag, "xml") is None


def test_lookup_tag_stops_at_malformed_pair() -> None:
    assert lookup_tag('broken json:"id"', "json") is None


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        (None, "Email"),
        ('json:"email"', "email"),
        ('json:"email,omitempty"', "email"),
        ('json:",omitempty"', "Email"),
        ('json:"-"', "Email"),
        ('db:"email"', "Email"),
    ],
)
def test_serialized_name_prefers_json_tag(tag: str | None, expected: str) -> None:
    assert serialized_name("Email", tag) == expected
