"""Go struct tag helpers."""

from __future__ import annotations

import json
from typing import Optional


def unquote_tag_literal(literal: str) -> str:
    """Strip the Go string-literal quoting around a struct tag."""
    if len(literal) >= 2 and literal[0] == "`" and literal[-1] == "`":
        return literal[1:-1]
    if len(literal) >= 2 and literal[0] == '"' and literal[-1] == '"':
        try:
            value = json.loads(literal)
        except ValueError:
            return literal[1:-1]
        return value if isinstance(value, str) else literal[1:-1]
    return literal


def lookup_tag(tag: str, key: str) -> Optional[str]:
    """Return the value stored under ``key`` in a conventional ``key:"value"`` tag.

    Mirrors ``reflect.StructTag.Lookup``: scanning stops at the first
    malformed pair, and ``None`` means the key is absent.
    """
    while tag:
        tag = tag.lstrip(" ")
        if not tag:
            break

        i = 0
        while i < len(tag) and tag[i] > " " and tag[i] not in ':"' and tag[i] != "\x7f":
            i += 1
        if i == 0 or i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
            break
        name = tag[:i]
        tag = tag[i + 1 :]

        i = 1
        while i < len(tag) and tag[i] != '"':
            if tag[i] == "\\":
                i += 1
            i += 1
        if i >= len(tag):
            break
        quoted = tag[: i + 1]
        tag = tag[i + 1 :]

        if name == key:
            try:
                value = json.loads(quoted)
            except ValueError:
                return None
            return value if isinstance(value, str) else None
    return None


def serialized_name(field_name: str, tag: Optional[str]) -> str:
    """Resolve the wire name of a field from its ``json`` tag.

    A ``-`` tag falls back to the declared name instead of dropping the field.
    """
    if not tag:
        return field_name
    value = lookup_tag(tag, "json")
    if not value:
        return field_name
    name = value.split(",", 1)[0]
    if not name or name == "-":
        return field_name
    return name


__all__ = ["lookup_tag", "serialized_name", "unquote_tag_literal"]
