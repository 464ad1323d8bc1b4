"""Go source parsing: struct extraction and tag handling."""

from .go_structs import GoStructExtractor, parse_type_expr
from .tags import lookup_tag, serialized_name

__all__ = ["GoStructExtractor", "lookup_tag", "parse_type_expr", "serialized_name"]
