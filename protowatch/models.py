"""Core data models shared across protowatch components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union


@dataclass(frozen=True)
class Ident:
    """A bare type identifier: a builtin scalar or a struct declared in the same file."""

    name: str


@dataclass(frozen=True)
class Qualified:
    """A package-qualified type such as ``time.Time``."""

    package: str
    name: str


@dataclass(frozen=True)
class Slice:
    """A slice or array of ``element``."""

    element: "TypeExpr"


@dataclass(frozen=True)
class Opaque:
    """Any other type shape (pointer, map, func, channel, inline struct...)."""

    text: str


TypeExpr = Union[Ident, Qualified, Slice, Opaque]


@dataclass(frozen=True)
class Field:
    """A single struct field as declared in Go source."""

    name: str
    type_expr: TypeExpr
    serialized_name: str


@dataclass
class AggregateType:
    """A named struct declaration with its fields in declaration order."""

    name: str
    fields: List[Field] = field(default_factory=list)


@dataclass(frozen=True)
class GenerationJob:
    """One pending translation of a Go source file into a schema document."""

    source_path: Path
    output_dir: Path

    @property
    def base_name(self) -> str:
        return self.source_path.stem

    @property
    def schema_path(self) -> Path:
        return self.output_dir / f"{self.base_name}.proto"


@dataclass(frozen=True)
class Completion:
    """Signal that a schema document was written and is ready to compile."""

    base_name: str
    output_dir: Path

    @property
    def schema_path(self) -> Path:
        return self.output_dir / f"{self.base_name}.proto"
