"""Render extracted structs and inferred services into a proto3 document."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from jinja2 import Environment, FileSystemLoader

from ..errors import EmitError
from ..logging import get_logger
from ..models import AggregateType
from .services import rpc_methods
from .type_mapper import map_type

SCHEMA_TEMPLATE = "schema.proto.j2"


def _current_umask() -> int:
    # os.umask can only be read by setting it.
    mask = os.umask(0)
    os.umask(mask)
    return mask


@dataclass
class FieldLine:
    type: str
    name: str
    number: int


@dataclass
class MessageBlock:
    name: str
    fields: List[FieldLine] = field(default_factory=list)


@dataclass
class ServiceBlock:
    name: str
    methods: List[str]


class SchemaEmitter:
    """Writes one ``.proto`` document per Go source file."""

    def __init__(
        self,
        gen_folder: Path | str,
        *,
        package: str = "proto",
        require_pairs: bool = False,
        templates_dir: Path | None = None,
    ) -> None:
        self.gen_folder = Path(gen_folder).as_posix()
        self.package = package
        self.require_pairs = require_pairs
        self.logger = get_logger("schema")
        self._env = self._create_env(templates_dir)
        # Read once at construction, before any attempt threads exist.
        self._file_mode = 0o666 & ~_current_umask()

    def render(self, aggregates: Mapping[str, AggregateType], services: Mapping[str, int]) -> str:
        """Return the schema document text without touching the filesystem."""
        known_names = frozenset(aggregates)
        messages = [
            MessageBlock(
                name=name,
                fields=[
                    FieldLine(
                        type=map_type(struct_field.type_expr, known_names),
                        name=struct_field.serialized_name,
                        number=number,
                    )
                    for number, struct_field in enumerate(aggregate.fields, start=1)
                ],
            )
            for name, aggregate in aggregates.items()
        ]
        template = self._env.get_template(SCHEMA_TEMPLATE)
        return template.render(
            package=self.package,
            gen_folder=self.gen_folder,
            messages=messages,
            service=self._service_block(dict(services)),
        )

    def emit(
        self,
        output_path: Path,
        aggregates: Mapping[str, AggregateType],
        services: Mapping[str, int],
    ) -> Path:
        """Render and atomically replace ``output_path`` with the new document."""
        document = self.render(aggregates, services)
        output_path = Path(output_path)
        try:
            handle = tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=output_path.parent,
                prefix=f".{output_path.name}.",
                suffix=".tmp",
                delete=False,
            )
        except OSError as exc:
            raise EmitError(f"Failed to create proto file: {output_path.name} {exc}") from exc

        tmp_path = Path(handle.name)
        try:
            with handle:
                handle.write(document)
            os.chmod(tmp_path, self._file_mode)
            os.replace(tmp_path, output_path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise EmitError(f"Failed to write proto file: {output_path.name} {exc}") from exc

        self.logger.debug(
            "Wrote %s (%d messages, %d service candidates)",
            output_path,
            len(aggregates),
            len(services),
        )
        return output_path

    def _service_block(self, services: Dict[str, int]) -> Optional[ServiceBlock]:
        methods = rpc_methods(services, require_pairs=self.require_pairs)
        if not methods:
            return None
        return ServiceBlock(name=f"{methods[0]}Service", methods=methods)

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )


__all__ = ["SchemaEmitter", "SCHEMA_TEMPLATE"]
