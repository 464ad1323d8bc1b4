"""One generation attempt: extract structs, infer services, emit the schema."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import ProtoWatchConfig
from .errors import EmitError, ExtractionError
from .logging import get_logger
from .models import Completion, GenerationJob
from .parsing import GoStructExtractor
from .schema import SchemaEmitter, collect_services


class SchemaGenerator:
    """Runs the extract -> infer -> emit chain for a single Go source file."""

    def __init__(
        self,
        output_dir: Path,
        *,
        extractor: GoStructExtractor | None = None,
        emitter: SchemaEmitter | None = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.extractor = extractor or GoStructExtractor()
        self.emitter = emitter or SchemaEmitter("gen")
        self.logger = get_logger("generator")

    @classmethod
    def from_config(cls, config: ProtoWatchConfig) -> "SchemaGenerator":
        emitter = SchemaEmitter(
            config.gen_folder,
            package=config.package,
            require_pairs=config.require_pairs,
            templates_dir=config.templates_dir,
        )
        return cls(config.out_folder, emitter=emitter)

    def job_for(self, source_path: Path) -> GenerationJob:
        return GenerationJob(source_path=Path(source_path), output_dir=self.output_dir)

    def generate(self, job: GenerationJob) -> Optional[Completion]:
        """Return a completion when a schema was written, or None when nothing was emitted."""
        try:
            structs = self.extractor.extract(job.source_path)
        except ExtractionError as exc:
            self.logger.warning("%s", exc)
            return None

        if not structs:
            self.logger.debug("No structs found in %s; nothing to emit", job.source_path)
            return None

        services = collect_services(structs)
        try:
            self.emitter.emit(job.schema_path, structs, services)
        except EmitError as exc:
            self.logger.error("%s", exc)
            return None

        self.logger.info("Proto file created: %s", job.schema_path)
        return Completion(base_name=job.base_name, output_dir=job.output_dir)


__all__ = ["SchemaGenerator"]
