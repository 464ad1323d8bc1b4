"""Invoke external schema compilers for freshly written proto files."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Sequence

from .config import CompilerConfig, ProtoWatchConfig
from .logging import get_logger
from .models import Completion


@dataclass
class CompileResult:
    """Outcome of one external compiler process."""

    command: List[str]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class SchemaCompiler:
    """Runs protoc and the TypeScript client generator against one schema document."""

    def __init__(
        self,
        config: CompilerConfig,
        *,
        gen_folder: Path,
        ts_gen_folder: Path,
        runner: Callable[[Sequence[str]], CompileResult] | None = None,
    ) -> None:
        self.config = config
        self.gen_folder = Path(gen_folder)
        self.ts_gen_folder = Path(ts_gen_folder)
        self.logger = get_logger("compiler")
        self._runner = runner or self._default_runner

    @classmethod
    def from_config(
        cls,
        config: ProtoWatchConfig,
        runner: Callable[[Sequence[str]], CompileResult] | None = None,
    ) -> "SchemaCompiler":
        return cls(
            config.compiler,
            gen_folder=config.gen_folder,
            ts_gen_folder=config.ts_gen_folder,
            runner=runner,
        )

    def compile(self, completion: Completion) -> List[CompileResult]:
        """Run every configured step; failures are logged and reported, never raised."""
        if not self.config.enabled:
            self.logger.debug("Compilation disabled; skipping %s", completion.schema_path)
            return []

        results: List[CompileResult] = []
        for step in self.commands(completion):
            result = self._runner(step)
            if result.ok:
                self.logger.info("%s succeeded for %s", step[0], completion.schema_path)
                if result.output.strip():
                    self.logger.debug("%s", result.output.strip())
            else:
                self.logger.error(
                    "%s failed for %s with exit code %d: %s",
                    step[0],
                    completion.schema_path,
                    result.returncode,
                    result.output.strip() or "(no output)",
                )
            results.append(result)
        return results

    def commands(self, completion: Completion) -> List[List[str]]:
        values = self._placeholders(completion)
        commands: List[List[str]] = []
        for template in (self.config.protoc, self.config.ts_generator):
            if template:
                commands.append([part.format(**values) for part in template])
        return commands

    def _placeholders(self, completion: Completion) -> Dict[str, str]:
        return {
            "base_name": completion.base_name,
            "schema_name": completion.schema_path.name,
            "schema_path": completion.schema_path.as_posix(),
            "out_folder": completion.output_dir.as_posix(),
            "gen_folder": self.gen_folder.as_posix(),
            "ts_gen_folder": self.ts_gen_folder.as_posix(),
        }

    @staticmethod
    def _default_runner(args: Sequence[str]) -> CompileResult:
        command = list(args)
        try:
            completed = subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            return CompileResult(command=command, returncode=127, output=f"Unable to locate '{command[0]}': {exc}")
        except OSError as exc:
            return CompileResult(command=command, returncode=126, output=str(exc))
        output = "\n".join(part for part in (completed.stdout, completed.stderr) if part)
        return CompileResult(command=command, returncode=completed.returncode, output=output)


__all__ = ["CompileResult", "SchemaCompiler"]
