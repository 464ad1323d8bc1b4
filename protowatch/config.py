"""Configuration loading for protowatch (proto-watch.yaml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError
from .logging import get_logger

CONFIG_FILENAME = "proto-watch.yaml"

DEFAULT_PROTOC_COMMAND = (
    "protoc",
    "--proto_path={out_folder}",
    "--go_out={gen_folder}",
    "--go_opt=paths=source_relative",
    "--go-grpc_out={gen_folder}",
    "--go-grpc_opt=paths=source_relative",
    "{schema_name}",
)

DEFAULT_TS_GENERATOR_COMMAND = (
    "pbjs",
    "{schema_path}",
    "--ts",
    "{ts_gen_folder}/{base_name}.pb.ts",
)

_REQUIRED_FOLDERS = ("watch-folder", "out-folder", "gen-folder")

_logger = get_logger("config")


@dataclass
class CompilerConfig:
    """Downstream compiler invocation settings."""

    enabled: bool = True
    protoc: List[str] = field(default_factory=lambda: list(DEFAULT_PROTOC_COMMAND))
    ts_generator: List[str] = field(default_factory=lambda: list(DEFAULT_TS_GENERATOR_COMMAND))


@dataclass
class ProtoWatchConfig:
    """Represents the settings defined in proto-watch.yaml."""

    watch_folder: Path
    out_folder: Path
    gen_folder: Path
    ts_gen_folder: Path = Path("ts-gen")
    package: str = "proto"
    source_suffix: str = ".go"
    generated_marker: str = ".pb.go"
    require_pairs: bool = False
    debounce_ms: int = 0
    templates_dir: Optional[Path] = None
    compiler: CompilerConfig = field(default_factory=CompilerConfig)

    @property
    def debounce_seconds(self) -> float:
        return max(self.debounce_ms, 0) / 1000.0

    def is_source_file(self, name: str) -> bool:
        """Return True for Go sources that are not previously generated artifacts."""
        return name.endswith(self.source_suffix) and self.generated_marker not in name


def load_config(config_path: Path | None = None) -> ProtoWatchConfig:
    """Load configuration from disk, resolving folders relative to the working directory."""
    config_file = _resolve_config_path(config_path or Path.cwd())
    if not config_file.exists():
        raise ConfigError(f"Error reading config file: {config_file} does not exist")

    data = _read_config(config_file)

    missing = [key for key in _REQUIRED_FOLDERS if not _as_str(data.get(key))]
    if missing:
        raise ConfigError(f"{config_file.name} is missing required keys: {', '.join(missing)}")

    compiler = CompilerConfig()
    compiler.enabled = _as_bool(data.get("compile"), default=True)
    protoc = _as_str_list(data.get("protoc"))
    if protoc:
        compiler.protoc = protoc
    ts_generator = _as_str_list(data.get("ts-generator"))
    if ts_generator:
        compiler.ts_generator = ts_generator

    debounce = _as_int(data.get("debounce-ms"))
    templates_dir = _as_str(data.get("templates-dir"))

    return ProtoWatchConfig(
        watch_folder=Path(str(data["watch-folder"])).expanduser(),
        out_folder=Path(str(data["out-folder"])).expanduser(),
        gen_folder=Path(str(data["gen-folder"])).expanduser(),
        ts_gen_folder=Path(_as_str(data.get("ts-gen-folder")) or "ts-gen").expanduser(),
        package=_as_str(data.get("package")) or "proto",
        source_suffix=_as_str(data.get("source-suffix")) or ".go",
        generated_marker=_as_str(data.get("generated-marker")) or ".pb.go",
        require_pairs=_as_bool(data.get("require-pairs"), default=False),
        debounce_ms=debounce if debounce is not None else 0,
        templates_dir=Path(templates_dir).expanduser() if templates_dir else None,
        compiler=compiler,
    )


def ensure_directories(config: ProtoWatchConfig) -> None:
    """Validate the watched folder and create output folders that do not exist yet."""
    if not config.watch_folder.is_dir():
        raise ConfigError(f"Folder does not exist: {config.watch_folder}")

    for folder in (config.out_folder, config.gen_folder, config.ts_gen_folder):
        if folder.exists():
            continue
        _logger.info("Folder does not exist: %s, creating", folder)
        try:
            folder.mkdir(parents=True)
        except OSError as exc:
            _logger.error("Error creating %s: %s", folder, exc)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Error reading config file: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CompilerConfig",
    "ConfigError",
    "ProtoWatchConfig",
    "ensure_directories",
    "load_config",
]
