"""CLI entrypoints for protowatch commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .compiler import SchemaCompiler
from .config import ConfigError, ProtoWatchConfig, ensure_directories, load_config
from .generator import SchemaGenerator
from .logging import configure_logging, get_logger
from .pipeline import StatusBoard, WatchPipeline


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        default=".",
        help="Path to proto-watch.yaml or the directory containing it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protowatch",
        description="Watch Go sources and synthesize proto3 schemas from their structs.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write detailed logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    watch_parser = subparsers.add_parser(
        "watch",
        help="Generate schemas for existing files, then regenerate on every change.",
    )
    _add_verbose_option(watch_parser, suppress_default=True)
    _add_config_option(watch_parser)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate schemas for the given Go files once and exit.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_config_option(generate_parser)
    generate_parser.add_argument(
        "files",
        nargs="+",
        help="Go source files to translate.",
    )
    generate_parser.add_argument(
        "--no-compile",
        action="store_true",
        help="Write the .proto files without invoking protoc or the TypeScript generator.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for protowatch commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    try:
        config = load_config(Path(args.config))
        ensure_directories(config)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "watch":
        _run_watch(parser, config)
    elif args.command == "generate":
        if getattr(args, "no_compile", False):
            config.compiler.enabled = False
        produced = _run_generate(config, [Path(name) for name in args.files])
        if produced == 0:
            parser.exit(1, "No schema was generated.\n")
        print(f"Generated {produced} schema file(s) in {_relativize(config.out_folder)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_watch(parser: argparse.ArgumentParser, config: ProtoWatchConfig) -> None:
    logger = get_logger("cli")
    status = StatusBoard()
    status.subscribe(lambda line: logger.info("Status: %s", line))
    logger.info("Status: %s", status.get())

    pipeline = WatchPipeline(config, status=status)
    try:
        pipeline.run_forever()
    except OSError as exc:
        parser.exit(1, f"protowatch watch failed: {exc}\nRun with --verbose for more details.\n")


def _run_generate(config: ProtoWatchConfig, files: list[Path]) -> int:
    generator = SchemaGenerator.from_config(config)
    compiler = SchemaCompiler.from_config(config)
    produced = 0
    for path in files:
        if not config.is_source_file(path.name):
            get_logger("cli").warning("Skipping %s: not a %s source file", path, config.source_suffix)
            continue
        completion = generator.generate(generator.job_for(path))
        if completion is None:
            continue
        produced += 1
        compiler.compile(completion)
    return produced


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
