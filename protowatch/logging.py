"""Logging for the watch pipeline.

Generation attempts and compiler runs execute on their own threads, so their
log lines interleave. Worker threads are named ``protowatch-<kind>-<base>``
and every record they emit is labelled with ``[<kind> <base>]`` on the
console and in the log file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

ROOT_LOGGER = "protowatch"
WORKER_PREFIX = f"{ROOT_LOGGER}-"

CONSOLE_FORMAT = "[protowatch] %(levelname)s %(worker)s%(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(worker)s%(message)s"


def get_logger(component: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")


def worker_thread_name(kind: str, base_name: str) -> str:
    """Name a pipeline worker thread so its records can be attributed."""
    return f"{WORKER_PREFIX}{kind}-{base_name}"


def parse_worker_thread_name(thread_name: str) -> Optional[Tuple[str, str]]:
    """Return ``(kind, base_name)`` for a pipeline worker thread, else None."""
    if not thread_name.startswith(WORKER_PREFIX):
        return None
    kind, sep, base_name = thread_name[len(WORKER_PREFIX):].partition("-")
    if not sep or not base_name:
        return None
    return kind, base_name


class WorkerFilter(logging.Filter):
    """Sets ``record.worker`` to the attempt label of the emitting thread."""

    def filter(self, record: logging.LogRecord) -> bool:
        parsed = parse_worker_thread_name(record.threadName or "")
        record.worker = f"[{parsed[0]} {parsed[1]}] " if parsed else ""
        return True


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [_handler(logging.StreamHandler(), CONSOLE_FORMAT, level)]
    if log_file is not None:
        handlers.append(
            _handler(logging.FileHandler(log_file, encoding="utf-8"), FILE_FORMAT, logging.DEBUG)
        )
    for handler in handlers:
        logger.addHandler(handler)
    return logger


def _handler(handler: logging.Handler, fmt: str, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.addFilter(WorkerFilter())
    handler.setFormatter(logging.Formatter(fmt))
    return handler


__all__ = [
    "WorkerFilter",
    "configure_logging",
    "get_logger",
    "parse_worker_thread_name",
    "worker_thread_name",
]
