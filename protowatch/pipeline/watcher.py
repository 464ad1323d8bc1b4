"""Watch a Go source folder and dispatch schema generation attempts."""

from __future__ import annotations

import os
import queue
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from ..compiler import SchemaCompiler
from ..config import ProtoWatchConfig
from ..generator import SchemaGenerator
from ..logging import get_logger, worker_thread_name
from ..models import Completion, GenerationJob
from .status import StatusBoard

_STOP = None


class PipelineState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    WATCHING = "watching"
    CLOSED = "closed"


class _SourceEventHandler(FileSystemEventHandler):
    """Forwards create/modify/move notifications to the pipeline."""

    def __init__(self, pipeline: "WatchPipeline") -> None:
        super().__init__()
        self._pipeline = pipeline

    def on_created(self, event: FileSystemEvent) -> None:
        self._forward(event, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._forward(event, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._forward(event, getattr(event, "dest_path", event.src_path))

    def _forward(self, event: FileSystemEvent, raw_path: str | bytes) -> None:
        if event.is_directory:
            return
        # An exception escaping here would stop the observer thread.
        try:
            self._pipeline.handle_change(Path(os.fsdecode(raw_path)))
        except Exception as exc:
            self._pipeline.logger.error("error: %s", exc)


class WatchPipeline:
    """Owns the watch subscription, the in-flight attempts, and the completion hand-off.

    Attempts run concurrently in daemon threads with no per-file exclusion.
    Completions pass through a single-slot queue to one consumer, which
    starts an independent compiler thread for each of them.
    """

    def __init__(
        self,
        config: ProtoWatchConfig,
        *,
        generator: SchemaGenerator | None = None,
        compiler: SchemaCompiler | None = None,
        status: StatusBoard | None = None,
        observer_factory: Callable[[], BaseObserver] = Observer,
    ) -> None:
        self.config = config
        self.generator = generator or SchemaGenerator.from_config(config)
        self.compiler = compiler or SchemaCompiler.from_config(config)
        self.status = status or StatusBoard()
        self.logger = get_logger("pipeline")
        self.state = PipelineState.IDLE
        self._observer_factory = observer_factory
        self._observer: Optional[BaseObserver] = None
        self._handler = _SourceEventHandler(self)
        self._completions: "queue.Queue[Optional[Completion]]" = queue.Queue(maxsize=1)
        self._consumer: Optional[threading.Thread] = None
        self._timers: Dict[Path, threading.Timer] = {}
        self._timers_lock = threading.Lock()
        self._folder_missing = False

    def start(self) -> List[threading.Thread]:
        """Subscribe to the folder, dispatch the initial backlog, and enter WATCHING."""
        if self.state is not PipelineState.IDLE:
            raise RuntimeError(f"Pipeline cannot start from state {self.state.value}")

        self.state = PipelineState.SCANNING
        self._start_observer()
        self._consumer = threading.Thread(
            target=self._consume_completions, name="protowatch-completions", daemon=True
        )
        self._consumer.start()

        attempts = self.scan()
        self.state = PipelineState.WATCHING
        self.logger.info("Monitoring folder: %s", self.config.watch_folder)
        return attempts

    def scan(self) -> List[threading.Thread]:
        """Dispatch one attempt for every source file already in the watched folder."""
        attempts: List[threading.Thread] = []
        for entry in sorted(self.config.watch_folder.iterdir()):
            if entry.is_file() and self.config.is_source_file(entry.name):
                self.logger.debug("Queueing existing file %s", entry.name)
                attempts.append(self.dispatch(entry))
        return attempts

    def handle_change(self, path: Path) -> Optional[threading.Thread]:
        """React to a create/modify notification for ``path``."""
        if self.state is PipelineState.CLOSED:
            return None
        self.status.set(f"File changed: {path}")
        if not self.config.is_source_file(path.name):
            return None
        if self.config.debounce_ms > 0:
            self._schedule(path)
            return None
        return self.dispatch(path)

    def dispatch(self, path: Path) -> threading.Thread:
        """Start a generation attempt for ``path`` in its own thread."""
        job = self.generator.job_for(path)
        thread = threading.Thread(
            target=self._run_attempt,
            args=(job,),
            name=worker_thread_name("gen", job.base_name),
            daemon=True,
        )
        thread.start()
        return thread

    def ensure_observer(self) -> None:
        """Resubscribe when the observer or one of its emitters has stopped.

        A deleted watch folder stops the emitter. It is reported once and the
        subscription is recreated when the folder comes back.
        """
        observer = self._observer
        if self.state is not PipelineState.WATCHING or observer is None:
            return
        if not self.config.watch_folder.is_dir():
            if not self._folder_missing:
                self._folder_missing = True
                self.logger.error("error: watched folder %s no longer exists", self.config.watch_folder)
            return
        if self._folder_missing:
            self.logger.info("Watched folder %s is back; resubscribing", self.config.watch_folder)
        elif self._observer_healthy(observer):
            return
        else:
            self.logger.error("error: watcher stopped unexpectedly; restarting")
        self._folder_missing = False
        self._restart_observer(observer)

    def run_forever(self, poll_interval: float = 1.0) -> None:
        """Block until interrupted, keeping the observer alive."""
        self.start()
        try:
            while True:
                time.sleep(poll_interval)
                self.ensure_observer()
        except KeyboardInterrupt:
            pass
        finally:
            self.close()

    def close(self) -> None:
        """Stop watching. In-flight attempts are not drained."""
        if self.state is PipelineState.CLOSED:
            return
        self.state = PipelineState.CLOSED

        with self._timers_lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

        observer = self._observer
        if observer is not None:
            observer.stop()
            observer.join(timeout=5)

        try:
            self._completions.put(_STOP, timeout=1)
        except queue.Full:
            self.logger.debug("Completion consumer busy during shutdown")

    def _start_observer(self) -> None:
        observer = self._observer_factory()
        observer.schedule(self._handler, str(self.config.watch_folder), recursive=False)
        observer.start()
        self._observer = observer

    @staticmethod
    def _observer_healthy(observer: BaseObserver) -> bool:
        return observer.is_alive() and all(emitter.is_alive() for emitter in observer.emitters)

    def _restart_observer(self, observer: BaseObserver) -> None:
        observer.stop()
        observer.join(timeout=5)
        try:
            self._start_observer()
        except OSError as exc:
            self.logger.error("error: could not resubscribe to %s: %s", self.config.watch_folder, exc)

    def _schedule(self, path: Path) -> None:
        key = path.resolve()
        timer = threading.Timer(self.config.debounce_seconds, self._fire, args=(key,))
        timer.daemon = True
        with self._timers_lock:
            previous = self._timers.pop(key, None)
            self._timers[key] = timer
        if previous is not None:
            previous.cancel()
        timer.start()

    def _fire(self, path: Path) -> None:
        # Runs on the timer thread; a superseded timer must not dispatch.
        with self._timers_lock:
            if self._timers.get(path) is not threading.current_thread():
                return
            del self._timers[path]
        if self.state is PipelineState.CLOSED:
            return
        self.dispatch(path)

    def _run_attempt(self, job: GenerationJob) -> None:
        try:
            completion = self.generator.generate(job)
        except Exception:
            self.logger.exception("Generation attempt for %s failed", job.source_path)
            return
        if completion is not None:
            self._completions.put(completion)

    def _consume_completions(self) -> None:
        while True:
            completion = self._completions.get()
            if completion is _STOP:
                break
            self.logger.debug("Compiling %s from %s", completion.base_name, completion.output_dir)
            threading.Thread(
                target=self._run_compiler,
                args=(completion,),
                name=worker_thread_name("compile", completion.base_name),
                daemon=True,
            ).start()

    def _run_compiler(self, completion: Completion) -> None:
        try:
            self.compiler.compile(completion)
        except Exception:
            self.logger.exception("Compiler invocation for %s failed", completion.schema_path)


__all__ = ["PipelineState", "WatchPipeline"]
