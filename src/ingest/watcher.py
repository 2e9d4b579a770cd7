"""
Watch the posts directory and run the pipeline serially.

RunScheduler is a three-state machine: idle, processing, and processing with
a pending rerun. Triggers that arrive while a run is in progress collapse
into a single rerun, so at most one run executes at a time and no trigger is
lost.
"""

import threading
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from common.logger import get_logger

from .archive import is_archive

logger = get_logger(__name__)


class RunScheduler:
    """Serializes pipeline runs and coalesces triggers that arrive mid-run.

    Example:
        >>> scheduler = RunScheduler(pipeline.process_latest_archive)
        >>> scheduler.trigger("file change")
    """

    def __init__(self, run: Callable[[], object]):
        self.run = run
        self._lock = threading.Lock()
        self._processing = False
        self._rerun_requested = False
        self.runs_completed = 0

    @property
    def state(self) -> str:
        with self._lock:
            if not self._processing:
                return "idle"
            return "pending-rerun" if self._rerun_requested else "processing"

    def trigger(self, reason: str) -> None:
        """Run now, or flag a rerun if a run is already in progress.

        Blocks the calling thread until the run (and any reruns it
        accumulates) finishes. Callers that only flag a rerun return at once.
        """
        logger.debug(f"Trigger: {reason}")
        with self._lock:
            if self._processing:
                self._rerun_requested = True
                return
            self._processing = True

        while True:
            self._run_once()
            with self._lock:
                if not self._rerun_requested:
                    self._processing = False
                    return
                self._rerun_requested = False
            logger.debug("Trigger: queued rerun")

    def _run_once(self) -> None:
        try:
            self.run()
        except Exception:
            logger.error("Processing the latest archive failed", exc_info=True)
        finally:
            self.runs_completed += 1


class Debouncer:
    """Calls a function once a burst of calls has been quiet for `delay_ms`."""

    def __init__(self, func: Callable[[], None], delay_ms: int):
        self.func = func
        self.delay = delay_ms / 1000
        self._timer: threading.Timer | None = None
        # Timers whose call may still be running after a newer one replaced them
        self._started: list[threading.Timer] = []
        self._lock = threading.Lock()

    def __call__(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self.func)
            self._timer.daemon = True
            self._timer.start()
            self._started = [t for t in self._started if t.is_alive()]
            self._started.append(self._timer)

    def cancel(self, wait: bool = False) -> None:
        """Drop a pending call. With `wait`, also block until calls already
        running on timer threads return."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            started, self._started = self._started, []
        if not wait:
            return
        for timer in started:
            if timer is not threading.current_thread():
                timer.join()


class ArchiveEventHandler(FileSystemEventHandler):
    """Forwards create/modify/move events for archive files to a callback."""

    def __init__(self, on_archive_event: Callable[[], None]):
        super().__init__()
        self.on_archive_event = on_archive_event

    def _handle(self, path: str | bytes) -> None:
        if isinstance(path, bytes):
            path = path.decode()
        if is_archive(Path(path)):
            self.on_archive_event()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle(event.dest_path)


class ArchiveWatcher:
    """Observes the posts directory and feeds debounced triggers to a scheduler."""

    def __init__(
        self,
        posts_dir: Path,
        scheduler: RunScheduler,
        debounce_ms: int,
        polling: bool = False,
        poll_interval: float = 1.0,
    ):
        self.posts_dir = posts_dir
        self.scheduler = scheduler
        self.debouncer = Debouncer(lambda: scheduler.trigger("file change"), debounce_ms)
        self.observer = PollingObserver(timeout=poll_interval) if polling else Observer()

    def start(self) -> None:
        self.posts_dir.mkdir(parents=True, exist_ok=True)
        self.observer.schedule(
            ArchiveEventHandler(self.debouncer), str(self.posts_dir), recursive=False
        )
        self.observer.start()
        logger.info(f"Watching {self.posts_dir.resolve()}")
        # Pick up anything dropped while the watcher was not running
        self.debouncer()

    def stop(self) -> None:
        """Stop observing, then wait for a run in progress so its staging
        directory is cleaned up before the process exits."""
        self.observer.stop()
        self.observer.join()
        self.debouncer.cancel(wait=True)
