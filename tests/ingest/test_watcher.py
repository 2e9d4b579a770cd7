"""Tests for the run scheduler, debouncer, and file event handling."""

import threading
import time

from watchdog.events import DirCreatedEvent, FileCreatedEvent, FileModifiedEvent, FileMovedEvent

from ingest.watcher import ArchiveEventHandler, ArchiveWatcher, Debouncer, RunScheduler


class TestRunScheduler:
    """Tests for the idle/processing/pending-rerun state machine."""

    def test_idle_trigger_runs_once(self):
        calls = []
        scheduler = RunScheduler(lambda: calls.append(1))

        scheduler.trigger("test")

        assert calls == [1]
        assert scheduler.state == "idle"

    def test_triggers_during_run_coalesce_into_one_rerun(self):
        """N triggers while busy produce exactly one extra run."""
        started = threading.Event()
        release = threading.Event()
        calls = []

        def run():
            calls.append(len(calls) + 1)
            if len(calls) == 1:
                started.set()
                release.wait(timeout=5)

        scheduler = RunScheduler(run)
        worker = threading.Thread(target=scheduler.trigger, args=("first",))
        worker.start()
        assert started.wait(timeout=5)
        assert scheduler.state == "processing"

        for i in range(5):
            scheduler.trigger(f"burst {i}")

        assert scheduler.state == "pending-rerun"
        release.set()
        worker.join(timeout=5)

        assert calls == [1, 2]
        assert scheduler.state == "idle"
        assert scheduler.runs_completed == 2

    def test_trigger_from_inside_run_schedules_rerun(self):
        calls = []
        scheduler = RunScheduler(lambda: None)

        def run():
            calls.append(1)
            if len(calls) == 1:
                scheduler.trigger("nested")
                scheduler.trigger("nested again")

        scheduler.run = run
        scheduler.trigger("first")

        assert len(calls) == 2

    def test_errors_are_logged_and_do_not_stop_scheduler(self, caplog):
        calls = []

        def run():
            calls.append(1)
            raise RuntimeError("pipeline exploded")

        scheduler = RunScheduler(run)
        scheduler.trigger("first")
        scheduler.trigger("second")

        assert len(calls) == 2
        assert scheduler.state == "idle"
        assert "failed" in caplog.text


class TestDebouncer:
    """Tests for Debouncer."""

    def test_burst_collapses_to_single_call(self):
        fired = threading.Event()
        calls = []

        def func():
            calls.append(1)
            fired.set()

        debouncer = Debouncer(func, delay_ms=50)
        for _ in range(10):
            debouncer()

        assert fired.wait(timeout=2)
        time.sleep(0.2)
        assert calls == [1]

    def test_cancel_prevents_call(self):
        calls = []
        debouncer = Debouncer(lambda: calls.append(1), delay_ms=50)

        debouncer()
        debouncer.cancel()
        time.sleep(0.2)

        assert calls == []

    def test_cancel_with_wait_blocks_until_running_call_returns(self):
        started = threading.Event()
        finished = threading.Event()

        def func():
            started.set()
            time.sleep(0.2)
            finished.set()

        debouncer = Debouncer(func, delay_ms=10)
        debouncer()
        assert started.wait(timeout=2)
        # A newer call replaces the running timer
        debouncer()
        debouncer.cancel(wait=True)

        assert finished.is_set()


class TestArchiveEventHandler:
    """Tests for file system event filtering."""

    def make_handler(self):
        events = []
        return ArchiveEventHandler(lambda: events.append(1)), events

    def test_archive_events_trigger(self, tmp_path):
        handler, events = self.make_handler()

        handler.on_created(FileCreatedEvent(str(tmp_path / "post.zip")))
        handler.on_modified(FileModifiedEvent(str(tmp_path / "POST.ZIP")))
        handler.on_moved(FileMovedEvent(str(tmp_path / "post.part"), str(tmp_path / "post.zip")))

        assert len(events) == 3

    def test_other_events_ignored(self, tmp_path):
        handler, events = self.make_handler()

        handler.on_created(FileCreatedEvent(str(tmp_path / "notes.txt")))
        handler.on_created(DirCreatedEvent(str(tmp_path / "folder.zip")))
        handler.on_moved(FileMovedEvent(str(tmp_path / "post.zip"), str(tmp_path / "post.bak")))

        assert events == []


class TestArchiveWatcher:
    """Tests for ArchiveWatcher start-up behavior."""

    def test_initial_trigger_on_start(self, tmp_path):
        ran = threading.Event()
        scheduler = RunScheduler(ran.set)
        watcher = ArchiveWatcher(tmp_path / "posts", scheduler, debounce_ms=10, polling=True)

        watcher.start()
        try:
            assert ran.wait(timeout=5)
        finally:
            watcher.stop()

        assert (tmp_path / "posts").is_dir()

    def test_stop_waits_for_run_in_progress(self, tmp_path):
        started = threading.Event()
        finished = threading.Event()

        def run():
            started.set()
            time.sleep(0.3)
            finished.set()

        watcher = ArchiveWatcher(tmp_path / "posts", RunScheduler(run), debounce_ms=10, polling=True)
        watcher.start()
        assert started.wait(timeout=5)

        watcher.stop()

        assert finished.is_set()
