"""File watching for Portatheme builds.

Watches every theme directory in a chain and re-runs only the build task
whose files changed: static assets re-run the copy, Sass sources re-run the
stylesheet compile, scripts re-run the bundle. The output directory is never
cleaned while watching.

Key classes:
- TaskRunner: Runs one build task, coalescing bursts of changes.
- ThemeChangeHandler: Maps file system events to task runners.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .chain import WatchPaths, match_glob

_CHANGE_EVENTS = {
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
}


class TaskRunner:
    """Runs a build task in response to file changes.

    Changes arriving within ``debounce`` seconds of each other trigger a
    single run. A change that arrives while the task is running schedules
    exactly one more run once it finishes.
    """

    def __init__(self, name: str, task: Callable[[], object], debounce: float = 0.1):
        self.name = name
        self.task = task
        self.debounce = debounce
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._running = False
        self._pending = False

    def trigger(self) -> None:
        with self._lock:
            if self._running:
                self._pending = True
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self._run)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = False

    def _run(self) -> None:
        with self._lock:
            self._timer = None
            self._running = True
        try:
            print(f"Change detected; re-running {self.name}...")
            self.task()
        except Exception as exc:
            # Keep watching; the next change gets another attempt.
            print(f"{self.name} failed: {exc}")
        finally:
            with self._lock:
                self._running = False
                rerun = self._pending
                self._pending = False
        if rerun:
            self.trigger()


class ThemeChangeHandler(FileSystemEventHandler):
    """Dispatches file changes to the runner of each matching category."""

    def __init__(
        self,
        paths: WatchPaths,
        runners: dict[str, TaskRunner],
        ignore: Iterable[Path] = (),
    ):
        super().__init__()
        self.patterns = {
            "assets": paths.assets,
            "styles": paths.styles,
            "scripts": paths.scripts,
        }
        self.runners = runners
        self.ignore = [Path(path) for path in ignore]

    def on_any_event(self, event):
        if event.is_directory or event.event_type not in _CHANGE_EVENTS:
            return
        changed = [event.src_path]
        if getattr(event, "dest_path", ""):
            changed.append(event.dest_path)
        changed = [path for path in map(Path, changed) if not self._ignored(path)]
        for category, patterns in self.patterns.items():
            runner = self.runners.get(category)
            if runner is None:
                continue
            if any(match_glob(pattern, path) for path in changed for pattern in patterns):
                runner.trigger()

    def _ignored(self, path: Path) -> bool:
        if "node_modules" in path.parts:
            return True
        for ignored in self.ignore:
            try:
                path.relative_to(ignored)
                return True
            except ValueError:
                pass
        return False


def start_observer(chain: Iterable[Path], handler: ThemeChangeHandler) -> Observer:
    """Schedule ``handler`` on every existing theme directory and start watching."""
    observer = Observer()
    for location in chain:
        if location.exists():
            observer.schedule(handler, str(location), recursive=True)
    observer.start()
    return observer
